"""
LLM Client

Wraps a provider with a default decoding policy and an optional system
prompt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from .determinism import DecodingPolicy

if TYPE_CHECKING:
    from .providers import LLMProvider

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Reply text plus the usage the provider reported."""
    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str = "stop"


class LLMClient:
    """
    Provider-agnostic chat client.

    Usage:
        client = LLMClient(create_provider("hyperbolic"), default_policy=PERFORMER_POLICY)
        reply = client.chat(
            [{"role": "user", "content": "Condition: ...\\nX post: ..."}],
            system_prompt="Respond with one word.",
        )
    """

    def __init__(
        self,
        provider: "LLMProvider",
        *,
        default_policy: Optional[DecodingPolicy] = None,
    ) -> None:
        self.provider = provider
        self.default_policy = default_policy or DecodingPolicy()

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: Optional[DecodingPolicy] = None,
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        """
        Send a chat request, prepending ``system_prompt`` when given.

        Provider exceptions propagate unchanged.
        """
        if system_prompt:
            messages = [{"role": "system", "content": system_prompt}] + messages

        response = self.provider.chat(messages, policy=policy or self.default_policy)
        logger.debug(
            f"{self.provider.name}/{self.provider.model} replied "
            f"({response.input_tokens}+{response.output_tokens} tokens, finish={response.finish_reason})"
        )
        return response
