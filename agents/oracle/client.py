"""
Oracle Client

Asks an LLM for a one-word categorical judgment on a prompt. The performer
and validator nodes each own an independently configured instance.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from agents.base import AgentCapability, AgentRole, BaseAgent
from core.concurrency import call_with_timeout
from core.llm import (
    LLMClient,
    DecodingPolicy,
    PERFORMER_POLICY,
    VALIDATOR_POLICY,
    create_llm_client,
)
from core.schemas import RESULT_UNDETERMINED, OracleUnavailable

from .prompts import PERFORMER_SYSTEM_PROMPT, VALIDATOR_SYSTEM_PROMPT

if TYPE_CHECKING:
    from core.config.runtime import LLMConfig


def normalize_result(raw: str) -> str:
    """
    Normalize an oracle reply for comparison and storage.

    A blank reply means the model could not decide.

    Example:
        >>> normalize_result("  YES  \\n")
        'yes'
        >>> normalize_result("   ")
        'undetermined'
    """
    return (raw or "").strip().lower() or RESULT_UNDETERMINED


@dataclass(frozen=True)
class Judgment:
    """A normalized oracle reply plus the provider's raw text."""
    result: str
    raw_response: str
    provider: str = ""
    model: str = ""


class OracleClient(BaseAgent):
    """
    One-word judgment oracle.

    ``judge`` never retries; any provider failure or timeout raises
    ``OracleUnavailable``. A blank reply is a judgment of ``undetermined``.
    """

    _version = "v1"
    _capabilities = {AgentCapability.LLM, AgentCapability.NETWORK}

    def __init__(
        self,
        llm: LLMClient,
        *,
        role: AgentRole = AgentRole.PERFORMER,
        system_prompt: Optional[str] = None,
        policy: Optional[DecodingPolicy] = None,
        timeout_s: Optional[float] = 60.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(name=f"OracleClient[{role.value}]")
        self.llm = llm
        self.role = role
        if system_prompt is None:
            system_prompt = (
                PERFORMER_SYSTEM_PROMPT if role == AgentRole.PERFORMER else VALIDATOR_SYSTEM_PROMPT
            )
        self.system_prompt = system_prompt
        if policy is None:
            policy = PERFORMER_POLICY if role == AgentRole.PERFORMER else VALIDATOR_POLICY
        self.policy = policy
        self.timeout_s = timeout_s
        self.logger = logger or logging.getLogger(__name__)

    @property
    def provider_name(self) -> str:
        return self.llm.provider.name

    def describe(self) -> dict[str, object]:
        summary = super().describe()
        summary.update(role=self.role.value, provider=self.provider_name, model=self.llm.provider.model)
        return summary

    def judge(self, prompt: str) -> Judgment:
        """
        Ask the oracle about ``prompt``.

        Returns:
            Judgment whose ``result`` is the trimmed, lowercased reply, or
            ``undetermined`` when the reply is blank

        Raises:
            OracleUnavailable: On transport failure or timeout
        """
        provider = self.llm.provider
        self.logger.info(
            f"Calling {self.role.value} oracle ({provider.name}/{provider.model}) "
            f"with input: {prompt[:100]}..."
        )

        def _call() -> str:
            response = self.llm.chat(
                [{"role": "user", "content": prompt}],
                policy=self.policy,
                system_prompt=self.system_prompt,
            )
            return response.content

        try:
            raw = call_with_timeout(_call, self.timeout_s)
        except concurrent.futures.TimeoutError as e:
            raise OracleUnavailable(
                f"{self.role.value} oracle timed out after {self.timeout_s}s",
                details={"provider": provider.name},
            ) from e
        except OracleUnavailable:
            raise
        except Exception as e:
            raise OracleUnavailable(
                f"{self.role.value} oracle call failed: {e}",
                details={"provider": provider.name, "error_type": type(e).__name__},
            ) from e

        result = normalize_result(raw)
        self.logger.info(f"{self.role.value.capitalize()} oracle result: {result}")
        return Judgment(result=result, raw_response=raw, provider=provider.name, model=provider.model)


def create_oracle_client(
    config: "LLMConfig",
    *,
    role: AgentRole,
    proxy: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
    **provider_kwargs: Any,
) -> OracleClient:
    """
    Build an OracleClient from an ``LLMConfig`` section.

    The decoding policy comes from the config's temperature/top_p/max_tokens.
    """
    policy = DecodingPolicy(
        temperature=config.temperature,
        top_p=config.top_p,
        max_tokens=config.max_tokens,
    )
    llm = create_llm_client(
        config.provider,
        api_key=config.api_key,
        model=config.model,
        endpoint=config.base_url,
        proxy=proxy,
        timeout=config.timeout_s,
        default_policy=policy,
        **provider_kwargs,
    )
    return OracleClient(
        llm,
        role=role,
        policy=policy,
        timeout_s=config.timeout_s,
        logger=logger,
    )
