"""
LLM Decoding Controls

Decoding parameters for oracle calls. The performer and validator each carry
their own policy; a parameter left as None is not sent to the provider, so
the provider's own default applies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DecodingPolicy:
    """
    Decoding parameters for a single chat call.

    Oracle replies are one word, so ``json_mode`` is off by default.
    """
    temperature: Optional[float] = 0.0
    top_p: Optional[float] = None
    seed: Optional[int] = None
    max_tokens: int = 512
    json_mode: bool = False
    stop_sequences: tuple[str, ...] = field(default_factory=tuple)


def policy_to_provider_args(policy: DecodingPolicy, provider: str = "openai") -> Dict[str, Any]:
    """
    Convert DecodingPolicy to provider-specific API arguments.

    Args:
        policy: The decoding policy
        provider: Provider name (openai, anthropic, google)

    Returns:
        Dict of API arguments with unset parameters omitted
    """
    if provider == "anthropic":
        args: Dict[str, Any] = {"max_tokens": policy.max_tokens}
        if policy.temperature is not None:
            args["temperature"] = policy.temperature
        if policy.top_p is not None:
            args["top_p"] = policy.top_p
        if policy.stop_sequences:
            args["stop_sequences"] = list(policy.stop_sequences)
        return args

    if provider == "google":
        args = {"max_output_tokens": policy.max_tokens}
        if policy.temperature is not None:
            args["temperature"] = policy.temperature
        if policy.top_p is not None:
            args["top_p"] = policy.top_p
        if policy.seed is not None:
            args["seed"] = policy.seed
        return args

    # OpenAI and every OpenAI-compatible endpoint
    args = {"max_tokens": policy.max_tokens}
    if policy.temperature is not None:
        args["temperature"] = policy.temperature
    if policy.top_p is not None:
        args["top_p"] = policy.top_p
    if policy.seed is not None:
        args["seed"] = policy.seed
    if policy.stop_sequences:
        args["stop"] = list(policy.stop_sequences)
    return args


# Decoding used by the performer node
PERFORMER_POLICY = DecodingPolicy(temperature=0.1, top_p=0.9, max_tokens=512)

# The validator sends no sampling parameters of its own
VALIDATOR_POLICY = DecodingPolicy(temperature=None, top_p=None, max_tokens=16)
