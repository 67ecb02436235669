"""
Oracle Agent Package

One-word categorical judgments from LLM providers for the performer and
validator nodes.
"""

from agents.oracle.client import (
    Judgment,
    OracleClient,
    create_oracle_client,
    normalize_result,
)
from agents.oracle.prompts import (
    PERFORMER_SYSTEM_PROMPT,
    VALIDATOR_SYSTEM_PROMPT,
    build_judgment_prompt,
)

__all__ = [
    "Judgment",
    "OracleClient",
    "create_oracle_client",
    "normalize_result",
    "PERFORMER_SYSTEM_PROMPT",
    "VALIDATOR_SYSTEM_PROMPT",
    "build_judgment_prompt",
]
