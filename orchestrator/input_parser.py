"""
Input String Parsing

A prediction's ``inputString`` follows the template::

    Condition: <predicate text>
    X post: <evidence text>

Only the condition line is required. The first ``Condition:`` found wins
and the condition runs to the end of its line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from core.schemas import MalformedInput

_CONDITION_PATTERN = re.compile(r"Condition:[ \t]*(.*?)[ \t]*(?:\r?\n|$)")
_EVIDENCE_PATTERN = re.compile(r"X post:[ \t]*(.*)\Z", re.DOTALL)


@dataclass(frozen=True)
class ParsedInput:
    """Condition and optional evidence text extracted from an input string."""
    condition: str
    evidence_text: Optional[str] = None


def parse_input(input_string: str) -> ParsedInput:
    """
    Parse an input string into its condition and evidence text.

    Raises:
        MalformedInput: If there is no ``Condition:`` line or it is empty
    """
    if not input_string or not input_string.strip():
        raise MalformedInput("Input string is empty")

    match = _CONDITION_PATTERN.search(input_string)
    condition = match.group(1).strip() if match else ""
    if not condition:
        raise MalformedInput(
            "Could not extract condition from input string",
            details={"input_preview": input_string[:100]},
        )

    evidence = _EVIDENCE_PATTERN.search(input_string)
    evidence_text = evidence.group(1).strip() if evidence else None

    return ParsedInput(condition=condition, evidence_text=evidence_text or None)
