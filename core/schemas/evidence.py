"""
Schemas - Evidence
File: evidence.py

Purpose: Evidence items gathered from social sources and used as
judgment input. Synthetic items stand in when nothing real is available
so that downstream stages always receive a non-empty sequence.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .canonical import ensure_utc


# Sentinel ids for synthetic evidence
PLACEHOLDER_EVIDENCE_ID = "placeholder"
ERROR_EVIDENCE_ID = "error"


class EvidenceItem(BaseModel):
    """
    A single piece of external text (e.g. a social post).

    Wire format uses ``createdAt``; ``created_at`` is accepted too.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Source-assigned identifier", min_length=1)
    text: str = Field(..., description="Post text")
    author: str = Field(default="", description="Account handle of the author")
    created_at: datetime = Field(..., alias="createdAt")
    permalink: str | None = Field(default=None, description="Canonical link to the post")
    synthetic: bool = Field(
        default=False,
        description="True for placeholder/error items that carry no real evidence",
    )

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @classmethod
    def placeholder(cls, condition: str, now: datetime) -> "EvidenceItem":
        """Item documenting that no relevant evidence was found for ``condition``."""
        return cls(
            id=PLACEHOLDER_EVIDENCE_ID,
            text=(
                f'No relevant posts found for this condition: "{condition}". '
                "Please check again later for updates or modify the condition."
            ),
            author="placeholder_user",
            created_at=now,
            synthetic=True,
        )

    @classmethod
    def source_error(cls, message: str, now: datetime) -> "EvidenceItem":
        """Item describing a systemic evidence source failure."""
        return cls(
            id=ERROR_EVIDENCE_ID,
            text=f"Error fetching posts: {message}. Using original condition for validation.",
            author="system",
            created_at=now,
            synthetic=True,
        )


def has_real_evidence(items: list[EvidenceItem]) -> bool:
    """True when at least one item is genuine (non-synthetic) evidence."""
    return any(not item.synthetic for item in items)
