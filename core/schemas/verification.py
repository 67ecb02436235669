"""
Schemas - Validation Votes
File: verification.py

Purpose: The validator's agree/disagree vote on a published proof.
Votes are ephemeral; they are returned to the task layer and are only
written back to the registry when the validation pipeline owns a registry.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ValidationVote(BaseModel):
    """
    Outcome of independently re-deriving a judgment.

    ``approved`` is True iff the normalized performer and validator
    results are byte-for-byte equal. Any failure to fetch the proof or
    reach the validator oracle yields ``approved=False`` with ``error`` set.
    """

    model_config = ConfigDict(populate_by_name=True)

    approved: bool = Field(..., description="Whether the validator agrees with the performer")
    performer_result: str | None = Field(default=None, alias="performerResult")
    validator_result: str | None = Field(default=None, alias="validatorResult")
    input_string: str | None = Field(default=None, alias="inputString")
    proof_cid: str | None = Field(default=None, alias="proofCid")
    error: str | None = Field(default=None)

    @classmethod
    def rejected(cls, error: str, proof_cid: str | None = None) -> "ValidationVote":
        """A rejection caused by missing evidence rather than disagreement."""
        return cls(approved=False, error=error, proof_cid=proof_cid)

    def summary(self) -> dict[str, Any]:
        """Compact form stored on a record when the vote is written back."""
        return {
            "approved": self.approved,
            "performerResult": self.performer_result,
            "validatorResult": self.validator_result,
            "proofCid": self.proof_cid,
        }

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
