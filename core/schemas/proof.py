"""
Schemas - Proof Artifacts
File: proof.py

Purpose: The immutable record of the inputs and result used to justify a
submitted task. Artifacts are referenced only by their content id and
are never updated in place; a correction publishes a new artifact.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .canonical import ensure_utc
from .errors import MalformedProof


class ProofArtifact(BaseModel):
    """
    Proof of an executed judgment.

    Wire format: ``{"inputString", "result", "timestamp", "originalPredictionId"}``.
    Unknown extra fields are tolerated when reading artifacts published
    by other nodes.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    input_string: str = Field(
        ...,
        alias="inputString",
        description="The exact prompt text that was judged",
        min_length=1,
    )
    result: str = Field(..., description="The performer's normalized judgment")
    timestamp: datetime | None = Field(default=None, description="When the judgment was made")
    original_prediction_id: str | None = Field(default=None, alias="originalPredictionId")

    @field_validator("timestamp")
    @classmethod
    def _to_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @classmethod
    def from_payload(cls, payload: Any, cid: str | None = None) -> "ProofArtifact":
        """
        Parse fetched store content into an artifact.

        Raises:
            MalformedProof: If the content is not an object or lacks
                ``inputString`` / ``result``.
        """
        if not isinstance(payload, dict):
            raise MalformedProof(
                f"Proof {cid} is not a JSON object",
                details={"cid": cid, "type": type(payload).__name__},
            )
        missing = [key for key in ("inputString", "result") if payload.get(key) in (None, "")]
        if missing:
            raise MalformedProof(
                f"Proof {cid} is missing fields: {', '.join(missing)}",
                details={"cid": cid, "missing": missing},
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise MalformedProof(f"Proof {cid} failed validation: {e}", details={"cid": cid}) from e

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
