"""
Schemas - Prediction Records
File: prediction.py

Purpose: The registry's unit of state and the snapshot that persists it.

Field names are snake_case in Python and camelCase on the wire
(inputString, endTime, tweetIds, proofCid, ...) so snapshots stay
compatible with records written by other nodes.
"""

import secrets
import string
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .canonical import ensure_utc
from .errors import InvalidTransition
from .versioning import SCHEMA_VERSION


# Canonical judgment values. The oracle is asked for one of these but is
# not bound to comply, so results are stored as free strings.
RESULT_YES = "yes"
RESULT_NO = "no"
RESULT_UNDETERMINED = "undetermined"
CANONICAL_RESULTS: frozenset[str] = frozenset({RESULT_YES, RESULT_NO, RESULT_UNDETERMINED})

DEFAULT_PREDICTION_WINDOW = timedelta(hours=24)

_ID_ALPHABET = string.digits + string.ascii_lowercase


class PredictionStatus(str, Enum):
    """Lifecycle status of a prediction."""
    PENDING = "pending"
    EXECUTED = "executed"
    VALIDATED = "validated"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PredictionStatus.VALIDATED, PredictionStatus.FAILED)


# Forward-only lifecycle. Same-status patches are allowed so that
# non-status fields can be amended without a transition.
_ALLOWED_TRANSITIONS: dict[PredictionStatus, frozenset[PredictionStatus]] = {
    PredictionStatus.PENDING: frozenset({
        PredictionStatus.PENDING,
        PredictionStatus.EXECUTED,
        PredictionStatus.FAILED,
    }),
    PredictionStatus.EXECUTED: frozenset({
        PredictionStatus.EXECUTED,
        PredictionStatus.VALIDATED,
    }),
    PredictionStatus.VALIDATED: frozenset({PredictionStatus.VALIDATED}),
    PredictionStatus.FAILED: frozenset({PredictionStatus.FAILED}),
}

# Fields written once and never changed afterwards.
_SET_ONCE_FIELDS = ("id", "created_at", "executed_at")


def generate_prediction_id(now: Optional[datetime] = None) -> str:
    """Generate an id of the form ``pred_<epoch-ms>_<8 base36 chars>``."""
    now = now or datetime.now(timezone.utc)
    millis = int(ensure_utc(now).timestamp() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(8))
    return f"pred_{millis}_{suffix}"


def can_transition(current: PredictionStatus, target: PredictionStatus) -> bool:
    """Check whether the lifecycle allows moving from current to target."""
    return target in _ALLOWED_TRANSITIONS[current]


class PredictionRecord(BaseModel):
    """
    A single prediction market condition and its resolution state.

    Invariants:
        - pending ⇒ result is None and executed_at is None
        - executed / validated ⇒ executed_at is set
        - failed may leave executed_at unset (execution error before completion)

    Fields written by other nodes (for example ``predictionCid``) are kept
    and re-serialized unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Opaque unique identifier", min_length=1)
    input_string: str = Field(
        ...,
        alias="inputString",
        description="Raw condition + evidence template supplied at creation",
        min_length=1,
    )
    condition: str | None = Field(
        default=None,
        description="Predicate text parsed out of inputString",
    )
    status: PredictionStatus = Field(default=PredictionStatus.PENDING)
    result: str | None = Field(
        default=None,
        description="Normalized oracle judgment; None until executed",
    )
    end_time: datetime = Field(
        ...,
        alias="endTime",
        description="Instant after which the prediction becomes eligible for execution",
    )
    created_at: datetime = Field(..., alias="createdAt")
    executed_at: datetime | None = Field(default=None, alias="executedAt")
    task_definition_id: int = Field(default=0, alias="taskDefinitionId")
    tweet_ids: list[str] = Field(
        default_factory=list,
        alias="tweetIds",
        description="Evidence item ids used to reach the result",
    )
    proof_cid: str | None = Field(
        default=None,
        alias="proofCid",
        description="Content id of the published proof artifact",
    )
    error: str | None = Field(default=None, description="Failure message when status is failed")
    validated_at: datetime | None = Field(default=None, alias="validatedAt")
    validation: dict[str, Any] | None = Field(
        default=None,
        description="Summary of the validator vote that validated this record",
    )

    @field_validator("end_time", "created_at", "executed_at", "validated_at")
    @classmethod
    def _to_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @model_validator(mode="after")
    def _check_lifecycle_invariants(self) -> "PredictionRecord":
        if self.status == PredictionStatus.PENDING:
            if self.result is not None or self.executed_at is not None:
                raise ValueError("pending predictions cannot carry a result or executedAt")
        if self.status in (PredictionStatus.EXECUTED, PredictionStatus.VALIDATED):
            if self.executed_at is None:
                raise ValueError(f"{self.status.value} predictions require executedAt")
        return self

    def is_due(self, now: datetime) -> bool:
        """A record is due iff it is pending and its end time has passed."""
        return self.status == PredictionStatus.PENDING and self.end_time <= ensure_utc(now)

    def apply_patch(self, patch: dict[str, Any]) -> "PredictionRecord":
        """
        Return a new record with ``patch`` merged in.

        Patch keys may be wire aliases (``proofCid``) or field names
        (``proof_cid``). Unknown patch keys are ignored; extra fields already
        on the record are carried over.

        Raises:
            InvalidTransition: If the patch moves status backwards, out of a
                terminal state, or rewrites a set-once field.
        """
        updates = {_field_name(key): value for key, value in patch.items()}
        updates = {k: v for k, v in updates.items() if k in type(self).model_fields}

        if "status" in updates:
            target = PredictionStatus(updates["status"])
            if not can_transition(self.status, target):
                raise InvalidTransition(
                    f"Prediction {self.id} cannot move from {self.status.value} to {target.value}",
                    prediction_id=self.id,
                )
            updates["status"] = target

        for name in _SET_ONCE_FIELDS:
            current = getattr(self, name)
            if name in updates and current is not None and updates[name] != current:
                raise InvalidTransition(
                    f"Prediction {self.id}: {name} is set once and cannot change",
                    prediction_id=self.id,
                )

        merged = self.model_dump()
        merged.update(updates)
        return type(self).model_validate(merged)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys for snapshots and API responses."""
        return self.model_dump(mode="json", by_alias=True)


def _field_name(key: str) -> str:
    """Map a wire alias to its Python field name."""
    for name, info in PredictionRecord.model_fields.items():
        if info.alias == key:
            return name
    return key


class RegistrySnapshot(BaseModel):
    """
    The complete registry as persisted in the content-addressed store.

    Wire format: ``{"predictions": [...], "lastUpdated": "<ISO-8601>"}``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_version: str = Field(default=SCHEMA_VERSION, alias="schemaVersion")
    predictions: list[PredictionRecord] = Field(default_factory=list)
    last_updated: datetime = Field(..., alias="lastUpdated")

    @field_validator("last_updated")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def find(self, prediction_id: str) -> PredictionRecord | None:
        for record in self.predictions:
            if record.id == prediction_id:
                return record
        return None
