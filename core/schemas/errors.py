"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy across the Sibyl oracle.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the oracle."""

    # Input errors
    MALFORMED_INPUT = "MALFORMED_INPUT"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Evidence errors
    EVIDENCE_FETCH_ERROR = "EVIDENCE_FETCH_ERROR"
    EVIDENCE_SOURCE_UNAVAILABLE = "EVIDENCE_SOURCE_UNAVAILABLE"

    # Judgment errors
    ORACLE_UNAVAILABLE = "ORACLE_UNAVAILABLE"

    # Storage errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    PROOF_NOT_FOUND = "PROOF_NOT_FOUND"
    MALFORMED_PROOF = "MALFORMED_PROOF"

    # Registry errors
    PREDICTION_NOT_FOUND = "PREDICTION_NOT_FOUND"
    REGISTRY_CONFLICT = "REGISTRY_CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Execution errors
    TASK_SUBMISSION_ERROR = "TASK_SUBMISSION_ERROR"
    EXECUTION_CANCELLED = "EXECUTION_CANCELLED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class SibylError(BaseModel):
    """
    Base error model for structured error communication.

    Used where errors cross a boundary as data (API envelopes, votes)
    rather than as raised exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_INPUT],
    )
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "SibylException":
        """Convert this error model to a raised exception."""
        return SibylException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class SibylException(Exception):
    """
    Base exception for all oracle errors.

    Carries structured error information and can be converted
    to a SibylError model.
    """

    code: str = "SIBYL_ERROR"
    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if retryable is not None:
            self.retryable = retryable
        self.details = details or {}

    def to_error_model(self) -> SibylError:
        """Convert this exception to a SibylError model."""
        return SibylError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(SibylException):
    """Raised when canonical serialization fails."""

    code = ErrorCodes.CANONICALIZATION_ERROR


class MalformedInput(SibylException):
    """Raised when a condition cannot be parsed out of an input string."""

    code = ErrorCodes.MALFORMED_INPUT


class EvidenceFetchError(SibylException):
    """Raised when fetching evidence for a single account fails."""

    code = ErrorCodes.EVIDENCE_FETCH_ERROR
    retryable = True

    def __init__(
        self,
        message: str,
        account: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if account:
            full_details["account"] = account
        super().__init__(message, details=full_details)
        self.account = account


class EvidenceSourceUnavailable(SibylException):
    """Raised when the evidence source as a whole cannot serve requests."""

    code = ErrorCodes.EVIDENCE_SOURCE_UNAVAILABLE
    retryable = True


class OracleUnavailable(SibylException):
    """Raised when the judgment provider fails or returns an unusable reply."""

    code = ErrorCodes.ORACLE_UNAVAILABLE
    retryable = True


class StoreUnavailable(SibylException):
    """Raised when the content-addressed store cannot publish or fetch."""

    code = ErrorCodes.STORE_UNAVAILABLE
    retryable = True


class ProofNotFound(SibylException):
    """Raised when a proof reference does not resolve to any content."""

    code = ErrorCodes.PROOF_NOT_FOUND

    def __init__(self, message: str, cid: str | None = None) -> None:
        super().__init__(message, details={"cid": cid} if cid else None)
        self.cid = cid


class MalformedProof(SibylException):
    """Raised when fetched proof content lacks the expected fields."""

    code = ErrorCodes.MALFORMED_PROOF


class PredictionNotFound(SibylException):
    """Raised when a prediction id is not present in the registry."""

    code = ErrorCodes.PREDICTION_NOT_FOUND

    def __init__(self, prediction_id: str) -> None:
        super().__init__(
            f"Prediction not found: {prediction_id}",
            details={"prediction_id": prediction_id},
        )
        self.prediction_id = prediction_id


class RegistryConflict(SibylException):
    """Raised when a registry write keeps losing the compare-and-swap race."""

    code = ErrorCodes.REGISTRY_CONFLICT
    retryable = True


class InvalidTransition(SibylException):
    """Raised when a patch would move a prediction backwards in its lifecycle."""

    code = ErrorCodes.INVALID_TRANSITION

    def __init__(self, message: str, prediction_id: str | None = None) -> None:
        super().__init__(
            message,
            details={"prediction_id": prediction_id} if prediction_id else None,
        )
        self.prediction_id = prediction_id


class TaskSubmissionError(SibylException):
    """Raised when the downstream task layer rejects or drops a submission."""

    code = ErrorCodes.TASK_SUBMISSION_ERROR
    retryable = True


class ExecutionCancelled(SibylException):
    """Raised at a stage boundary when an execution was cancelled or timed out."""

    code = ErrorCodes.EXECUTION_CANCELLED
