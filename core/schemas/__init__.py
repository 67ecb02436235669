"""
Schemas

Public API for the schemas package: records, evidence, proofs, votes,
canonical serialization and the error taxonomy.
"""

from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    is_compatible_schema_version,
)

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
)

from .errors import (
    CanonicalizationException,
    ErrorCodes,
    EvidenceFetchError,
    EvidenceSourceUnavailable,
    ExecutionCancelled,
    InvalidTransition,
    MalformedInput,
    MalformedProof,
    OracleUnavailable,
    PredictionNotFound,
    ProofNotFound,
    RegistryConflict,
    SibylError,
    SibylException,
    StoreUnavailable,
    TaskSubmissionError,
)

from .prediction import (
    CANONICAL_RESULTS,
    DEFAULT_PREDICTION_WINDOW,
    RESULT_NO,
    RESULT_UNDETERMINED,
    RESULT_YES,
    PredictionRecord,
    PredictionStatus,
    RegistrySnapshot,
    can_transition,
    generate_prediction_id,
)

from .evidence import (
    ERROR_EVIDENCE_ID,
    PLACEHOLDER_EVIDENCE_ID,
    EvidenceItem,
    has_real_evidence,
)

from .proof import ProofArtifact
from .verification import ValidationVote


__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "is_compatible_schema_version",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "ensure_utc",
    "format_datetime_canonical",
    # Errors
    "CanonicalizationException",
    "ErrorCodes",
    "EvidenceFetchError",
    "EvidenceSourceUnavailable",
    "ExecutionCancelled",
    "InvalidTransition",
    "MalformedInput",
    "MalformedProof",
    "OracleUnavailable",
    "PredictionNotFound",
    "ProofNotFound",
    "RegistryConflict",
    "SibylError",
    "SibylException",
    "StoreUnavailable",
    "TaskSubmissionError",
    # Predictions
    "CANONICAL_RESULTS",
    "DEFAULT_PREDICTION_WINDOW",
    "RESULT_NO",
    "RESULT_UNDETERMINED",
    "RESULT_YES",
    "PredictionRecord",
    "PredictionStatus",
    "RegistrySnapshot",
    "can_transition",
    "generate_prediction_id",
    # Evidence
    "ERROR_EVIDENCE_ID",
    "PLACEHOLDER_EVIDENCE_ID",
    "EvidenceItem",
    "has_real_evidence",
    # Proofs & votes
    "ProofArtifact",
    "ValidationVote",
]
