"""API request and response models."""

from api.models.requests import CreatePredictionRequest, ExecuteRequest, ValidateRequest
from api.models.responses import (
    HealthResponse,
    PredictionResponse,
    PredictionListResponse,
    ExecuteResponse,
    ValidateResponse,
    TickResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "CreatePredictionRequest",
    "ExecuteRequest",
    "ValidateRequest",
    "HealthResponse",
    "PredictionResponse",
    "PredictionListResponse",
    "ExecuteResponse",
    "ValidateResponse",
    "TickResponse",
    "ErrorDetail",
    "ErrorResponse",
]
