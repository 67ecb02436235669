"""
API Error Handling

Maps the oracle's exception taxonomy to structured JSON error envelopes.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas import ErrorCodes, SibylException


# HTTP status per SibylException code; anything unlisted maps to 500
STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.MALFORMED_INPUT: 400,
    ErrorCodes.PREDICTION_NOT_FOUND: 404,
    ErrorCodes.PROOF_NOT_FOUND: 404,
    ErrorCodes.MALFORMED_PROOF: 422,
    ErrorCodes.INVALID_TRANSITION: 409,
    ErrorCodes.REGISTRY_CONFLICT: 409,
    ErrorCodes.STORE_UNAVAILABLE: 503,
    ErrorCodes.ORACLE_UNAVAILABLE: 503,
    ErrorCodes.EVIDENCE_SOURCE_UNAVAILABLE: 503,
    ErrorCodes.TASK_SUBMISSION_ERROR: 502,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class NotDueError(APIError):
    """A prediction was asked to execute before it became due."""

    def __init__(self, prediction_id: str, status: str):
        super().__init__(
            code="NOT_DUE",
            message=f"Prediction {prediction_id} is not due for execution",
            status_code=409,
            details={"prediction_id": prediction_id, "status": status},
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def sibyl_error_handler(request: Request, exc: SibylException) -> JSONResponse:
    """Handle oracle exceptions that escape a route."""
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, 500),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
