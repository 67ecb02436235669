"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "sibyl-oracle-api"
    version: str = "v1"
    scheduler_running: bool = False
    registry_cid: str | None = None
    agents: list[dict[str, Any]] = Field(default_factory=list)


class PredictionResponse(BaseModel):
    """A single prediction record in wire form."""

    ok: bool = True
    prediction: dict[str, Any] = Field(..., description="PredictionRecord (camelCase keys)")


class PredictionListResponse(BaseModel):
    """Response for GET /predictions."""

    ok: bool = True
    count: int = Field(default=0)
    predictions: list[dict[str, Any]] = Field(default_factory=list)


class ExecuteResponse(BaseModel):
    """Outcome of an execution, ad-hoc or for a record."""

    ok: bool = Field(..., description="Whether the execution reached a judgment")
    prediction_id: str | None = Field(default=None)
    proof_of_task: str | None = Field(default=None, description="Content id of the proof artifact")
    data: str | None = Field(default=None, description="Task payload as submitted")
    task_definition_id: int | None = Field(default=None)
    result: str | None = Field(default=None)
    tweet_ids: list[str] = Field(default_factory=list)
    error: str | None = Field(default=None)
    error_code: str | None = Field(default=None)
    stage: str | None = Field(default=None, description="Stage reached when the execution stopped")


class ValidateResponse(BaseModel):
    """Validator vote for POST /validate."""

    approved: bool
    performer_result: str | None = None
    validator_result: str | None = None
    input_string: str | None = Field(default=None, description="First 100 characters of the judged input")
    proof_cid: str | None = None
    error: str | None = None


class TickResponse(BaseModel):
    """Report of a manually triggered scheduler tick."""

    ok: bool = True
    report: dict[str, Any] = Field(default_factory=dict)


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
