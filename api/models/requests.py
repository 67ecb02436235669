"""
API Request Models

Pydantic models for API request validation. Field names follow the
camelCase wire form used by the node's clients.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreatePredictionRequest(BaseModel):
    """Request body for POST /predictions."""

    model_config = ConfigDict(populate_by_name=True)

    input_string: str = Field(
        ...,
        alias="inputString",
        min_length=1,
        max_length=8000,
        description='Condition template, e.g. "Condition: <text>\\nX post: <text>"',
    )
    end_time: datetime | None = Field(
        default=None,
        alias="endTime",
        description="When the prediction becomes due; defaults to 24h after creation",
    )
    task_definition_id: int = Field(
        default=0,
        alias="taskDefinitionId",
        ge=0,
        description="Task definition tag for the downstream consumer",
    )


class ExecuteRequest(BaseModel):
    """Request body for POST /execute (ad-hoc execution without a record)."""

    model_config = ConfigDict(populate_by_name=True)

    input_string: str = Field(
        ...,
        alias="inputString",
        min_length=1,
        max_length=8000,
        description="Condition template to judge",
    )
    task_definition_id: int = Field(default=0, alias="taskDefinitionId", ge=0)


class ValidateRequest(BaseModel):
    """Request body for POST /validate."""

    model_config = ConfigDict(populate_by_name=True)

    proof_of_task: str = Field(
        ...,
        alias="proofOfTask",
        min_length=1,
        description="Content id of the proof artifact to validate",
    )
