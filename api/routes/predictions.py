"""
Prediction Routes

Create, list and inspect prediction records in the registry.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_services
from api.errors import InvalidRequestError
from api.models.requests import CreatePredictionRequest
from api.models.responses import PredictionListResponse, PredictionResponse
from core.schemas import PredictionStatus
from orchestrator.services import Services


logger = logging.getLogger(__name__)

router = APIRouter(tags=["predictions"])


@router.post("/predictions", response_model=PredictionResponse)
@router.post("/create-prediction", response_model=PredictionResponse, include_in_schema=False)
def create_prediction(
    request: CreatePredictionRequest,
    services: Services = Depends(get_services),
) -> PredictionResponse:
    """
    Register a new pending prediction.

    The record becomes due at ``endTime`` (default: 24 hours from now).
    """
    record = services.registry.create(
        request.input_string,
        end_time=request.end_time,
        task_definition_id=request.task_definition_id,
    )
    logger.info(f"Prediction {record.id} created, due at {record.end_time.isoformat()}")
    return PredictionResponse(ok=True, prediction=record.to_wire())


@router.get("/predictions", response_model=PredictionListResponse)
def list_predictions(
    status: Optional[str] = Query(default=None, description="Filter by status"),
    services: Services = Depends(get_services),
) -> PredictionListResponse:
    """List every prediction in the current registry snapshot."""
    records = services.registry.list()
    if status is not None:
        try:
            wanted = PredictionStatus(status.lower())
        except ValueError:
            raise InvalidRequestError(
                f"Unknown status: {status}",
                details={"allowed": [s.value for s in PredictionStatus]},
            )
        records = [r for r in records if r.status == wanted]

    return PredictionListResponse(
        ok=True,
        count=len(records),
        predictions=[r.to_wire() for r in records],
    )


@router.get("/predictions/{prediction_id}", response_model=PredictionResponse)
def get_prediction(
    prediction_id: str,
    services: Services = Depends(get_services),
) -> PredictionResponse:
    """Fetch one prediction; 404 when the id is unknown."""
    record = services.registry.get(prediction_id)
    return PredictionResponse(ok=True, prediction=record.to_wire())
