"""
Execution Routes

Ad-hoc execution of an input string, immediate execution of a due record,
and manually triggered scheduler ticks.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_services
from api.errors import NotDueError
from api.models.requests import ExecuteRequest
from api.models.responses import ExecuteResponse, TickResponse
from orchestrator.execution import ExecutionResult
from orchestrator.services import Services
from orchestrator.tasks import encode_payload


logger = logging.getLogger(__name__)

router = APIRouter(tags=["execution"])


def _to_response(result: ExecutionResult, task_definition_id: int) -> ExecuteResponse:
    data = None
    if result.ok:
        data = encode_payload({"inputString": result.prompt, "result": result.result})
    return ExecuteResponse(
        ok=result.ok,
        prediction_id=result.prediction_id,
        proof_of_task=result.proof_cid,
        data=data,
        task_definition_id=task_definition_id,
        result=result.result,
        tweet_ids=result.tweet_ids,
        error=result.error,
        error_code=result.error_code,
        stage=result.stage,
    )


@router.post("/execute", response_model=ExecuteResponse)
def execute(
    request: ExecuteRequest,
    services: Services = Depends(get_services),
) -> ExecuteResponse:
    """
    Judge an input string, publish the proof and submit the task.

    Nothing is written to the registry. Failures are reported in the body
    with ``ok=false`` and the stage that failed.
    """
    logger.info(f"Executing task (definition {request.task_definition_id})")
    result = services.execution.execute_input(
        request.input_string,
        request.task_definition_id,
    )
    return _to_response(result, request.task_definition_id)


@router.post("/predictions/{prediction_id}/execute", response_model=ExecuteResponse)
def execute_prediction(
    prediction_id: str,
    services: Services = Depends(get_services),
) -> ExecuteResponse:
    """Execute one due prediction now instead of waiting for the next tick."""
    record = services.registry.get(prediction_id)
    report = services.scheduler.execute_now(prediction_id)
    if report is None:
        raise NotDueError(prediction_id, record.status.value)

    updated = services.registry.get(prediction_id)
    if prediction_id in report.already_running:
        return ExecuteResponse(
            ok=False,
            prediction_id=prediction_id,
            task_definition_id=updated.task_definition_id,
            error="Prediction is already executing",
        )

    return ExecuteResponse(
        ok=prediction_id in report.executed,
        prediction_id=prediction_id,
        proof_of_task=updated.proof_cid,
        task_definition_id=updated.task_definition_id,
        result=updated.result,
        tweet_ids=updated.tweet_ids,
        error=report.errors.get(prediction_id) or updated.error,
    )


@router.post("/tick", response_model=TickResponse)
def tick(services: Services = Depends(get_services)) -> TickResponse:
    """Run one scheduler pass synchronously and return its report."""
    report = services.scheduler.tick()
    return TickResponse(ok=not report.failed, report=report.to_dict())
