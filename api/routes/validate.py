"""
Validation Route

Validator-node endpoint: re-judge a published proof and return the vote.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_services
from api.models.requests import ValidateRequest
from api.models.responses import ValidateResponse
from orchestrator.services import Services


logger = logging.getLogger(__name__)

router = APIRouter(tags=["validation"])


def _truncate(text: str | None, limit: int = 100) -> str | None:
    if text is None or len(text) <= limit:
        return text
    return text[:limit] + "..."


@router.post("/validate", response_model=ValidateResponse)
def validate(
    request: ValidateRequest,
    services: Services = Depends(get_services),
) -> ValidateResponse:
    """
    Validate a proof of task.

    Always answers 200 with a vote; fetch or oracle failures come back as
    ``approved=false`` with ``error`` set.
    """
    logger.info(f"Validate task: proof of task: {request.proof_of_task}")
    vote = services.validation.validate(request.proof_of_task)
    logger.info(f"Vote: {'Approve' if vote.approved else 'Not Approved'}")

    return ValidateResponse(
        approved=vote.approved,
        performer_result=vote.performer_result,
        validator_result=vote.validator_result,
        input_string=_truncate(vote.input_string),
        proof_cid=vote.proof_cid,
        error=vote.error,
    )
