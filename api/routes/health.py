"""
Health Check Route

Liveness endpoint reporting scheduler state and the current registry reference.
"""

from fastapi import APIRouter, Depends

from api.deps import get_services
from api.models.responses import HealthResponse
from orchestrator.services import Services


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(services: Services = Depends(get_services)) -> HealthResponse:
    """Liveness probe; also lists the node's agents and their backends."""
    return HealthResponse(
        ok=True,
        service="sibyl-oracle-api",
        version="v1",
        scheduler_running=services.scheduler.running,
        registry_cid=services.registry.current_cid,
        agents=[
            agent.describe()
            for agent in (services.gatherer, services.performer, services.validator, services.validation)
        ],
    )


@router.get("/", response_model=HealthResponse)
def root(services: Services = Depends(get_services)) -> HealthResponse:
    """Same as /health."""
    return health_check(services)
