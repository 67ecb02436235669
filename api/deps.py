"""
API Dependencies

Dependency injection for the API. The node's Services are built once per
application and shared by every route.
"""

from __future__ import annotations

import logging
import threading

from fastapi import Request

from core.config import RuntimeConfig, load_runtime_config
from orchestrator.services import Services, build_services

logger = logging.getLogger(__name__)

_build_lock = threading.Lock()


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from the default config file search path plus env vars."""
    return load_runtime_config()


def get_services(request: Request) -> Services:
    """
    Return the application's Services, building them on first use.

    Tests and the ``serve`` command attach prebuilt Services to
    ``app.state.services`` before the first request.
    """
    services = getattr(request.app.state, "services", None)
    if services is not None:
        return services

    with _build_lock:
        services = getattr(request.app.state, "services", None)
        if services is None:
            config = _load_runtime_config()
            logger.info("Building node services from runtime config")
            services = build_services(config)
            request.app.state.services = services
    return services
