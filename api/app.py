"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or through the CLI (API + scheduler)
    sibyl serve
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import APIError, api_error_handler, generic_error_handler, sibyl_error_handler
from api.routes import execute, health, predictions, validate
from core.schemas import SibylException
from orchestrator.services import Services


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_log_level() -> int:
    """Resolve log level from SIBYL_LOG_LEVEL, defaulting to INFO."""
    raw = os.getenv("SIBYL_LOG_LEVEL", "INFO")
    return getattr(logging, raw.upper(), logging.INFO)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        services: Prebuilt node services. When omitted they are built from
            the runtime config on the first request.
    """
    app = FastAPI(
        title="Sibyl Oracle API",
        description="""
HTTP API for the Sibyl prediction oracle.

## Endpoints

- **POST /predictions** - Register a pending prediction
- **GET /predictions** - List predictions in the registry
- **GET /predictions/{id}** - Fetch one prediction
- **POST /predictions/{id}/execute** - Execute a due prediction now
- **POST /execute** - Judge an ad-hoc input string (no registry record)
- **POST /tick** - Run one scheduler pass
- **POST /validate** - Re-judge a published proof and return the vote
- **GET /health** - Health check
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(SibylException, sibyl_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(predictions.router)
    app.include_router(execute.router)
    app.include_router(validate.router)

    return app


def configure_logging(level: Optional[int] = None) -> None:
    logging.basicConfig(level=level or _resolve_log_level(), format=LOG_FORMAT)


configure_logging()

# Create the application instance (for ``uvicorn api.app:app``)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
