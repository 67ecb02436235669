"""API route handlers."""

from api.routes import health, predictions, execute, validate

__all__ = ["health", "predictions", "execute", "validate"]
