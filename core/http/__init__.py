"""
HTTP Client Module

Thin requests wrapper with timeouts and bounded retries.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
