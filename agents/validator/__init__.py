"""
Validator Package

Independent validation of published proofs: re-derive the judgment with the
validator oracle and vote on agreement with the performer.
"""

from .validation import ValidationPipeline

__all__ = [
    "ValidationPipeline",
]
