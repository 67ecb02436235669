"""
Core cryptographic utilities.

Hashing helpers for content addressing.
"""
from .hashing import (
    sha256,
    hash_canonical,
    to_hex,
    content_id,
)

__all__ = [
    "sha256",
    "hash_canonical",
    "to_hex",
    "content_id",
]
