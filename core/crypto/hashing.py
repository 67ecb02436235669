"""
Hashing Utilities

SHA-256 hashing for raw bytes and canonical objects, used to derive
content ids for locally stored proofs and registry snapshots.

Determinism Notes:
- Objects are hashed over their canonical JSON (sorted keys, no whitespace)
- Dict insertion order and datetime timezone never change a content id
"""
from __future__ import annotations

import hashlib
from typing import Any

from core.schemas.canonical import dumps_canonical


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_canonical(obj: Any) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: digest = sha256(dumps_canonical(obj).encode("utf-8"))
    """
    return sha256(dumps_canonical(obj).encode("utf-8"))


def to_hex(data: bytes) -> str:
    """Convert bytes to a hexadecimal string with 0x prefix."""
    return "0x" + data.hex()


def content_id(obj: Any) -> str:
    """
    Derive the content id of a JSON-compatible object.

    Two objects with the same canonical form always share an id.
    """
    return to_hex(hash_canonical(obj))


__all__ = [
    "sha256",
    "hash_canonical",
    "to_hex",
    "content_id",
]
