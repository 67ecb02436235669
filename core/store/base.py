"""
Proof Store Interface

A content-addressed store: ``publish`` returns the content id of a JSON
document and ``fetch`` returns the document stored under an id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ProofStore(ABC):
    """
    Abstract content-addressed JSON store.

    Implementations raise ``StoreUnavailable`` on transport failures and
    ``ProofNotFound`` when an id resolves to nothing.
    """

    name: str = "store"

    @abstractmethod
    def publish(self, document: dict[str, Any]) -> str:
        """Store ``document`` and return its content id."""
        ...

    @abstractmethod
    def fetch(self, cid: str) -> Any:
        """Return the JSON document stored under ``cid``."""
        ...
