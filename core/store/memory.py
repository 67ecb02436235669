"""
In-Memory Proof Store

Process-local content-addressed store keyed by the canonical SHA-256 of
each document. Used by tests and single-node development runs.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Optional

from core.crypto import content_id
from core.schemas.errors import ProofNotFound, StoreUnavailable

from .base import ProofStore


class InMemoryProofStore(ProofStore):
    """
    Thread-safe dict-backed store.

    ``fail_publish`` / ``fail_fetch`` make the next operations raise
    ``StoreUnavailable``, which is how outages are simulated in tests.
    """

    name = "memory"

    def __init__(self) -> None:
        self._documents: dict[str, Any] = {}
        self._lock = threading.Lock()
        self.fail_publish: bool = False
        self.fail_fetch: bool = False
        self.publish_count: int = 0

    def publish(self, document: dict[str, Any]) -> str:
        if self.fail_publish:
            raise StoreUnavailable("In-memory store rejected publish")
        cid = content_id(document)
        with self._lock:
            self._documents[cid] = copy.deepcopy(document)
            self.publish_count += 1
        return cid

    def fetch(self, cid: str) -> Any:
        if self.fail_fetch:
            raise StoreUnavailable("In-memory store rejected fetch", details={"cid": cid})
        with self._lock:
            if cid not in self._documents:
                raise ProofNotFound(f"No document stored under {cid}", cid=cid)
            return copy.deepcopy(self._documents[cid])

    def put_raw(self, cid: str, document: Any) -> None:
        """Store an arbitrary payload under a chosen id (malformed-proof fixtures)."""
        with self._lock:
            self._documents[cid] = copy.deepcopy(document)

    def get(self, cid: str) -> Optional[Any]:
        with self._lock:
            return copy.deepcopy(self._documents.get(cid))

    def __contains__(self, cid: object) -> bool:
        return cid in self._documents

    def __len__(self) -> int:
        return len(self._documents)
