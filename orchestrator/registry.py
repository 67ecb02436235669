"""
Prediction Registry

Durable mapping of prediction id -> PredictionRecord, persisted as a single
content-addressed snapshot ``{predictions, lastUpdated}``. The id of the
current snapshot lives in an injected RegistryPointer.

Writes are serialized by a process-wide lock and additionally guarded by
compare-and-set on the pointer: a writer that finds the pointer moved
since it read re-reads and retries, then gives up with RegistryConflict.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from agents.context import Clock, RealClock
from core.schemas import (
    DEFAULT_PREDICTION_WINDOW,
    PredictionNotFound,
    PredictionRecord,
    PredictionStatus,
    ProofNotFound,
    RegistryConflict,
    RegistrySnapshot,
    StoreUnavailable,
    ensure_utc,
    generate_prediction_id,
    MalformedInput,
    is_compatible_schema_version,
)
from core.store import ProofStore

from .input_parser import parse_input


# =============================================================================
# Registry pointers
# =============================================================================

class RegistryPointer(ABC):
    """Mutable handle naming the current registry snapshot."""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the current snapshot id, or None when no registry exists yet."""
        ...

    @abstractmethod
    def compare_and_set(self, expected: Optional[str], new: str) -> bool:
        """Move the pointer to ``new`` iff it still equals ``expected``."""
        ...


class InMemoryRegistryPointer(RegistryPointer):
    """Process-local pointer."""

    def __init__(self, initial: Optional[str] = None) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            return self._value

    def compare_and_set(self, expected: Optional[str], new: str) -> bool:
        with self._lock:
            if self._value != expected:
                return False
            self._value = new
            return True


class FileRegistryPointer(RegistryPointer):
    """
    Pointer persisted to a text file so the registry survives restarts.

    The file holds the snapshot id on one line. ``initial`` seeds the
    pointer only when the file does not exist yet. Updates are written to a
    temporary file and renamed into place.
    """

    def __init__(self, path: str | Path, initial: Optional[str] = None) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        if not self.path.exists() and initial:
            self._write(initial)

    def get(self) -> Optional[str]:
        with self._lock:
            return self._read()

    def compare_and_set(self, expected: Optional[str], new: str) -> bool:
        with self._lock:
            if self._read() != expected:
                return False
            self._write(new)
            return True

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        value = self.path.read_text(encoding="utf-8").strip()
        return value or None

    def _write(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(value + "\n")
        os.replace(tmp, self.path)


# =============================================================================
# Registry
# =============================================================================

Mutation = Callable[[list[PredictionRecord]], tuple[list[PredictionRecord], Any]]


class PredictionRegistry:
    """
    Snapshot-backed prediction registry.

    Usage:
        registry = PredictionRegistry(InMemoryProofStore(), InMemoryRegistryPointer())
        record = registry.create("Condition: Will Tesla announce a new model?")
        registry.update(record.id, {"status": "failed", "error": "..."})
    """

    def __init__(
        self,
        store: ProofStore,
        pointer: Optional[RegistryPointer] = None,
        *,
        clock: Optional[Clock] = None,
        max_retries: int = 3,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store
        self.pointer = pointer or InMemoryRegistryPointer()
        self.clock = clock or RealClock()
        self.max_retries = max(1, max_retries)
        self.logger = logger or logging.getLogger(__name__)
        self._write_lock = threading.RLock()

    @property
    def current_cid(self) -> Optional[str]:
        return self.pointer.get()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def snapshot(self) -> tuple[Optional[str], RegistrySnapshot]:
        """
        Fetch the current snapshot together with the id it was read from.

        Raises:
            StoreUnavailable: If the snapshot cannot be fetched or parsed
        """
        cid = self.pointer.get()
        if cid is None:
            return None, RegistrySnapshot(predictions=[], last_updated=self.clock.now())

        try:
            payload = self.store.fetch(cid)
        except ProofNotFound as e:
            raise StoreUnavailable(
                f"Registry snapshot {cid} is missing from the store",
                details={"cid": cid},
            ) from e

        try:
            snapshot = RegistrySnapshot.model_validate(payload)
        except ValidationError as e:
            raise StoreUnavailable(
                f"Registry snapshot {cid} is malformed: {e.error_count()} errors",
                details={"cid": cid},
            ) from e

        if not is_compatible_schema_version(snapshot.schema_version):
            raise StoreUnavailable(
                f"Registry snapshot {cid} has unsupported schema version {snapshot.schema_version}",
                details={"cid": cid, "schema_version": snapshot.schema_version},
            )
        return cid, snapshot

    def list(self) -> list[PredictionRecord]:
        """Return every record in the current snapshot (empty if none exists)."""
        _, snapshot = self.snapshot()
        return list(snapshot.predictions)

    def get(self, prediction_id: str) -> PredictionRecord:
        _, snapshot = self.snapshot()
        record = snapshot.find(prediction_id)
        if record is None:
            raise PredictionNotFound(prediction_id)
        return record

    def due(self, now: Optional[datetime] = None) -> list[PredictionRecord]:
        """Records that are pending with ``endTime <= now``."""
        now = now or self.clock.now()
        return [record for record in self.list() if record.is_due(now)]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(
        self,
        input_string: str,
        *,
        end_time: Optional[datetime] = None,
        task_definition_id: int = 0,
    ) -> PredictionRecord:
        """
        Build a new pending record and append it.

        The condition is parsed eagerly when the input allows it; an input
        without a condition is still accepted and fails at execution time.
        """
        now = self.clock.now()
        try:
            condition: Optional[str] = parse_input(input_string).condition
        except MalformedInput:
            condition = None

        record = PredictionRecord(
            id=generate_prediction_id(now),
            input_string=input_string,
            condition=condition,
            status=PredictionStatus.PENDING,
            end_time=ensure_utc(end_time) if end_time else now + DEFAULT_PREDICTION_WINDOW,
            created_at=now,
            task_definition_id=task_definition_id,
        )
        return self.append(record)

    def append(self, record: PredictionRecord) -> PredictionRecord:
        """
        Add ``record`` and publish a new snapshot.

        Raises:
            StoreUnavailable: If the snapshot cannot be published
            RegistryConflict: If the id already exists or retries ran out
        """
        def mutate(records: list[PredictionRecord]) -> tuple[list[PredictionRecord], Any]:
            if any(r.id == record.id for r in records):
                raise RegistryConflict(
                    f"Prediction {record.id} already exists",
                    details={"prediction_id": record.id},
                )
            return records + [record], record

        result = self._write(mutate, f"append {record.id}")
        self.logger.info(f"Added prediction {record.id} to registry")
        return result

    def update(self, prediction_id: str, patch: dict[str, Any]) -> PredictionRecord:
        """
        Merge ``patch`` into a record and publish a new snapshot.

        Raises:
            PredictionNotFound: If no record has ``prediction_id``
            InvalidTransition: If the patch breaks the lifecycle
            StoreUnavailable: If the snapshot cannot be published; the
                previous snapshot stays authoritative
            RegistryConflict: If retries ran out
        """
        def mutate(records: list[PredictionRecord]) -> tuple[list[PredictionRecord], Any]:
            for index, existing in enumerate(records):
                if existing.id == prediction_id:
                    updated = existing.apply_patch(patch)
                    return records[:index] + [updated] + records[index + 1:], updated
            raise PredictionNotFound(prediction_id)

        return self._write(mutate, f"update {prediction_id}")

    def _write(self, mutate: Mutation, description: str) -> Any:
        with self._write_lock:
            for attempt in range(1, self.max_retries + 1):
                expected, snapshot = self.snapshot()
                records, result = mutate(list(snapshot.predictions))

                new_snapshot = RegistrySnapshot(predictions=records, last_updated=self.clock.now())
                new_cid = self.store.publish(new_snapshot.model_dump(mode="json", by_alias=True))

                if self.pointer.compare_and_set(expected, new_cid):
                    self.logger.debug(f"Registry {description}: snapshot {new_cid}")
                    return result

                self.logger.warning(
                    f"Registry pointer moved during {description} "
                    f"(attempt {attempt}/{self.max_retries}), retrying"
                )

        raise RegistryConflict(
            f"Registry {description} lost {self.max_retries} compare-and-set races",
            details={"attempts": self.max_retries},
        )
