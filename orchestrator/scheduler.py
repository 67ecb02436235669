"""
Scheduler

Periodically lists the registry and drives due predictions through the
execution pipeline.

- a tick that starts while another is still running is skipped
- a record is claimed in an in-flight set before execution, so two callers
  racing on the same record execute it once
- one record failing never stops the others; a failing tick is logged and
  the loop continues
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from agents.context import Clock, RealClock
from core.concurrency import CancellationToken
from core.schemas import PredictionRecord, SibylException

from orchestrator.execution import ExecutionPipeline
from orchestrator.registry import PredictionRegistry


logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """Summary of one scheduler pass."""
    started_at: datetime
    skipped: bool = False
    due: list[str] = field(default_factory=list)
    executed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    already_running: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    duration_s: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "startedAt": self.started_at.isoformat(),
            "skipped": self.skipped,
            "due": self.due,
            "executed": self.executed,
            "failed": self.failed,
            "alreadyRunning": self.already_running,
            "errors": self.errors,
            "durationS": round(self.duration_s, 3),
        }


class Scheduler:
    """
    Timer-driven execution loop.

    Usage:
        scheduler = Scheduler(registry, pipeline, interval_s=60)
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        registry: PredictionRegistry,
        pipeline: ExecutionPipeline,
        *,
        interval_s: float = 60.0,
        max_workers: int = 1,
        execution_timeout_s: Optional[float] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.registry = registry
        self.pipeline = pipeline
        self.interval_s = interval_s
        self.max_workers = max(1, max_workers)
        self.execution_timeout_s = execution_timeout_s
        self.clock = clock or RealClock()
        self.logger = logger or logging.getLogger(__name__)

        self._tick_lock = threading.Lock()
        self._in_flight: set[str] = set()
        self._in_flight_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._tokens: dict[str, CancellationToken] = {}
        self.last_report: Optional[TickReport] = None

    # -------------------------------------------------------------------------
    # Loop control
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Run the loop on a daemon thread. The first tick fires immediately."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="sibyl-scheduler", daemon=True)
        self._thread.start()
        self.logger.info(f"Scheduler started (interval {self.interval_s}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop, cancel in-flight executions and join the thread."""
        self._stop.set()
        with self._in_flight_lock:
            for token in self._tokens.values():
                token.cancel("scheduler stopping")
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self.logger.info("Scheduler stopped")

    def run_forever(self) -> None:
        """Run the loop on the calling thread until ``stop()`` is called."""
        self._stop.clear()
        self._loop()

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                self.logger.exception("Error checking pending predictions")
            self._stop.wait(self.interval_s)

    # -------------------------------------------------------------------------
    # Ticks
    # -------------------------------------------------------------------------

    def tick(self) -> TickReport:
        """
        Execute every record due at tick start.

        Returns a report with ``skipped=True`` when another tick is running.
        Raises StoreUnavailable when the registry cannot be listed.
        """
        report = TickReport(started_at=self.clock.now())
        if not self._tick_lock.acquire(blocking=False):
            report.skipped = True
            self.logger.info("Previous tick still running, skipping")
            return report

        started = time.monotonic()
        try:
            due = self.registry.due(report.started_at)
            report.due = [record.id for record in due]
            self.logger.info(f"Found {len(due)} pending predictions to execute")

            if self.max_workers == 1 or len(due) <= 1:
                for record in due:
                    self._execute_one(record, report)
            else:
                with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                    futures = [pool.submit(self._execute_one, record, report) for record in due]
                    for future in as_completed(futures):
                        future.result()
        finally:
            report.duration_s = time.monotonic() - started
            self.last_report = report
            self._tick_lock.release()

        return report

    def execute_now(self, prediction_id: str) -> Optional[TickReport]:
        """Execute one record immediately if it is due and not already running."""
        report = TickReport(started_at=self.clock.now())
        record = self.registry.get(prediction_id)
        if not record.is_due(report.started_at):
            return None
        report.due = [record.id]
        self._execute_one(record, report)
        return report

    def _claim(self, prediction_id: str) -> Optional[CancellationToken]:
        with self._in_flight_lock:
            if prediction_id in self._in_flight:
                return None
            self._in_flight.add(prediction_id)
            token = CancellationToken(self.execution_timeout_s)
            self._tokens[prediction_id] = token
            return token

    def _release(self, prediction_id: str) -> None:
        with self._in_flight_lock:
            self._in_flight.discard(prediction_id)
            self._tokens.pop(prediction_id, None)

    def _execute_one(self, record: PredictionRecord, report: TickReport) -> None:
        token = self._claim(record.id)
        if token is None:
            self.logger.info(f"Prediction {record.id} is already executing, skipping")
            report.already_running.append(record.id)
            return

        try:
            # Re-read under the claim: another caller may have finished it
            current = self.registry.get(record.id)
            if not current.is_due(self.clock.now()):
                self.logger.info(f"Prediction {record.id} is no longer pending, skipping")
                report.already_running.append(record.id)
                return

            result = self.pipeline.execute(current, cancel=token)
            if result.ok:
                report.executed.append(record.id)
            else:
                report.failed.append(record.id)
                report.errors[record.id] = result.error or "unknown error"
        except SibylException as e:
            self.logger.error(f"Could not record outcome of prediction {record.id}: {e.message}")
            report.failed.append(record.id)
            report.errors[record.id] = e.message
        except Exception as e:
            self.logger.exception(f"Unexpected error executing prediction {record.id}")
            report.failed.append(record.id)
            report.errors[record.id] = str(e)
        finally:
            self._release(record.id)
