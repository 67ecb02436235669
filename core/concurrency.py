"""
Concurrency Helpers

Cancellation tokens, bounded-time calls and a shared rate limiter used by
the execution pipeline, the oracle client and the evidence sources.
"""

from __future__ import annotations

import concurrent.futures
import threading
import time
from typing import Callable, Optional, TypeVar

from core.schemas.errors import ExecutionCancelled

T = TypeVar("T")


class CancellationToken:
    """
    Cooperative cancellation flag with an optional deadline.

    Pipelines call ``check(stage)`` between stages; it raises
    ``ExecutionCancelled`` once ``cancel()`` was called or the deadline passed.
    """

    def __init__(self, timeout_s: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout_s if timeout_s else None
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.reason = self.reason or "deadline exceeded"
            return True
        return False

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self, stage: str = "") -> None:
        if self.cancelled:
            where = f" before {stage}" if stage else ""
            raise ExecutionCancelled(
                f"Execution cancelled{where}: {self.reason}",
                details={"stage": stage, "reason": self.reason},
            )


def call_with_timeout(fn: Callable[[], T], timeout_s: Optional[float]) -> T:
    """
    Run ``fn`` and wait at most ``timeout_s`` seconds for its result.

    Raises concurrent.futures.TimeoutError when the call overruns. The worker
    thread is abandoned, not killed, so ``fn`` must carry its own transport
    timeout as well.
    """
    if not timeout_s:
        return fn()

    pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    try:
        future = pool.submit(fn)
        return future.result(timeout=timeout_s)
    finally:
        pool.shutdown(wait=False)


class RateLimiter:
    """
    Enforces a minimum delay between consecutive requests.

    Thread-safe: callers serialize on an internal lock, so concurrent
    gatherers sharing one limiter never issue requests closer together
    than ``min_interval_s``.
    """

    def __init__(
        self,
        min_interval_s: float = 2.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval_s = min_interval_s
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_request: Optional[float] = None

    def wait(self) -> float:
        """Block until the next request may go out. Returns the time slept."""
        with self._lock:
            slept = 0.0
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval_s:
                    slept = self.min_interval_s - elapsed
                    self._sleep(slept)
            self._last_request = self._clock()
            return slept
