"""
Unit tests for concurrency helpers.

Tests:
- CancellationToken cancel/deadline semantics
- call_with_timeout
- RateLimiter spacing with an injected clock
"""

import concurrent.futures
import threading

import pytest

from core.concurrency import CancellationToken, RateLimiter, call_with_timeout
from core.schemas import ExecutionCancelled


class FakeTime:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_fresh_token_not_cancelled(self):
        """A new token passes check()."""
        token = CancellationToken()
        token.check("gather")
        assert not token.cancelled
        assert token.remaining() is None

    def test_cancel(self):
        """cancel() makes check() raise with the stage and reason."""
        token = CancellationToken()
        token.cancel("shutdown")

        with pytest.raises(ExecutionCancelled) as exc_info:
            token.check("judge")

        assert "before judge" in exc_info.value.message
        assert "shutdown" in exc_info.value.message
        assert exc_info.value.details["stage"] == "judge"

    def test_zero_timeout_has_no_deadline(self):
        """timeout_s of 0 or None gives a token that only cancels when told."""
        for timeout_s in (None, 0):
            token = CancellationToken(timeout_s=timeout_s)
            assert token.remaining() is None
            assert not token.cancelled

    def test_remaining_with_deadline(self):
        """A deadline reports the time left."""
        token = CancellationToken(timeout_s=60)
        remaining = token.remaining()
        assert remaining is not None and 0 < remaining <= 60


class TestCallWithTimeout:
    """Tests for call_with_timeout."""

    def test_returns_result(self):
        """The function's result is returned."""
        assert call_with_timeout(lambda: 42, 1.0) == 42

    def test_no_timeout_calls_directly(self):
        """None disables the timeout."""
        assert call_with_timeout(lambda: "direct", None) == "direct"

    def test_propagates_exceptions(self):
        """Exceptions from the function propagate."""
        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            call_with_timeout(boom, 1.0)

    def test_times_out(self):
        """An overrunning call raises TimeoutError."""
        release = threading.Event()
        try:
            with pytest.raises(concurrent.futures.TimeoutError):
                call_with_timeout(lambda: release.wait(5), 0.05)
        finally:
            release.set()


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_first_request_not_delayed(self):
        """The first wait returns immediately."""
        fake = FakeTime()
        limiter = RateLimiter(2.0, clock=fake.clock, sleep=fake.sleep)
        assert limiter.wait() == 0.0
        assert fake.sleeps == []

    def test_back_to_back_requests_spaced(self):
        """A second request inside the interval sleeps the remainder."""
        fake = FakeTime()
        limiter = RateLimiter(2.0, clock=fake.clock, sleep=fake.sleep)

        limiter.wait()
        fake.now += 0.5
        slept = limiter.wait()

        assert slept == pytest.approx(1.5)
        assert fake.sleeps == [pytest.approx(1.5)]

    def test_spaced_requests_not_delayed(self):
        """Requests already further apart than the interval do not sleep."""
        fake = FakeTime()
        limiter = RateLimiter(2.0, clock=fake.clock, sleep=fake.sleep)

        limiter.wait()
        fake.now += 3.0

        assert limiter.wait() == 0.0
