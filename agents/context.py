"""
Agent Context

Shared collaborators for a node's agents and pipelines: the HTTP client,
the loaded configuration and the clock. Tests swap in a ``FrozenClock``
so due-time checks and proof timestamps are reproducible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from core.http import HttpClient
    from core.config import RuntimeConfig


class Clock(Protocol):
    def now(self) -> datetime:
        """Current time, timezone-aware UTC."""
        ...


class RealClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """Stands still until moved with ``advance``."""

    def __init__(self, frozen_time: Optional[datetime] = None) -> None:
        self._time = frozen_time or datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._time

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward, e.g. ``advance(hours=25)``."""
        self._time = self._time + timedelta(**delta)
        return self._time


@dataclass
class AgentContext:
    """
    Dependencies handed to agents instead of having them build their own.

    Usage:
        ctx = AgentContext.create(config)
        gatherer = EvidenceGatherer(source, clock=ctx.clock, logger=ctx.logger)
    """

    http: Optional["HttpClient"] = None
    config: Optional["RuntimeConfig"] = None

    clock: Clock = field(default_factory=RealClock)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("sibyl.agents"))

    @classmethod
    def create(
        cls,
        config: "RuntimeConfig",
        *,
        clock: Optional[Clock] = None,
    ) -> "AgentContext":
        """Build the HTTP client and logger described by ``config``."""
        from core.http import HttpClient

        # Generic browser-like headers; Nitter answers bare clients with 403
        default_headers = {
            "User-Agent": config.http.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }
        http = HttpClient(
            timeout=config.http.timeout,
            max_retries=config.http.max_retries,
            retry_delay=config.http.retry_delay,
            default_headers=default_headers,
            proxy=config.proxy,
        )

        logger = logging.getLogger("sibyl.agents")
        logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

        return cls(
            http=http,
            config=config,
            clock=clock or RealClock(),
            logger=logger,
        )

    @classmethod
    def create_minimal(cls, clock: Optional[Clock] = None) -> "AgentContext":
        """Context without an HTTP client, for tests."""
        return cls(clock=clock or FrozenClock())

