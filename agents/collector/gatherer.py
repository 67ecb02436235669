"""
Evidence Gatherer

Turns a condition into a ranked, never-empty list of evidence items:

1. extract keywords from the condition
2. select accounts worth reading
3. fetch each account's latest posts (one failing account is skipped)
4. keep posts containing at least one keyword (case-insensitive)
5. sort newest first and keep the top ``max_items``
6. nothing left -> one placeholder item; systemic failure -> one error item
"""

from __future__ import annotations

import logging
from typing import Optional

from agents.base import AgentCapability, BaseAgent
from agents.context import Clock, RealClock
from core.concurrency import CancellationToken
from core.schemas import (
    EvidenceFetchError,
    EvidenceItem,
    EvidenceSourceUnavailable,
)

from .accounts import AccountSelector, KeywordAccountSelector
from .data_sources.base_source import EvidenceSource
from .keywords import extract_keywords


class EvidenceGatherer(BaseAgent):
    """
    Collects evidence for a condition from one evidence source.

    Account fetches run sequentially so the source's rate limiter sees
    every request. The result is deterministic for identical upstream data.
    """

    _name = "EvidenceGatherer"
    _version = "v1"
    _capabilities = {AgentCapability.NETWORK, AgentCapability.DETERMINISTIC}

    def __init__(
        self,
        source: EvidenceSource,
        *,
        selector: Optional[AccountSelector] = None,
        per_account_count: int = 10,
        max_items: int = 5,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self.source = source
        self.selector = selector or KeywordAccountSelector()
        self.per_account_count = per_account_count
        self.max_items = max_items
        self.clock = clock or RealClock()
        self.logger = logger or logging.getLogger(__name__)

    def gather(
        self,
        condition: str,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> list[EvidenceItem]:
        """
        Gather evidence for ``condition``.

        Never raises for source problems and never returns an empty list.
        Only ``ExecutionCancelled`` propagates.
        """
        accounts = self.selector.select(condition)
        self.logger.info(f"Identified relevant accounts: {', '.join(accounts)}")

        try:
            posts = self._fetch_all(accounts, cancel)
        except EvidenceSourceUnavailable as e:
            self.logger.error(f"Evidence source unavailable: {e.message}")
            return [EvidenceItem.source_error(e.message, self.clock.now())]

        if posts is None:
            message = f"all {len(accounts)} account fetches failed"
            self.logger.error(f"Error fetching posts: {message}")
            return [EvidenceItem.source_error(message, self.clock.now())]

        keywords = extract_keywords(condition)
        self.logger.info(f"Filtering posts using keywords: {', '.join(keywords)}")

        relevant = [post for post in posts if _matches(post.text, keywords)]
        self.logger.info(f"Found {len(relevant)} relevant posts out of {len(posts)} total")

        # Stable sort keeps fetch order among posts with equal timestamps
        relevant.sort(key=lambda post: post.created_at, reverse=True)
        selected = relevant[: self.max_items]

        if not selected:
            self.logger.warning("No relevant posts found for the condition")
            return [EvidenceItem.placeholder(condition, self.clock.now())]

        return selected

    def _fetch_all(
        self,
        accounts: list[str],
        cancel: Optional[CancellationToken],
    ) -> Optional[list[EvidenceItem]]:
        """Fetch every account; None when not a single fetch succeeded."""
        posts: list[EvidenceItem] = []
        succeeded = 0
        for account in accounts:
            if cancel is not None:
                cancel.check(f"fetching @{account}")
            try:
                items = self.source.fetch_latest(account, self.per_account_count)
            except EvidenceFetchError as e:
                self.logger.warning(f"Error fetching posts from @{account}: {e.message}")
                continue
            succeeded += 1
            self.logger.debug(f"Fetched {len(items)} posts from @{account}")
            posts.extend(items)

        if accounts and succeeded == 0:
            return None
        return posts


def _matches(text: str, keywords: list[str]) -> bool:
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


__all__ = ["EvidenceGatherer"]
