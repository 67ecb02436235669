"""
Nitter Evidence Source

Reads an account's public timeline from a Nitter instance and parses the
HTML with BeautifulSoup.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from bs4 import BeautifulSoup

from core.concurrency import RateLimiter
from core.http import HttpClient, HttpError
from core.schemas import EvidenceFetchError, EvidenceItem

from agents.collector.data_sources.base_source import EvidenceSource

logger = logging.getLogger(__name__)

DEFAULT_NITTER_URL = "https://nitter.net"

# Nitter timelines hold ~20 items per page
MAX_COUNT = 20

# e.g. "Oct 18, 2026 · 3:42 PM UTC"
_NITTER_DATE_FORMATS = (
    "%b %d, %Y · %I:%M %p %Z",
    "%b %d, %Y · %H:%M %Z",
)


def parse_nitter_date(value: str) -> Optional[datetime]:
    """Parse the ``title`` of a ``.tweet-date`` link, or None if unrecognized."""
    value = (value or "").strip()
    if not value:
        return None
    for fmt in _NITTER_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def parse_timeline(
    html: str,
    *,
    now: Optional[datetime] = None,
    permalink_base: str = "https://twitter.com",
) -> list[EvidenceItem]:
    """
    Parse a Nitter timeline page into evidence items.

    Items without a ``.tweet-link`` or ``.tweet-content`` are skipped. An
    item whose date cannot be read is stamped with ``now``.
    """
    now = now or datetime.now(timezone.utc)
    soup = BeautifulSoup(html, "html.parser")
    items: list[EvidenceItem] = []

    for node in soup.select(".timeline-item"):
        link = node.select_one(".tweet-link")
        content = node.select_one(".tweet-content")
        if link is None or content is None:
            continue

        href = (link.get("href") or "").split("#", 1)[0]
        post_id = href.rstrip("/").split("/")[-1]
        if not post_id:
            continue

        username = node.select_one(".username")
        date_link = node.select_one(".tweet-date a")
        created_at = parse_nitter_date(date_link.get("title", "")) if date_link else None

        try:
            items.append(
                EvidenceItem(
                    id=post_id,
                    text=content.get_text(" ", strip=True),
                    author=username.get_text(strip=True).lstrip("@") if username else "",
                    created_at=created_at or now,
                    permalink=f"{permalink_base}{href}" if href else None,
                )
            )
        except ValueError as e:
            logger.debug(f"Skipping unparseable timeline item {post_id}: {e}")

    return items


class NitterSource(EvidenceSource):
    """
    Nitter HTML timeline adapter.

    All requests pass through ``rate_limiter``; share one limiter between
    sources that hit the same instance.
    """

    source_id: str = "nitter"

    def __init__(
        self,
        base_url: str = DEFAULT_NITTER_URL,
        *,
        http: Optional[HttpClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
        clock: Optional[Callable[[], datetime]] = None,
        config: Optional[dict[str, Any]] = None,
    ):
        super().__init__(config)
        self.base_url = base_url.rstrip("/")
        self.http = http or HttpClient(timeout=20.0)
        self.rate_limiter = rate_limiter or RateLimiter(2.0)
        self._now = clock or (lambda: datetime.now(timezone.utc))

    def fetch_latest(self, account: str, count: int = 10) -> list[EvidenceItem]:
        account = self.normalize_account(account)
        count = min(count, MAX_COUNT)
        url = f"{self.base_url}/{account}"

        waited = self.rate_limiter.wait()
        if waited:
            logger.debug(f"Rate limited: waited {waited:.2f}s before {url}")

        try:
            response = self.http.get(url)
        except HttpError as e:
            raise EvidenceFetchError(f"Failed to fetch @{account}: {e}", account=account) from e

        if not response.ok:
            raise EvidenceFetchError(
                f"Failed to fetch @{account}: HTTP {response.status_code}",
                account=account,
                details={"status_code": response.status_code},
            )

        items = parse_timeline(response.text, now=self._now())
        logger.info(f"Fetched {len(items)} posts from @{account}")
        return items[:count]
