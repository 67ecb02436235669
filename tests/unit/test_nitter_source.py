"""
Unit tests for the Nitter evidence source.

Tests:
- Timeline HTML parsing
- Date parsing
- Fetch errors and rate limiting (HTTP mocked)
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from agents.collector.data_sources.nitter_source import (
    NitterSource,
    parse_nitter_date,
    parse_timeline,
)
from core.concurrency import RateLimiter
from core.http import HttpClient, HttpError, HttpResponse
from core.schemas import EvidenceFetchError

from fixtures.common import NOW


TIMELINE_HTML = """
<div class="timeline">
  <div class="timeline-item">
    <a class="tweet-link" href="/Tesla/status/1790000000000000001#m"></a>
    <div class="tweet-header">
      <a class="username" href="/Tesla">@Tesla</a>
      <span class="tweet-date"><a href="/Tesla/status/1790000000000000001#m"
          title="Feb 28, 2026 · 3:42 PM UTC">1d</a></span>
    </div>
    <div class="tweet-content media-body">New <b>Roadster</b> event on Friday</div>
  </div>
  <div class="timeline-item">
    <a class="tweet-link" href="/Tesla/status/1790000000000000002#m"></a>
    <a class="username" href="/Tesla">@Tesla</a>
    <div class="tweet-content">Undated post</div>
  </div>
  <div class="timeline-item show-more">
    <a href="?cursor=abc">Load more</a>
  </div>
</div>
"""


class TestParseNitterDate:
    """Tests for parse_nitter_date."""

    def test_nitter_format(self):
        assert parse_nitter_date("Feb 28, 2026 · 3:42 PM UTC") == datetime(
            2026, 2, 28, 15, 42, tzinfo=timezone.utc
        )

    def test_iso_format(self):
        assert parse_nitter_date("2026-02-28T15:42:00Z") == datetime(
            2026, 2, 28, 15, 42, tzinfo=timezone.utc
        )

    def test_unrecognized(self):
        assert parse_nitter_date("yesterday") is None
        assert parse_nitter_date("") is None


class TestParseTimeline:
    """Tests for parse_timeline."""

    def test_items_parsed(self):
        items = parse_timeline(TIMELINE_HTML, now=NOW)

        assert [i.id for i in items] == ["1790000000000000001", "1790000000000000002"]
        first = items[0]
        assert first.text == "New Roadster event on Friday"
        assert first.author == "Tesla"
        assert first.created_at == datetime(2026, 2, 28, 15, 42, tzinfo=timezone.utc)
        assert first.permalink == "https://twitter.com/Tesla/status/1790000000000000001"
        assert not first.synthetic

    def test_missing_date_uses_now(self):
        items = parse_timeline(TIMELINE_HTML, now=NOW)
        assert items[1].created_at == NOW

    def test_empty_page(self):
        assert parse_timeline("<html><body>No items</body></html>", now=NOW) == []


class TestNitterSource:
    """Tests for NitterSource.fetch_latest."""

    def make_source(self, response=None, error=None):
        http = MagicMock(spec=HttpClient)
        if error is not None:
            http.get.side_effect = error
        else:
            http.get.return_value = response
        limiter = MagicMock(spec=RateLimiter)
        limiter.wait.return_value = 0.0
        source = NitterSource("https://nitter.example/", http=http, rate_limiter=limiter, clock=lambda: NOW)
        return source, http, limiter

    def test_fetch(self):
        """The account timeline is requested through the rate limiter."""
        source, http, limiter = self.make_source(
            HttpResponse(status_code=200, content=TIMELINE_HTML.encode("utf-8"))
        )

        items = source.fetch_latest("@Tesla", count=1)

        http.get.assert_called_once_with("https://nitter.example/Tesla")
        limiter.wait.assert_called_once()
        assert [i.id for i in items] == ["1790000000000000001"]

    def test_http_status_error(self):
        source, _, _ = self.make_source(HttpResponse(status_code=429, content=b"slow down"))
        with pytest.raises(EvidenceFetchError) as exc_info:
            source.fetch_latest("Tesla")
        assert exc_info.value.details["status_code"] == 429

    def test_transport_error(self):
        source, _, _ = self.make_source(error=HttpError("timeout"))
        with pytest.raises(EvidenceFetchError):
            source.fetch_latest("Tesla")
