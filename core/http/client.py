"""
HTTP Client

A small requests-based client shared by the IPFS proof store, the task
submitter and the Nitter evidence source. Callers inspect the status code
themselves; only transport failures raise.
"""

from __future__ import annotations

import json as _json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


@dataclass
class HttpResponse:
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return _json.loads(self.content)


class HttpError(Exception):
    """The request never produced a response (DNS, refused, timeout...)."""


class HttpClient:
    """
    Session-backed client with a default timeout and bounded retries.

    ``max_retries`` extra attempts are made on transport errors and on
    429/5xx replies, sleeping ``retry_delay * 2**attempt`` in between. With
    the default of zero every call is a single attempt.

    Usage:
        client = HttpClient(timeout=10.0)
        response = client.get("https://nitter.net/elonmusk")
        if response.ok:
            html = response.text
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        max_retries: int = 0,
        retry_delay: float = 1.0,
        default_headers: Optional[dict[str, str]] = None,
        proxy: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.retry_delay = retry_delay
        self.default_headers = dict(default_headers or {})
        self.proxy = proxy
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
            if self.proxy:
                self._session.proxies = {"http": self.proxy, "https": self.proxy}
        return self._session

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Send a request and return the final response.

        Raises:
            HttpError: When the last attempt failed at the transport level
        """
        for attempt in range(self.max_retries + 1):
            last = attempt == self.max_retries
            try:
                raw = self.session.request(
                    method,
                    url,
                    headers=headers,
                    json=json,
                    timeout=timeout or self.timeout,
                )
            except requests.RequestException as e:
                if last:
                    raise HttpError(f"{method} {url} failed: {e}") from e
                logger.debug(f"{method} {url} failed ({e}), retrying")
            else:
                response = HttpResponse(
                    status_code=raw.status_code,
                    content=raw.content,
                    headers=dict(raw.headers),
                    url=str(raw.url),
                )
                if last or response.status_code not in RETRYABLE_STATUSES:
                    return response
                logger.debug(f"{method} {url} returned {response.status_code}, retrying")
            time.sleep(self.retry_delay * (2 ** attempt))

        raise AssertionError("unreachable")

    def get(self, url: str, *, headers: Optional[dict[str, str]] = None, timeout: Optional[float] = None) -> HttpResponse:
        return self.request("GET", url, headers=headers, timeout=timeout)

    def post(
        self,
        url: str,
        *,
        json: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        return self.request("POST", url, headers=headers, json=json, timeout=timeout)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
