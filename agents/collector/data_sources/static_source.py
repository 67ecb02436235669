"""
Static Evidence Source

In-memory source serving preloaded posts per account. Used for tests,
offline demos and replaying captured timelines.
"""

from typing import Any, Iterable, Optional

from core.schemas import EvidenceItem, EvidenceFetchError, EvidenceSourceUnavailable

from agents.collector.data_sources.base_source import EvidenceSource


class StaticEvidenceSource(EvidenceSource):
    """
    Serves posts from a dict of account -> items.

    Accounts listed in ``failing`` raise ``EvidenceFetchError``; setting
    ``unavailable`` makes every call raise ``EvidenceSourceUnavailable``.
    Handles are matched case-insensitively.
    """

    source_id: str = "static"

    def __init__(
        self,
        timelines: Optional[dict[str, Iterable[EvidenceItem]]] = None,
        *,
        failing: Iterable[str] = (),
        unavailable: bool = False,
        config: Optional[dict[str, Any]] = None,
    ):
        super().__init__(config)
        self._timelines: dict[str, list[EvidenceItem]] = {}
        for account, items in (timelines or {}).items():
            self.add_posts(account, items)
        self.failing = {self.normalize_account(a).lower() for a in failing}
        self.unavailable = unavailable
        self.requests: list[str] = []

    def add_posts(self, account: str, items: Iterable[EvidenceItem]) -> None:
        key = self.normalize_account(account).lower()
        self._timelines.setdefault(key, []).extend(items)

    def fetch_latest(self, account: str, count: int = 10) -> list[EvidenceItem]:
        if self.unavailable:
            raise EvidenceSourceUnavailable("Static evidence source is marked unavailable")

        key = self.normalize_account(account).lower()
        self.requests.append(key)
        if key in self.failing:
            raise EvidenceFetchError(f"Account @{key} is configured to fail", account=key)
        return list(self._timelines.get(key, []))[:count]
