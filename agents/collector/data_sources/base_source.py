"""
Evidence Source Interface

Defines the adapter contract for social evidence sources: fetch the latest
posts of one account.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from core.schemas import EvidenceItem


class EvidenceSource(ABC):
    """
    Abstract base class for evidence source adapters.

    ``fetch_latest`` raises ``EvidenceFetchError`` when a single account
    cannot be read and ``EvidenceSourceUnavailable`` when the source as a
    whole is unusable (e.g. not configured).
    """

    source_id: str = "base"

    def __init__(self, config: Optional[dict[str, Any]] = None):
        """
        Initialize the source adapter.

        Args:
            config: Optional configuration for the adapter
        """
        self.config = config or {}

    @abstractmethod
    def fetch_latest(self, account: str, count: int = 10) -> list[EvidenceItem]:
        """
        Fetch the most recent posts of ``account``.

        Args:
            account: Account handle, with or without a leading ``@``
            count: Maximum number of posts to return

        Returns:
            Up to ``count`` evidence items, newest first as the source lists them
        """
        pass

    @staticmethod
    def normalize_account(account: str) -> str:
        """Strip whitespace and a leading ``@`` from a handle."""
        return account.strip().lstrip("@")
