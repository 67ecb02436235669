"""
Account Selection

Chooses which social accounts to read for a condition.

Two strategies:
- KeywordAccountSelector: case-insensitive substring match of the condition
  against an entity table, falling back to general news accounts
- AllowListAccountSelector: always the same configured accounts
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULT_ENTITY_MAP: dict[str, list[str]] = {
    "apple": ["Apple", "tim_cook", "AppleSupport"],
    "iphone": ["Apple", "tim_cook", "AppleSupport"],
    "google": ["Google", "sundarpichai", "Android"],
    "android": ["Google", "Android", "sundarpichai"],
    "microsoft": ["Microsoft", "satyanadella", "Windows"],
    "windows": ["Microsoft", "Windows", "satyanadella"],
    "tesla": ["Tesla", "elonmusk", "TeslaMotors"],
    "spacex": ["SpaceX", "elonmusk"],
    "amazon": ["Amazon", "AmazonHelp", "JeffBezos"],
    "facebook": ["Facebook", "Meta", "zuck"],
    "meta": ["Meta", "Facebook", "zuck"],
    "netflix": ["Netflix", "netflixhelp"],
    "bitcoin": ["Bitcoin", "bitcoinmagazine", "DocumentingBTC"],
    "ethereum": ["ethereum", "VitalikButerin", "ethdotorg"],
    "crypto": ["Bitcoin", "ethereum", "binance", "cz_binance"],
    "nft": ["opensea", "nft_tokens", "BoredApeYC"],
}

DEFAULT_NEWS_ACCOUNTS: tuple[str, ...] = ("cnnbrk", "BBCBreaking", "WSJ", "CNBC", "Reuters")


def _dedupe(accounts: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for account in accounts:
        if account and account not in seen:
            seen.append(account)
    return seen


def load_entity_map(path: str | Path) -> dict[str, list[str]]:
    """
    Load an entity table from a JSON or YAML file.

    The file maps an entity keyword to a list of account handles. Keys are
    lowercased on load.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a mapping of lists of strings
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Entity map not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)

    if not isinstance(data, dict):
        raise ValueError(f"Entity map {path} must be a mapping, got {type(data).__name__}")

    entity_map: dict[str, list[str]] = {}
    for key, accounts in data.items():
        if isinstance(accounts, str):
            accounts = [accounts]
        if not isinstance(accounts, list) or not all(isinstance(a, str) for a in accounts):
            raise ValueError(f"Entity map {path}: accounts for {key!r} must be a list of strings")
        entity_map[str(key).lower()] = list(accounts)
    return entity_map


class AccountSelector(ABC):
    """Strategy mapping a condition to the accounts worth reading."""

    @abstractmethod
    def select(self, condition: str) -> list[str]:
        """Return a non-empty, duplicate-free list of account handles."""
        ...


class KeywordAccountSelector(AccountSelector):
    """
    Entity-table account selection.

    Every entity keyword found (case-insensitively) anywhere in the condition
    contributes its accounts, in table order. With no match the default news
    accounts are used.
    """

    def __init__(
        self,
        entity_map: Optional[Mapping[str, list[str]]] = None,
        default_accounts: Iterable[str] = DEFAULT_NEWS_ACCOUNTS,
    ) -> None:
        source = DEFAULT_ENTITY_MAP if entity_map is None else entity_map
        self.entity_map = {key.lower(): list(accounts) for key, accounts in source.items()}
        self.default_accounts = list(default_accounts)

    @classmethod
    def from_file(cls, path: str | Path) -> "KeywordAccountSelector":
        return cls(load_entity_map(path))

    def select(self, condition: str) -> list[str]:
        lowered = (condition or "").lower()
        matched: list[str] = []
        for entity, accounts in self.entity_map.items():
            if entity in lowered:
                matched.extend(accounts)

        if not matched:
            return _dedupe(self.default_accounts)
        return _dedupe(matched)


class AllowListAccountSelector(AccountSelector):
    """Reads the same fixed accounts for every condition."""

    def __init__(self, accounts: Iterable[str]) -> None:
        self.accounts = _dedupe(a.lstrip("@") for a in accounts)
        if not self.accounts:
            raise ValueError("AllowListAccountSelector needs at least one account")

    def select(self, condition: str) -> list[str]:
        return list(self.accounts)
