"""
Collector Agent Package

Evidence acquisition for prediction conditions.

The collector:
1. Extracts search keywords from the condition
2. Selects the social accounts worth reading
3. Fetches their latest posts through an evidence source
4. Filters, ranks and caps the relevant posts
5. Falls back to a synthetic item so callers never see an empty result
"""

from agents.collector.accounts import (
    DEFAULT_ENTITY_MAP,
    DEFAULT_NEWS_ACCOUNTS,
    AccountSelector,
    AllowListAccountSelector,
    KeywordAccountSelector,
    load_entity_map,
)
from agents.collector.data_sources import (
    EvidenceSource,
    NitterSource,
    StaticEvidenceSource,
    get_source,
)
from agents.collector.gatherer import EvidenceGatherer
from agents.collector.keywords import (
    MAX_KEYWORDS,
    STOPWORDS,
    extract_keywords,
)

__all__ = [
    # Keywords
    "MAX_KEYWORDS",
    "STOPWORDS",
    "extract_keywords",
    # Accounts
    "DEFAULT_ENTITY_MAP",
    "DEFAULT_NEWS_ACCOUNTS",
    "AccountSelector",
    "AllowListAccountSelector",
    "KeywordAccountSelector",
    "load_entity_map",
    # Sources
    "EvidenceSource",
    "NitterSource",
    "StaticEvidenceSource",
    "get_source",
    # Gatherer
    "EvidenceGatherer",
]
