"""
Keyword Extraction

Turns a natural-language condition into at most five search terms used to
filter fetched posts.

Rules:
- ``@mention``, ``#hashtag`` and ``$cashtag`` tokens come first, in order
  of appearance, lowercased
- then plain words: lowercased, punctuation replaced by spaces, stopwords
  and tokens of two characters or fewer dropped
- duplicates removed, first occurrence wins, capped at ``MAX_KEYWORDS``
"""

from __future__ import annotations

import re

MAX_KEYWORDS = 5

STOPWORDS: frozenset[str] = frozenset({
    "the", "and", "or", "a", "an", "is", "are", "was", "were",
    "will", "would", "should", "could", "be", "to", "of", "in",
    "that", "have", "for", "on", "with", "as", "at", "this", "there",
    "from", "by", "does", "do", "did", "has", "had", "tweet", "post",
    "mention", "about", "any", "some",
})

# Mentions and hashtags take word characters; cashtags are letters only
_TAG_PATTERN = re.compile(r"[@#]\w+|\$[A-Za-z]+")
_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_tags(condition: str) -> list[str]:
    """Return the @mention, #hashtag and $cashtag tokens of ``condition``."""
    tags: list[str] = []
    for match in _TAG_PATTERN.finditer(condition):
        tag = match.group(0).lower()
        if tag not in tags:
            tags.append(tag)
    return tags


def extract_words(condition: str) -> list[str]:
    """Return the significant plain words of ``condition``, in order."""
    cleaned = _PUNCTUATION.sub(" ", condition.lower())
    words: list[str] = []
    for word in cleaned.split():
        if len(word) <= 2 or word in STOPWORDS:
            continue
        if word not in words:
            words.append(word)
    return words


def extract_keywords(condition: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """
    Extract up to ``limit`` search terms from a condition.

    Deterministic and order-stable: the same condition always yields the
    same list.

    Example:
        >>> extract_keywords("Will @elonmusk post about $TSLA earnings?")
        ['@elonmusk', '$tsla', 'elonmusk', 'tsla', 'earnings']
    """
    if not condition:
        return []

    keywords = extract_tags(condition)
    for word in extract_words(condition):
        if word not in keywords:
            keywords.append(word)

    return keywords[:limit]
