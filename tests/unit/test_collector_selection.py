"""
Unit tests for keyword extraction and account selection.

Tests:
- Tags come first, then significant words
- Stopwords and short tokens are dropped
- Account selection via entity table and allow list
- Entity map loading from JSON and YAML
"""

import json

import pytest

from agents.collector import (
    DEFAULT_NEWS_ACCOUNTS,
    AllowListAccountSelector,
    KeywordAccountSelector,
    extract_keywords,
    load_entity_map,
)
from agents.collector.keywords import MAX_KEYWORDS, extract_tags, extract_words


class TestExtractKeywords:
    """Tests for extract_keywords."""

    def test_tags_before_words(self):
        """Mentions and cashtags precede plain words."""
        keywords = extract_keywords("Will @elonmusk post about $TSLA earnings?")
        assert keywords == ["@elonmusk", "$tsla", "elonmusk", "tsla", "earnings"]

    def test_stopwords_and_short_tokens_dropped(self):
        """Stopwords and tokens of two characters or fewer are removed."""
        keywords = extract_keywords("Will it be on the news by Friday?")
        assert keywords == ["news", "friday"]

    def test_punctuation_splits_words(self):
        """Punctuation is replaced by whitespace before splitting."""
        assert extract_keywords("bitcoin-price, (rally)") == ["bitcoin", "price", "rally"]

    def test_duplicates_removed(self):
        """First occurrence wins."""
        assert extract_keywords("Tesla tesla TESLA roadster") == ["tesla", "roadster"]

    def test_tag_body_kept_as_word(self):
        """A tag and its bare word are distinct search terms."""
        assert extract_keywords("#bitcoin bitcoin halving") == ["#bitcoin", "bitcoin", "halving"]
        assert extract_keywords("Will #Bitcoin rally") == ["#bitcoin", "bitcoin", "rally"]

    def test_capped_at_limit(self):
        """At most MAX_KEYWORDS terms are returned."""
        keywords = extract_keywords("alpha bravo charlie delta echo foxtrot golf")
        assert len(keywords) == MAX_KEYWORDS
        assert keywords == ["alpha", "bravo", "charlie", "delta", "echo"]

    def test_empty_condition(self):
        """An empty condition yields no keywords."""
        assert extract_keywords("") == []

    def test_deterministic(self):
        """Same input, same output."""
        condition = "Will #ETH flip $BTC before the halving?"
        assert extract_keywords(condition) == extract_keywords(condition)

    def test_extract_tags_lowercases(self):
        """Tags are lowercased."""
        assert extract_tags("Ask @ElonMusk about #SpaceX") == ["@elonmusk", "#spacex"]

    def test_extract_words_keeps_order(self):
        """Words keep their order of appearance."""
        assert extract_words("Netflix subscribers grow") == ["netflix", "subscribers", "grow"]


class TestKeywordAccountSelector:
    """Tests for KeywordAccountSelector."""

    def test_entity_match(self):
        """A known entity selects its accounts."""
        selector = KeywordAccountSelector()
        accounts = selector.select("Will Tesla announce a new Roadster?")
        assert accounts == ["Tesla", "elonmusk", "TeslaMotors"]

    def test_multiple_entities_deduplicated(self):
        """Accounts shared between entities appear once."""
        selector = KeywordAccountSelector()
        accounts = selector.select("Will SpaceX and Tesla both post today?")
        assert accounts.count("elonmusk") == 1
        assert "SpaceX" in accounts and "Tesla" in accounts

    def test_fallback_to_news(self):
        """No entity match falls back to the news accounts."""
        selector = KeywordAccountSelector()
        assert selector.select("Will it rain in Paris?") == list(DEFAULT_NEWS_ACCOUNTS)

    def test_custom_map(self):
        """A custom entity map replaces the defaults."""
        selector = KeywordAccountSelector({"Paris": ["parisweather"]})
        assert selector.select("Will it rain in paris?") == ["parisweather"]
        assert selector.select("Will Tesla ship?") == list(DEFAULT_NEWS_ACCOUNTS)


class TestAllowListAccountSelector:
    """Tests for AllowListAccountSelector."""

    def test_strips_at_sign(self):
        """Handles are stored without a leading @."""
        selector = AllowListAccountSelector(["@Reuters", "WSJ", "Reuters"])
        assert selector.select("anything") == ["Reuters", "WSJ"]

    def test_empty_rejected(self):
        """At least one account is required."""
        with pytest.raises(ValueError):
            AllowListAccountSelector([])


class TestLoadEntityMap:
    """Tests for load_entity_map."""

    def test_json(self, tmp_path):
        """JSON files are parsed and keys lowercased."""
        path = tmp_path / "entities.json"
        path.write_text(json.dumps({"OpenAI": ["OpenAI", "sama"], "nasa": "NASA"}))

        entity_map = load_entity_map(path)

        assert entity_map == {"openai": ["OpenAI", "sama"], "nasa": ["NASA"]}

    def test_yaml(self, tmp_path):
        """YAML files are parsed."""
        path = tmp_path / "entities.yaml"
        path.write_text("nvidia:\n  - nvidia\n  - nvidianews\n")

        assert load_entity_map(path) == {"nvidia": ["nvidia", "nvidianews"]}

    def test_selector_from_file(self, tmp_path):
        """KeywordAccountSelector.from_file uses the loaded map."""
        path = tmp_path / "entities.yaml"
        path.write_text("nvidia: [nvidia]\n")

        selector = KeywordAccountSelector.from_file(path)

        assert selector.select("Will NVIDIA beat earnings?") == ["nvidia"]

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_entity_map(tmp_path / "nope.yaml")

    def test_bad_shape(self, tmp_path):
        """Non-mapping content raises ValueError."""
        path = tmp_path / "entities.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_entity_map(path)
