"""
Unit tests for the oracle client and judgment prompts.

Tests:
- Replies are trimmed and lowercased
- Non-canonical replies are kept verbatim (normalized)
- Blank replies are an undetermined judgment
- Provider errors and timeouts raise OracleUnavailable
- System prompt and decoding policy per role
"""

import threading

import pytest

from agents.base import AgentRole
from agents.oracle import (
    PERFORMER_SYSTEM_PROMPT,
    VALIDATOR_SYSTEM_PROMPT,
    OracleClient,
    build_judgment_prompt,
    normalize_result,
)
from core.llm import LLMClient, MockProvider, PERFORMER_POLICY, VALIDATOR_POLICY
from core.schemas import OracleUnavailable

from fixtures.common import make_oracle


class TestNormalizeResult:
    """Tests for normalize_result."""

    def test_trims_and_lowercases(self):
        assert normalize_result("  YES  \n") == "yes"

    def test_keeps_non_canonical_text(self):
        """Anything the model says is preserved, only normalized."""
        assert normalize_result("Yeah") == "yeah"

    def test_blank_is_undetermined(self):
        """A blank or missing reply is the undetermined result."""
        assert normalize_result("  \n") == "undetermined"
        assert normalize_result(None) == "undetermined"


class TestBuildJudgmentPrompt:
    """Tests for build_judgment_prompt."""

    def test_single_post(self):
        prompt = build_judgment_prompt("Will it rain?", ["Rain expected"])
        assert prompt == "Condition: Will it rain?\nX post: Rain expected"

    def test_posts_joined_by_blank_line(self):
        prompt = build_judgment_prompt("Will it rain?", ["one", "two"])
        assert prompt.endswith("X post: one\n\ntwo")


class TestOracleClient:
    """Tests for OracleClient.judge."""

    def test_judge_normalizes(self):
        """The reply is normalized and the raw text kept."""
        oracle = make_oracle(["  YES  \n"])

        judgment = oracle.judge("Condition: x\nX post: y")

        assert judgment.result == "yes"
        assert judgment.raw_response == "  YES  \n"
        assert judgment.provider == "mock"
        assert judgment.model == "mock-model"

    def test_prompt_sent_as_user_message(self):
        """The prompt is the user message, after the role's system prompt."""
        oracle = make_oracle(["no"])
        oracle.judge("Condition: x")

        messages = oracle.llm.provider.calls[0]["messages"]
        assert messages[0] == {"role": "system", "content": PERFORMER_SYSTEM_PROMPT}
        assert messages[1] == {"role": "user", "content": "Condition: x"}

    def test_role_defaults(self):
        """Performer and validator differ in prompt and policy."""
        performer = make_oracle()
        validator = make_oracle(role=AgentRole.VALIDATOR)

        assert performer.policy == PERFORMER_POLICY
        assert validator.policy == VALIDATOR_POLICY
        assert validator.system_prompt == VALIDATOR_SYSTEM_PROMPT

    def test_provider_error(self):
        """Provider exceptions become OracleUnavailable."""
        oracle = make_oracle(error=ConnectionError("refused"))

        with pytest.raises(OracleUnavailable) as exc_info:
            oracle.judge("Condition: x")

        assert "refused" in exc_info.value.message
        assert exc_info.value.details["error_type"] == "ConnectionError"

    def test_blank_reply_is_a_judgment(self):
        """A whitespace-only reply is returned as undetermined, not raised."""
        judgment = make_oracle(["   \n"]).judge("Condition: x")

        assert judgment.result == "undetermined"
        assert judgment.raw_response == "   \n"

    def test_timeout(self):
        """A reply slower than timeout_s is abandoned."""
        release = threading.Event()

        def slow(messages, policy):
            release.wait(5)
            return "yes"

        oracle = OracleClient(
            LLMClient(MockProvider(response_fn=slow)),
            timeout_s=0.05,
        )
        try:
            with pytest.raises(OracleUnavailable) as exc_info:
                oracle.judge("Condition: x")
        finally:
            release.set()

        assert "timed out" in exc_info.value.message

    def test_no_retry(self):
        """A failing call is attempted exactly once."""
        oracle = make_oracle(error=RuntimeError("down"))
        with pytest.raises(OracleUnavailable):
            oracle.judge("Condition: x")
        assert len(oracle.llm.provider.calls) == 1
