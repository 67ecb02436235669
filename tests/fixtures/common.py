"""
Common test fixtures shared by all modules.

Provides factory functions for the oracle's core data structures and
in-memory collaborators:
- EvidenceItem posts
- PredictionRecord
- OracleClient backed by MockProvider
- a fully wired in-memory node (Services)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional

from agents.base import AgentRole
from agents.collector import StaticEvidenceSource
from agents.context import FrozenClock
from agents.oracle import OracleClient
from core.config import RuntimeConfig
from core.llm import LLMClient, MockProvider
from core.schemas import EvidenceItem, PredictionRecord, PredictionStatus
from core.store import InMemoryProofStore
from orchestrator.registry import InMemoryRegistryPointer
from orchestrator.services import Services, build_services
from orchestrator.tasks import RecordingTaskSubmitter


# Fixed "now" for deterministic tests
NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

TESLA_INPUT = (
    "Condition: Will Tesla announce a new Roadster this week?\n"
    "X post: Tesla teases an event for Friday."
)


# =============================================================================
# Evidence
# =============================================================================

def make_post(
    post_id: str = "1001",
    text: str = "Tesla unveils the new Roadster at a Friday event",
    author: str = "Tesla",
    created_at: Optional[datetime] = None,
    minutes_ago: int = 0,
) -> EvidenceItem:
    """Create a real (non-synthetic) post."""
    return EvidenceItem(
        id=post_id,
        text=text,
        author=author,
        created_at=created_at or NOW - timedelta(minutes=minutes_ago),
    )


# =============================================================================
# PredictionRecord
# =============================================================================

def make_record(
    prediction_id: str = "pred_1772366400000_abcd1234",
    input_string: str = TESLA_INPUT,
    status: PredictionStatus = PredictionStatus.PENDING,
    end_time: Optional[datetime] = None,
    created_at: Optional[datetime] = None,
    **fields: Any,
) -> PredictionRecord:
    """
    Create a PredictionRecord for testing.

    Defaults to a pending record that became due one hour before ``NOW``.
    """
    return PredictionRecord(
        id=prediction_id,
        input_string=input_string,
        condition=fields.pop("condition", "Will Tesla announce a new Roadster this week?"),
        status=status,
        end_time=end_time or NOW - timedelta(hours=1),
        created_at=created_at or NOW - timedelta(days=1),
        **fields,
    )


# =============================================================================
# Oracles
# =============================================================================

def make_oracle(
    responses: Optional[list[str]] = None,
    *,
    role: AgentRole = AgentRole.PERFORMER,
    response_fn: Optional[Callable[[list[dict[str, Any]], Any], str]] = None,
    error: Optional[Exception] = None,
    timeout_s: Optional[float] = 5.0,
) -> OracleClient:
    """Create an OracleClient over a MockProvider (``provider.calls`` records prompts)."""
    provider = MockProvider(responses=responses, response_fn=response_fn, error=error)
    return OracleClient(LLMClient(provider), role=role, timeout_s=timeout_s)


def last_prompt(oracle: OracleClient) -> str:
    """The user message of the oracle's most recent call."""
    messages = oracle.llm.provider.calls[-1]["messages"]
    return [m for m in messages if m["role"] == "user"][-1]["content"]


# =============================================================================
# Wired node
# =============================================================================

def make_services(
    *,
    clock: Optional[FrozenClock] = None,
    timelines: Optional[dict[str, Iterable[EvidenceItem]]] = None,
    failing: Iterable[str] = (),
    performer_responses: Optional[list[str]] = None,
    validator_responses: Optional[list[str]] = None,
    config: Optional[RuntimeConfig] = None,
) -> Services:
    """
    Build a node entirely from in-memory collaborators.

    The evidence source, both oracles, the store, the pointer and the task
    submitter are injected; nothing touches the network.
    """
    config = config or RuntimeConfig()
    config.scheduler.execution_timeout_s = None
    return build_services(
        config,
        clock=clock or FrozenClock(NOW),
        store=InMemoryProofStore(),
        source=StaticEvidenceSource(timelines or {}, failing=failing),
        performer=make_oracle(performer_responses or ["yes"]),
        validator=make_oracle(validator_responses or ["yes"], role=AgentRole.VALIDATOR),
        submitter=RecordingTaskSubmitter(),
        pointer=InMemoryRegistryPointer(),
    )
