"""
Unit tests for runtime configuration.

Tests:
- Defaults and partial dictionaries
- YAML / JSON files
- Environment overrides (SIBYL_*)
- to_dict never leaks API keys
- Service wiring from configuration
"""

import json
import os

import pytest

from core.config import RuntimeConfig, load_runtime_config
from core.store import InMemoryProofStore, IPFSProofStore
from orchestrator.registry import FileRegistryPointer
from orchestrator.services import build_pointer, build_selector, build_services, build_store, build_submitter
from orchestrator.tasks import HttpTaskSubmitter, RecordingTaskSubmitter
from agents.collector import AllowListAccountSelector, KeywordAccountSelector
from agents.context import AgentContext
from agents.collector import StaticEvidenceSource
from orchestrator.registry import InMemoryRegistryPointer

from fixtures.common import make_oracle


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove SIBYL_* variables so tests see only what they set."""
    for name in list(os.environ):
        if name.startswith("SIBYL_"):
            monkeypatch.delenv(name, raising=False)


class TestRuntimeConfigDefaults:
    """Tests for defaults and from_dict."""

    def test_defaults(self):
        config = RuntimeConfig()
        assert config.performer.provider == "hyperbolic"
        assert config.validator.provider == "gaia"
        assert config.scheduler.interval_s == 60.0
        assert config.evidence.rate_limit_s == 2.0
        assert config.evidence.max_items == 5
        assert config.store.kind == "memory"

    def test_partial_dict(self):
        """Missing sections keep their defaults."""
        config = RuntimeConfig.from_dict({
            "scheduler": {"interval_s": 5},
            "performer": {"provider": "openai", "model": "gpt-4o-mini"},
        })
        assert config.scheduler.interval_s == 5
        assert config.scheduler.max_workers == 1
        assert config.performer.model == "gpt-4o-mini"
        assert config.performer.max_tokens == 512
        assert config.validator.provider == "gaia"

    def test_to_dict_omits_keys(self):
        """API keys are never serialized."""
        config = RuntimeConfig.from_dict({
            "performer": {"api_key": "sk-secret"},
            "store": {"api_key": "pin-secret"},
        })
        dumped = json.dumps(config.to_dict())
        assert "sk-secret" not in dumped
        assert "pin-secret" not in dumped


class TestConfigFiles:
    """Tests for file loading."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "sibyl.yaml"
        path.write_text("scheduler:\n  interval_s: 15\nevidence:\n  source: static\n")

        config = RuntimeConfig.from_file(path)

        assert config.scheduler.interval_s == 15
        assert config.evidence.source == "static"

    def test_json(self, tmp_path):
        path = tmp_path / "sibyl.json"
        path.write_text(json.dumps({"tasks": {"kind": "http", "aggregator_url": "http://agg"}}))

        config = RuntimeConfig.from_file(path)

        assert config.tasks.kind == "http"
        assert config.tasks.aggregator_url == "http://agg"

    def test_missing_explicit_path(self, tmp_path):
        """An explicit config path must exist."""
        with pytest.raises(FileNotFoundError):
            load_runtime_config(tmp_path / "missing.yaml")

    def test_search_current_directory(self, tmp_path, monkeypatch):
        """sibyl.yaml in the working directory is picked up."""
        (tmp_path / "sibyl.yaml").write_text("log_level: debug\n")
        monkeypatch.chdir(tmp_path)

        assert load_runtime_config().log_level == "DEBUG"


class TestEnvOverrides:
    """Tests for SIBYL_* environment variables."""

    def test_env_beats_file(self, tmp_path, monkeypatch):
        """Environment variables override file values."""
        path = tmp_path / "sibyl.yaml"
        path.write_text("scheduler:\n  interval_s: 15\n")
        monkeypatch.setenv("SIBYL_INTERVAL_S", "2.5")
        monkeypatch.setenv("SIBYL_REGISTRY_CID", "0xseed")

        config = load_runtime_config(path)

        assert config.scheduler.interval_s == 2.5
        assert config.registry.initial_cid == "0xseed"

    def test_provider_override(self, monkeypatch):
        """Switching provider picks up that provider's API key."""
        monkeypatch.setenv("SIBYL_PERFORMER_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

        config = RuntimeConfig().with_env_overrides()

        assert config.performer.provider == "openai"
        assert config.performer.api_key == "sk-env"

    def test_no_overrides_returns_same(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config

    def test_debug_flag(self, monkeypatch):
        monkeypatch.setenv("SIBYL_DEBUG", "1")
        assert RuntimeConfig.from_env().log_level == "DEBUG"


class TestServiceBuilders:
    """Tests for building components from configuration."""

    def test_store_kinds(self):
        ctx = AgentContext.create_minimal()
        assert isinstance(build_store(RuntimeConfig(), ctx), InMemoryProofStore)

        config = RuntimeConfig.from_dict({"store": {"kind": "ipfs", "gateway_url": "https://gw/ipfs"}})
        assert isinstance(build_store(config, ctx), IPFSProofStore)

    def test_unknown_store(self):
        config = RuntimeConfig.from_dict({"store": {"kind": "s3"}})
        with pytest.raises(ValueError):
            build_store(config, AgentContext.create_minimal())

    def test_file_pointer(self, tmp_path):
        config = RuntimeConfig.from_dict({"registry": {"pointer_path": str(tmp_path / "ptr")}})
        assert isinstance(build_pointer(config), FileRegistryPointer)

    def test_selectors(self):
        assert isinstance(build_selector(RuntimeConfig()), KeywordAccountSelector)
        config = RuntimeConfig.from_dict({
            "evidence": {"selector": "allow_list", "allow_list": ["@Reuters"]},
        })
        selector = build_selector(config)
        assert isinstance(selector, AllowListAccountSelector)
        assert selector.select("x") == ["Reuters"]

    def test_submitters(self):
        ctx = AgentContext.create_minimal()
        assert isinstance(build_submitter(RuntimeConfig(), ctx), RecordingTaskSubmitter)

        config = RuntimeConfig.from_dict({"tasks": {"kind": "http", "aggregator_url": "http://agg"}})
        assert isinstance(build_submitter(config, ctx), HttpTaskSubmitter)

        missing = RuntimeConfig.from_dict({"tasks": {"kind": "http"}})
        with pytest.raises(ValueError):
            build_submitter(missing, ctx)

    def test_injected_components_are_kept(self):
        """An empty injected store is still the store the node uses."""
        store = InMemoryProofStore()
        source = StaticEvidenceSource({})
        submitter = RecordingTaskSubmitter()
        pointer = InMemoryRegistryPointer()
        performer = make_oracle(["yes"])

        services = build_services(
            RuntimeConfig(),
            store=store,
            source=source,
            performer=performer,
            submitter=submitter,
            pointer=pointer,
        )

        assert len(store) == 0
        assert services.store is store
        assert services.registry.store is store
        assert services.execution.store is store
        assert services.validation.store is store
        assert services.gatherer.source is source
        assert services.submitter is submitter
        assert services.registry.pointer is pointer
        assert services.performer is performer
