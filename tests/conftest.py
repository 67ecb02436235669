"""
Pytest configuration and shared fixtures for Sibyl tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

NOW = _common.NOW
make_post = _common.make_post
make_record = _common.make_record
make_oracle = _common.make_oracle
make_services = _common.make_services

from agents.context import FrozenClock
from core.store import InMemoryProofStore
from orchestrator.registry import InMemoryRegistryPointer, PredictionRegistry


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def clock():
    """A frozen clock at the shared test instant."""
    return FrozenClock(NOW)


@pytest.fixture
def store():
    """An empty in-memory proof store."""
    return InMemoryProofStore()


@pytest.fixture
def registry(store, clock):
    """An empty registry over the in-memory store."""
    return PredictionRegistry(store, InMemoryRegistryPointer(), clock=clock)


@pytest.fixture
def services(clock):
    """A wired in-memory node with no evidence and 'yes' oracles."""
    return make_services(clock=clock)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
