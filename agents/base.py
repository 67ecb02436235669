"""
Agent Base Classes

Identity shared by the evidence gatherer, the oracle clients and the
validation pipeline. The health endpoint lists each agent's description.
"""

from __future__ import annotations

from abc import ABC
from enum import Enum
from typing import Optional


class AgentCapability(str, Enum):
    LLM = "llm"
    NETWORK = "network"
    DETERMINISTIC = "deterministic"  # same inputs, same output


class AgentRole(str, Enum):
    """Which node an oracle agent acts for."""
    PERFORMER = "performer"
    VALIDATOR = "validator"


class BaseAgent(ABC):
    """
    Named, versioned component with a capability set.

    Subclasses set ``_name``, ``_version`` and ``_capabilities`` as class
    attributes; ``name`` may be overridden per instance.
    """

    _name: str
    _version: str = "v1"
    _capabilities: set[AgentCapability] = set()

    def __init__(self, *, name: Optional[str] = None) -> None:
        self._name_override = name

    @property
    def name(self) -> str:
        return self._name_override or getattr(self, "_name", self.__class__.__name__)

    @property
    def version(self) -> str:
        return self._version

    @property
    def capabilities(self) -> set[AgentCapability]:
        return set(self._capabilities)

    def describe(self) -> dict[str, object]:
        """Identity summary for health and status output."""
        return {
            "name": self.name,
            "version": self.version,
            "capabilities": sorted(c.value for c in self.capabilities),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, version={self.version!r})"
