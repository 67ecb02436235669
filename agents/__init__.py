"""
Agents Package

The evidence gatherer, the oracle clients and the validation pipeline,
plus the shared base class and dependency context.
"""

from agents.base import AgentCapability, AgentRole, BaseAgent
from agents.context import AgentContext, Clock, FrozenClock, RealClock

__all__ = [
    "AgentCapability",
    "AgentRole",
    "BaseAgent",
    "AgentContext",
    "Clock",
    "FrozenClock",
    "RealClock",
]
