"""
Runtime Configuration Module

Provides configuration loading and management for Sibyl nodes.
"""

from .runtime import (
    EvidenceConfig,
    HttpConfig,
    LLMConfig,
    RegistryConfig,
    RuntimeConfig,
    SchedulerConfig,
    StoreConfig,
    TasksConfig,
    default_config_paths,
    load_runtime_config,
    provider_api_key,
)

__all__ = [
    "EvidenceConfig",
    "HttpConfig",
    "LLMConfig",
    "RegistryConfig",
    "RuntimeConfig",
    "SchedulerConfig",
    "StoreConfig",
    "TasksConfig",
    "default_config_paths",
    "load_runtime_config",
    "provider_api_key",
]
