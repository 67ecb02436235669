"""
CLI Configuration

Config file template and service construction for CLI commands.
"""

from __future__ import annotations

from argparse import Namespace

from core.config import RuntimeConfig
from orchestrator.services import Services, build_services


def get_services(args: Namespace) -> Services:
    """Services injected by the caller, else built from the loaded runtime config."""
    services = getattr(args, "services", None)
    if services is None:
        config: RuntimeConfig = args.runtime_config
        services = build_services(config)
        args.services = services
    return services


def get_default_config_template() -> str:
    """Get a template configuration file (YAML)."""
    return """# Sibyl node configuration. Environment variables (SIBYL_*) override these values.
# Provider API keys are read from HYPERBOLIC_API_KEY, GAIA_API_KEY, OPENAI_API_KEY, ...

performer:
  provider: hyperbolic
  model: deepseek-ai/DeepSeek-V3
  temperature: 0.1
  top_p: 0.9
  max_tokens: 512
  timeout_s: 60

validator:
  provider: gaia
  model: llama
  timeout_s: 60

scheduler:
  interval_s: 60
  max_workers: 1
  execution_timeout_s: 300

evidence:
  source: nitter
  nitter_base_url: https://nitter.net
  rate_limit_s: 2
  per_account_count: 10
  max_items: 5
  selector: keyword
  entity_map_path: null

store:
  kind: memory
  gateway_url: https://ipfs.io/ipfs
  publish_url: null

registry:
  initial_cid: null
  pointer_path: .sibyl/registry.cid
  max_retries: 3

tasks:
  kind: memory
  aggregator_url: null
  performer_address: null

log_level: INFO
"""
