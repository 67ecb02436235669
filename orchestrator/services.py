"""
Service Wiring

Builds the object graph of a node (store, registry, evidence gatherer,
oracles, pipelines, scheduler) from a RuntimeConfig.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from agents.base import AgentRole
from agents.collector import (
    AccountSelector,
    AllowListAccountSelector,
    EvidenceGatherer,
    EvidenceSource,
    KeywordAccountSelector,
    NitterSource,
    StaticEvidenceSource,
)
from agents.context import AgentContext, Clock
from agents.oracle import OracleClient, create_oracle_client
from agents.validator import ValidationPipeline
from core.concurrency import RateLimiter
from core.config import RuntimeConfig
from core.store import InMemoryProofStore, IPFSProofStore, ProofStore

from orchestrator.execution import ExecutionPipeline
from orchestrator.registry import (
    FileRegistryPointer,
    InMemoryRegistryPointer,
    PredictionRegistry,
    RegistryPointer,
)
from orchestrator.scheduler import Scheduler
from orchestrator.tasks import HttpTaskSubmitter, RecordingTaskSubmitter, TaskSubmitter


logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Every long-lived component of a node."""
    config: RuntimeConfig
    context: AgentContext
    store: ProofStore
    registry: PredictionRegistry
    gatherer: EvidenceGatherer
    performer: OracleClient
    validator: OracleClient
    submitter: TaskSubmitter
    execution: ExecutionPipeline
    validation: ValidationPipeline
    scheduler: Scheduler


def build_store(config: RuntimeConfig, ctx: AgentContext) -> ProofStore:
    kind = config.store.kind.lower()
    if kind == "memory":
        return InMemoryProofStore()
    if kind == "ipfs":
        return IPFSProofStore(
            config.store.gateway_url,
            publish_url=config.store.publish_url,
            api_key=config.store.api_key,
            http=ctx.http,
        )
    raise ValueError(f"Unknown store kind: {config.store.kind}")


def build_pointer(config: RuntimeConfig) -> RegistryPointer:
    if config.registry.pointer_path:
        return FileRegistryPointer(config.registry.pointer_path, initial=config.registry.initial_cid)
    return InMemoryRegistryPointer(config.registry.initial_cid)


def build_source(config: RuntimeConfig, ctx: AgentContext) -> EvidenceSource:
    source = config.evidence.source.lower()
    if source == "nitter":
        return NitterSource(
            config.evidence.nitter_base_url,
            http=ctx.http,
            rate_limiter=RateLimiter(config.evidence.rate_limit_s),
            clock=ctx.clock.now,
        )
    if source == "static":
        return StaticEvidenceSource()
    raise ValueError(f"Unknown evidence source: {config.evidence.source}")


def build_selector(config: RuntimeConfig) -> AccountSelector:
    selector = config.evidence.selector.lower()
    if selector == "allow_list":
        return AllowListAccountSelector(config.evidence.allow_list)
    if selector == "keyword":
        if config.evidence.entity_map_path:
            return KeywordAccountSelector.from_file(config.evidence.entity_map_path)
        return KeywordAccountSelector()
    raise ValueError(f"Unknown account selector: {config.evidence.selector}")


def build_submitter(config: RuntimeConfig, ctx: AgentContext) -> TaskSubmitter:
    kind = config.tasks.kind.lower()
    if kind == "memory":
        return RecordingTaskSubmitter()
    if kind == "http":
        if not config.tasks.aggregator_url:
            raise ValueError("tasks.aggregator_url is required for http task submission")
        return HttpTaskSubmitter(
            config.tasks.aggregator_url,
            performer_address=config.tasks.performer_address,
        )
    raise ValueError(f"Unknown task submitter kind: {config.tasks.kind}")


def build_services(
    config: RuntimeConfig,
    *,
    clock: Optional[Clock] = None,
    store: Optional[ProofStore] = None,
    source: Optional[EvidenceSource] = None,
    performer: Optional[OracleClient] = None,
    validator: Optional[OracleClient] = None,
    submitter: Optional[TaskSubmitter] = None,
    pointer: Optional[RegistryPointer] = None,
) -> Services:
    """
    Wire a node from configuration.

    Keyword overrides replace the configured component, which is how tests
    and the API inject in-memory collaborators.
    """
    ctx = AgentContext.create(config, clock=clock)

    if store is None:
        store = build_store(config, ctx)
    if pointer is None:
        pointer = build_pointer(config)
    if source is None:
        source = build_source(config, ctx)
    registry = PredictionRegistry(
        store,
        pointer,
        clock=ctx.clock,
        max_retries=config.registry.max_retries,
        logger=logging.getLogger("sibyl.registry"),
    )

    gatherer = EvidenceGatherer(
        source,
        selector=build_selector(config),
        per_account_count=config.evidence.per_account_count,
        max_items=config.evidence.max_items,
        clock=ctx.clock,
        logger=logging.getLogger("sibyl.evidence"),
    )

    if performer is None:
        performer = create_oracle_client(
            config.performer,
            role=AgentRole.PERFORMER,
            proxy=config.proxy,
            logger=logging.getLogger("sibyl.performer"),
        )
    if validator is None:
        validator = create_oracle_client(
            config.validator,
            role=AgentRole.VALIDATOR,
            proxy=config.proxy,
            logger=logging.getLogger("sibyl.validator"),
        )

    if submitter is None:
        submitter = build_submitter(config, ctx)

    execution = ExecutionPipeline(
        gatherer,
        performer,
        store,
        submitter,
        registry,
        clock=ctx.clock,
        execution_timeout_s=config.scheduler.execution_timeout_s,
        logger=logging.getLogger("sibyl.execution"),
    )
    validation = ValidationPipeline(
        store,
        validator,
        registry=registry,
        clock=ctx.clock,
        logger=logging.getLogger("sibyl.validation"),
    )
    scheduler = Scheduler(
        registry,
        execution,
        interval_s=config.scheduler.interval_s,
        max_workers=config.scheduler.max_workers,
        execution_timeout_s=config.scheduler.execution_timeout_s,
        clock=ctx.clock,
        logger=logging.getLogger("sibyl.scheduler"),
    )

    logger.debug(
        f"Services built: store={store.name}, source={gatherer.source.source_id}, "
        f"performer={performer.provider_name}, validator={validator.provider_name}"
    )

    return Services(
        config=config,
        context=ctx,
        store=store,
        registry=registry,
        gatherer=gatherer,
        performer=performer,
        validator=validator,
        submitter=submitter,
        execution=execution,
        validation=validation,
        scheduler=scheduler,
    )
