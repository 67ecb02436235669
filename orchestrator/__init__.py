"""
Orchestrator

Performer-node runtime: the prediction registry, the execution pipeline,
task submission and the scheduler that drives due predictions.

Public API:
- PredictionRegistry: content-addressed registry of PredictionRecords
- RegistryPointer: current-snapshot handle (in-memory or file-backed)
- ExecutionPipeline: pending -> executed/failed for one prediction
- Scheduler: periodic tick over due predictions
- TaskSubmitter: downstream task hand-off (in-memory or JSON-RPC)
- build_services: wire all of the above from a RuntimeConfig
"""

from orchestrator.execution import ExecutionPipeline, ExecutionResult
from orchestrator.input_parser import ParsedInput, parse_input
from orchestrator.registry import (
    FileRegistryPointer,
    InMemoryRegistryPointer,
    PredictionRegistry,
    RegistryPointer,
)
from orchestrator.scheduler import Scheduler, TickReport
from orchestrator.services import Services, build_services
from orchestrator.tasks import (
    HttpTaskSubmitter,
    RecordingTaskSubmitter,
    SubmittedTask,
    TaskAck,
    TaskSubmitter,
    encode_payload,
)


__all__ = [
    # Input
    "ParsedInput",
    "parse_input",
    # Registry
    "PredictionRegistry",
    "RegistryPointer",
    "InMemoryRegistryPointer",
    "FileRegistryPointer",
    # Execution
    "ExecutionPipeline",
    "ExecutionResult",
    # Tasks
    "TaskSubmitter",
    "TaskAck",
    "SubmittedTask",
    "RecordingTaskSubmitter",
    "HttpTaskSubmitter",
    "encode_payload",
    # Scheduling
    "Scheduler",
    "TickReport",
    # Wiring
    "Services",
    "build_services",
]
