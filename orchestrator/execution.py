"""
Execution Pipeline

Drives one prediction from ``pending`` to ``executed`` or ``failed``:

1. parse the condition out of the input string
2. gather evidence for the condition
3. render the judgment prompt (raw input string when evidence is synthetic)
4. ask the performer oracle
5. publish the proof artifact
6. submit the task
7. record the outcome in the registry

A failure in steps 1-6 marks the record failed with the error message.
Each stage first checks the cancellation token.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from agents.collector import EvidenceGatherer
from agents.context import Clock, RealClock
from agents.oracle import OracleClient, build_judgment_prompt
from core.concurrency import CancellationToken
from core.schemas import (
    EvidenceItem,
    PredictionRecord,
    PredictionStatus,
    ProofArtifact,
    SibylException,
    has_real_evidence,
)
from core.store import ProofStore

from orchestrator.input_parser import parse_input
from orchestrator.registry import PredictionRegistry
from orchestrator.tasks import TaskAck, TaskSubmitter


logger = logging.getLogger(__name__)


# =============================================================================
# Execution Result
# =============================================================================

@dataclass
class ExecutionResult:
    """Outcome of executing one input (with or without a registry record)."""
    ok: bool = False
    prediction_id: Optional[str] = None
    condition: Optional[str] = None
    prompt: Optional[str] = None
    evidence: list[EvidenceItem] = field(default_factory=list)
    result: Optional[str] = None
    proof_cid: Optional[str] = None
    task: Optional[TaskAck] = None
    executed_at: Optional[datetime] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    stage: Optional[str] = None

    @property
    def tweet_ids(self) -> list[str]:
        return [item.id for item in self.evidence]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "predictionId": self.prediction_id,
            "condition": self.condition,
            "inputString": self.prompt,
            "result": self.result,
            "proofCid": self.proof_cid,
            "tweetIds": self.tweet_ids,
            "taskDefinitionId": self.task.task_definition_id if self.task else None,
            "executedAt": self.executed_at.isoformat() if self.executed_at else None,
            "error": self.error,
            "errorCode": self.error_code,
            "stage": self.stage,
        }


# =============================================================================
# Pipeline
# =============================================================================

class ExecutionPipeline:
    """
    Performer-side execution of predictions.

    Usage:
        pipeline = ExecutionPipeline(gatherer, performer, store, submitter, registry)
        result = pipeline.execute(record)
    """

    def __init__(
        self,
        gatherer: EvidenceGatherer,
        oracle: OracleClient,
        store: ProofStore,
        submitter: TaskSubmitter,
        registry: Optional[PredictionRegistry] = None,
        *,
        clock: Optional[Clock] = None,
        execution_timeout_s: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.gatherer = gatherer
        self.oracle = oracle
        self.store = store
        self.submitter = submitter
        self.registry = registry
        self.clock = clock or RealClock()
        self.execution_timeout_s = execution_timeout_s
        self.logger = logger or logging.getLogger(__name__)

    def execute(
        self,
        record: PredictionRecord,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> ExecutionResult:
        """
        Execute a due record and write its outcome to the registry.

        Registry write failures (StoreUnavailable, RegistryConflict) are not
        swallowed: they propagate after being logged.
        """
        if self.registry is None:
            raise RuntimeError("ExecutionPipeline.execute requires a registry")

        cancel = cancel or CancellationToken(self.execution_timeout_s)
        self.logger.info(f"Executing prediction {record.id}")

        result = self._run(
            record.input_string,
            record.task_definition_id,
            prediction_id=record.id,
            cancel=cancel,
        )

        if result.ok:
            self.registry.update(record.id, {
                "status": PredictionStatus.EXECUTED.value,
                "condition": result.condition,
                "result": result.result,
                "proofCid": result.proof_cid,
                "executedAt": result.executed_at,
                "tweetIds": result.tweet_ids,
            })
            self.logger.info(
                f"Prediction {record.id} executed successfully with result: {result.result}"
            )
        else:
            self.logger.error(
                f"Error executing prediction {record.id} at {result.stage}: {result.error}"
            )
            self.registry.update(record.id, {
                "status": PredictionStatus.FAILED.value,
                "error": result.error,
            })
        return result

    def execute_input(
        self,
        input_string: str,
        task_definition_id: int = 0,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> ExecutionResult:
        """Run steps 1-6 for an ad-hoc input; nothing is written to the registry."""
        cancel = cancel or CancellationToken(self.execution_timeout_s)
        return self._run(input_string, task_definition_id, prediction_id=None, cancel=cancel)

    def _run(
        self,
        input_string: str,
        task_definition_id: int,
        *,
        prediction_id: Optional[str],
        cancel: CancellationToken,
    ) -> ExecutionResult:
        result = ExecutionResult(prediction_id=prediction_id)

        try:
            result.stage = "parse"
            cancel.check(result.stage)
            result.condition = parse_input(input_string).condition

            result.stage = "gather"
            cancel.check(result.stage)
            result.evidence = self.gatherer.gather(result.condition, cancel=cancel)

            result.stage = "prompt"
            cancel.check(result.stage)
            result.prompt = self._compose_prompt(result.condition, result.evidence, input_string)

            result.stage = "judge"
            cancel.check(result.stage)
            judgment = self.oracle.judge(result.prompt)
            judged_at = self.clock.now()

            result.stage = "publish"
            cancel.check(result.stage)
            artifact = ProofArtifact(
                input_string=result.prompt,
                result=judgment.result,
                timestamp=judged_at,
                original_prediction_id=prediction_id,
            )
            proof_cid = self.store.publish(artifact.to_wire())

            result.stage = "submit"
            cancel.check(result.stage)
            task = self.submitter.submit(
                proof_cid,
                {"inputString": result.prompt, "result": judgment.result},
                task_definition_id,
                idempotency_key=prediction_id,
            )
        except SibylException as e:
            result.error = e.message
            result.error_code = e.code
            return result
        except Exception as e:
            self.logger.exception(f"Unexpected error during {result.stage}")
            result.error = str(e) or type(e).__name__
            result.error_code = "INTERNAL_ERROR"
            return result

        result.result = judgment.result
        result.proof_cid = proof_cid
        result.task = task
        result.executed_at = self.clock.now()
        result.stage = "done"
        result.ok = True
        return result

    @staticmethod
    def _compose_prompt(condition: str, evidence: list[EvidenceItem], input_string: str) -> str:
        if has_real_evidence(evidence):
            return build_judgment_prompt(
                condition, [item.text for item in evidence if not item.synthetic]
            )
        return input_string
