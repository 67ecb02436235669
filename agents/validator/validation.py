"""
Validation Pipeline

Independent re-derivation of a published judgment:

1. fetch the proof artifact by content id
2. ask the validator oracle about the artifact's input string
3. approve iff the normalized results are equal
4. return the vote (and optionally move the record to ``validated``)

Fetch and oracle failures produce a rejected vote instead of raising.
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from agents.base import AgentCapability, BaseAgent
from agents.context import Clock, RealClock
from agents.oracle import OracleClient, normalize_result
from core.schemas import (
    PredictionStatus,
    ProofArtifact,
    SibylException,
    ValidationVote,
)
from core.store import ProofStore

if TYPE_CHECKING:
    from orchestrator.registry import PredictionRegistry


class ValidationPipeline(BaseAgent):
    """
    Validator-side consensus check.

    Without a registry the pipeline is read-only. With one, an approved vote
    on an artifact that names its ``originalPredictionId`` moves that record
    from ``executed`` to ``validated``.
    """

    _name = "ValidationPipeline"
    _version = "v1"
    _capabilities = {AgentCapability.LLM, AgentCapability.NETWORK}

    def __init__(
        self,
        store: ProofStore,
        oracle: OracleClient,
        *,
        registry: Optional["PredictionRegistry"] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self.store = store
        self.oracle = oracle
        self.registry = registry
        self.clock = clock or RealClock()
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, proof_cid: str) -> ValidationVote:
        """Fetch the proof, re-judge it and cast a vote."""
        try:
            artifact = ProofArtifact.from_payload(self.store.fetch(proof_cid), proof_cid)
        except SibylException as e:
            self.logger.error(f"Could not load proof {proof_cid}: {e.message}")
            return ValidationVote.rejected(e.message, proof_cid)

        self.logger.info(f"Validating prediction with input: {artifact.input_string[:100]}...")
        performer_result = normalize_result(artifact.result)
        self.logger.info(f"Performer node result: {performer_result}")

        try:
            judgment = self.oracle.judge(artifact.input_string)
        except SibylException as e:
            self.logger.error(f"Validator oracle failed for {proof_cid}: {e.message}")
            return ValidationVote(
                approved=False,
                performer_result=performer_result,
                input_string=artifact.input_string,
                proof_cid=proof_cid,
                error=e.message,
            )

        validator_result = judgment.result
        self.logger.info(f"Validator node result: {validator_result}")

        vote = ValidationVote(
            approved=validator_result == performer_result,
            performer_result=performer_result,
            validator_result=validator_result,
            input_string=artifact.input_string,
            proof_cid=proof_cid,
        )
        self.logger.info(
            f"Validation {'approved' if vote.approved else 'rejected'}: "
            f"Performer: {performer_result}, Validator: {validator_result}"
        )

        if vote.approved and self.registry is not None and artifact.original_prediction_id:
            self._write_back(artifact.original_prediction_id, vote)
        return vote

    def _write_back(self, prediction_id: str, vote: ValidationVote) -> None:
        """Move an executed record to validated; failures are logged, not raised."""
        try:
            record = self.registry.get(prediction_id)
            if record.status != PredictionStatus.EXECUTED:
                self.logger.info(
                    f"Prediction {prediction_id} is {record.status.value}, not marking validated"
                )
                return
            if record.proof_cid and record.proof_cid != vote.proof_cid:
                self.logger.warning(
                    f"Prediction {prediction_id} points at proof {record.proof_cid}, "
                    f"vote was for {vote.proof_cid}; not marking validated"
                )
                return
            self.registry.update(prediction_id, {
                "status": PredictionStatus.VALIDATED.value,
                "validatedAt": self.clock.now(),
                "validation": vote.summary(),
            })
            self.logger.info(f"Prediction {prediction_id} marked validated")
        except SibylException as e:
            self.logger.error(f"Could not record validation of {prediction_id}: {e.message}")
