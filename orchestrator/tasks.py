"""
Task Submission

Hands an executed judgment to the downstream task consumer: the proof's
content id, the ``{inputString, result}`` payload and the task definition id.

Submissions carry an idempotency key (the prediction id for scheduled
executions) so a retried execution can be recognised downstream.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from core.http import HttpClient, HttpError
from core.schemas import TaskSubmissionError

logger = logging.getLogger(__name__)


def encode_payload(payload: dict[str, Any]) -> str:
    """Compact JSON encoding of a task payload, keys in insertion order."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


@dataclass
class TaskAck:
    """Acknowledgement of a task submission."""
    accepted: bool
    proof_cid: str
    task_definition_id: int
    idempotency_key: Optional[str] = None
    duplicate: bool = False
    response: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "accepted": self.accepted,
            "proofCid": self.proof_cid,
            "taskDefinitionId": self.task_definition_id,
            "idempotencyKey": self.idempotency_key,
            "duplicate": self.duplicate,
        }


class TaskSubmitter(ABC):
    """Submits executed judgments to the task consumer. No retries."""

    name: str = "tasks"

    @abstractmethod
    def submit(
        self,
        proof_cid: str,
        payload: dict[str, Any],
        task_definition_id: int = 0,
        *,
        idempotency_key: Optional[str] = None,
    ) -> TaskAck:
        """
        Submit one task.

        Raises:
            TaskSubmissionError: If the consumer rejects or cannot be reached
        """
        ...


@dataclass
class SubmittedTask:
    proof_cid: str
    payload: dict[str, Any]
    task_definition_id: int
    idempotency_key: Optional[str] = None
    data: str = field(default="")


class RecordingTaskSubmitter(TaskSubmitter):
    """
    In-memory submitter that records every accepted task.

    A repeated idempotency key is acknowledged as a duplicate and not
    recorded again.
    """

    name = "memory"

    def __init__(self) -> None:
        self.tasks: list[SubmittedTask] = []
        self._keys: set[str] = set()
        self._lock = threading.Lock()
        self.fail_with: Optional[str] = None

    def submit(
        self,
        proof_cid: str,
        payload: dict[str, Any],
        task_definition_id: int = 0,
        *,
        idempotency_key: Optional[str] = None,
    ) -> TaskAck:
        if self.fail_with:
            raise TaskSubmissionError(self.fail_with, details={"proof_cid": proof_cid})

        with self._lock:
            if idempotency_key is not None and idempotency_key in self._keys:
                logger.info(f"Duplicate task submission ignored (key {idempotency_key})")
                return TaskAck(
                    accepted=True,
                    proof_cid=proof_cid,
                    task_definition_id=task_definition_id,
                    idempotency_key=idempotency_key,
                    duplicate=True,
                )
            if idempotency_key is not None:
                self._keys.add(idempotency_key)
            self.tasks.append(
                SubmittedTask(
                    proof_cid=proof_cid,
                    payload=dict(payload),
                    task_definition_id=task_definition_id,
                    idempotency_key=idempotency_key,
                    data=encode_payload(payload),
                )
            )

        return TaskAck(
            accepted=True,
            proof_cid=proof_cid,
            task_definition_id=task_definition_id,
            idempotency_key=idempotency_key,
        )


class HttpTaskSubmitter(TaskSubmitter):
    """
    JSON-RPC ``sendTask`` submitter for an aggregator node.

    Params: ``[proofOfTask, data, taskDefinitionId, performerAddress]``. The
    JSON-RPC request id is the idempotency key when one is given.
    """

    name = "http"

    def __init__(
        self,
        aggregator_url: str,
        *,
        performer_address: Optional[str] = None,
        http: Optional[HttpClient] = None,
    ) -> None:
        self.aggregator_url = aggregator_url
        self.performer_address = performer_address or ""
        # The aggregator is called once per task; no transport retries
        self.http = http or HttpClient(timeout=30.0, max_retries=0)

    def submit(
        self,
        proof_cid: str,
        payload: dict[str, Any],
        task_definition_id: int = 0,
        *,
        idempotency_key: Optional[str] = None,
    ) -> TaskAck:
        request_id = idempotency_key or uuid.uuid4().hex
        body = {
            "jsonrpc": "2.0",
            "method": "sendTask",
            "params": [
                proof_cid,
                encode_payload(payload),
                task_definition_id,
                self.performer_address,
            ],
            "id": request_id,
        }

        try:
            response = self.http.post(self.aggregator_url, json=body)
        except HttpError as e:
            raise TaskSubmissionError(
                f"sendTask to {self.aggregator_url} failed: {e}",
                details={"proof_cid": proof_cid},
            ) from e

        if not response.ok:
            raise TaskSubmissionError(
                f"sendTask returned HTTP {response.status_code}",
                details={"proof_cid": proof_cid, "status_code": response.status_code},
            )

        try:
            reply = response.json()
        except ValueError as e:
            raise TaskSubmissionError("sendTask returned a non-JSON body") from e

        if isinstance(reply, dict) and reply.get("error"):
            raise TaskSubmissionError(
                f"sendTask rejected: {reply['error']}",
                details={"proof_cid": proof_cid, "error": reply["error"]},
            )

        logger.info(f"Task submitted: proof {proof_cid}, definition {task_definition_id}")
        return TaskAck(
            accepted=True,
            proof_cid=proof_cid,
            task_definition_id=task_definition_id,
            idempotency_key=idempotency_key,
            response=reply.get("result") if isinstance(reply, dict) else reply,
        )
