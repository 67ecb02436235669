"""
Unit tests for task submission.

Tests:
- Payload encoding
- RecordingTaskSubmitter idempotency
- HttpTaskSubmitter JSON-RPC request and error mapping (HTTP mocked)
"""

import json
from unittest.mock import MagicMock

import pytest

from core.http import HttpClient, HttpError, HttpResponse
from core.schemas import TaskSubmissionError
from orchestrator.tasks import HttpTaskSubmitter, RecordingTaskSubmitter, encode_payload


PAYLOAD = {"inputString": "Condition: x\nX post: y", "result": "yes"}


class TestEncodePayload:
    """Tests for encode_payload."""

    def test_compact_insertion_order(self):
        assert encode_payload({"inputString": "a", "result": "no"}) == '{"inputString":"a","result":"no"}'


class TestRecordingTaskSubmitter:
    """Tests for RecordingTaskSubmitter."""

    def test_records_task(self):
        """Accepted tasks are recorded with their encoded data."""
        submitter = RecordingTaskSubmitter()

        ack = submitter.submit("0xproof", PAYLOAD, 3, idempotency_key="pred_1")

        assert ack.accepted and not ack.duplicate
        assert len(submitter.tasks) == 1
        task = submitter.tasks[0]
        assert task.proof_cid == "0xproof"
        assert task.task_definition_id == 3
        assert json.loads(task.data) == PAYLOAD

    def test_duplicate_key_not_recorded(self):
        """A repeated idempotency key is acknowledged but not recorded."""
        submitter = RecordingTaskSubmitter()
        submitter.submit("0xproof", PAYLOAD, idempotency_key="pred_1")

        ack = submitter.submit("0xproof2", PAYLOAD, idempotency_key="pred_1")

        assert ack.duplicate
        assert len(submitter.tasks) == 1

    def test_no_key_always_recorded(self):
        """Ad-hoc submissions without a key are never deduplicated."""
        submitter = RecordingTaskSubmitter()
        submitter.submit("0xproof", PAYLOAD)
        submitter.submit("0xproof", PAYLOAD)
        assert len(submitter.tasks) == 2

    def test_fail_with(self):
        """fail_with simulates a rejecting consumer."""
        submitter = RecordingTaskSubmitter()
        submitter.fail_with = "aggregator down"
        with pytest.raises(TaskSubmissionError):
            submitter.submit("0xproof", PAYLOAD)
        assert submitter.tasks == []

    def test_ack_to_dict(self):
        ack = RecordingTaskSubmitter().submit("0xproof", PAYLOAD, 2, idempotency_key="k")
        assert ack.to_dict() == {
            "accepted": True,
            "proofCid": "0xproof",
            "taskDefinitionId": 2,
            "idempotencyKey": "k",
            "duplicate": False,
        }


class TestHttpTaskSubmitter:
    """Tests for HttpTaskSubmitter."""

    def make_submitter(self, response=None, error=None):
        http = MagicMock(spec=HttpClient)
        if error is not None:
            http.post.side_effect = error
        else:
            http.post.return_value = response
        submitter = HttpTaskSubmitter(
            "http://aggregator:8545",
            performer_address="0xperformer",
            http=http,
        )
        return submitter, http

    def test_send_task_body(self):
        """The request is a JSON-RPC sendTask call."""
        submitter, http = self.make_submitter(
            HttpResponse(status_code=200, content=b'{"jsonrpc":"2.0","result":true,"id":"pred_1"}')
        )

        ack = submitter.submit("0xproof", PAYLOAD, 5, idempotency_key="pred_1")

        args, kwargs = http.post.call_args
        assert args[0] == "http://aggregator:8545"
        body = kwargs["json"]
        assert body["jsonrpc"] == "2.0"
        assert body["method"] == "sendTask"
        assert body["id"] == "pred_1"
        assert body["params"] == ["0xproof", encode_payload(PAYLOAD), 5, "0xperformer"]
        assert ack.accepted
        assert ack.response is True

    def test_generated_request_id(self):
        """Without a key a random request id is used."""
        submitter, http = self.make_submitter(HttpResponse(status_code=200, content=b'{"result":1}'))
        submitter.submit("0xproof", PAYLOAD)
        assert http.post.call_args.kwargs["json"]["id"]

    def test_transport_error(self):
        submitter, _ = self.make_submitter(error=HttpError("connection refused"))
        with pytest.raises(TaskSubmissionError):
            submitter.submit("0xproof", PAYLOAD)

    def test_http_error_status(self):
        submitter, _ = self.make_submitter(HttpResponse(status_code=500, content=b"oops"))
        with pytest.raises(TaskSubmissionError) as exc_info:
            submitter.submit("0xproof", PAYLOAD)
        assert exc_info.value.details["status_code"] == 500

    def test_rpc_error(self):
        """A JSON-RPC error object is a rejection."""
        submitter, _ = self.make_submitter(
            HttpResponse(status_code=200, content=b'{"error":{"code":-32000,"message":"bad task"}}')
        )
        with pytest.raises(TaskSubmissionError):
            submitter.submit("0xproof", PAYLOAD)
