"""
Smoke tests for the HTTP API.

Runs the FastAPI app against an in-memory node:
- health
- prediction create/list/get
- ad-hoc and record execution
- validation votes
- error envelopes
"""

import json
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from api.app import create_app

from fixtures.common import NOW, TESLA_INPUT, make_post, make_services


@pytest.fixture
def node():
    return make_services(timelines={"Tesla": [make_post()]})


@pytest.fixture
def client(node):
    return TestClient(create_app(node))


class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["service"] == "sibyl-oracle-api"
        assert body["scheduler_running"] is False
        assert body["registry_cid"] is None

        names = [agent["name"] for agent in body["agents"]]
        assert names == [
            "EvidenceGatherer",
            "OracleClient[performer]",
            "OracleClient[validator]",
            "ValidationPipeline",
        ]
        assert body["agents"][1]["provider"] == "mock"
        assert body["agents"][0]["capabilities"] == ["deterministic", "network"]

    def test_root(self, client):
        assert client.get("/").status_code == 200


class TestPredictions:
    """Tests for prediction routes."""

    def test_create_and_get(self, client):
        response = client.post("/predictions", json={"inputString": TESLA_INPUT, "taskDefinitionId": 2})

        assert response.status_code == 200
        prediction = response.json()["prediction"]
        assert prediction["status"] == "pending"
        assert prediction["taskDefinitionId"] == 2
        assert prediction["condition"] == "Will Tesla announce a new Roadster this week?"

        fetched = client.get(f"/predictions/{prediction['id']}").json()["prediction"]
        assert fetched == prediction

    def test_create_alias(self, client):
        """The legacy /create-prediction path still works."""
        response = client.post("/create-prediction", json={"inputString": TESLA_INPUT})
        assert response.status_code == 200

    def test_create_empty_rejected(self, client):
        response = client.post("/predictions", json={"inputString": ""})
        assert response.status_code == 422

    def test_list_with_filter(self, client, node):
        client.post("/predictions", json={"inputString": TESLA_INPUT})
        failed = node.registry.create(TESLA_INPUT)
        node.registry.update(failed.id, {"status": "failed", "error": "x"})

        everything = client.get("/predictions").json()
        pending = client.get("/predictions", params={"status": "pending"}).json()

        assert everything["count"] == 2
        assert pending["count"] == 1

    def test_list_unknown_status(self, client):
        response = client.get("/predictions", params={"status": "bogus"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_get_missing(self, client):
        response = client.get("/predictions/pred_missing")
        assert response.status_code == 404
        body = response.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "PREDICTION_NOT_FOUND"


class TestExecution:
    """Tests for execution routes."""

    def test_execute_ad_hoc(self, client, node):
        response = client.post("/execute", json={"inputString": TESLA_INPUT, "taskDefinitionId": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["result"] == "yes"
        assert body["proof_of_task"].startswith("0x")
        assert json.loads(body["data"])["result"] == "yes"
        assert body["tweet_ids"] == ["1001"]
        assert node.registry.list() == []

    def test_execute_malformed_input(self, client):
        """A failed execution is reported in the body."""
        body = client.post("/execute", json={"inputString": "no condition"}).json()
        assert body["ok"] is False
        assert body["stage"] == "parse"
        assert body["error_code"] == "MALFORMED_INPUT"

    def test_execute_due_prediction(self, client, node):
        record = node.registry.create(TESLA_INPUT, end_time=NOW - timedelta(minutes=1))

        body = client.post(f"/predictions/{record.id}/execute").json()

        assert body["ok"] is True
        assert body["result"] == "yes"
        assert node.registry.get(record.id).status.value == "executed"

    def test_execute_not_due(self, client, node):
        record = node.registry.create(TESLA_INPUT, end_time=NOW + timedelta(hours=1))

        response = client.post(f"/predictions/{record.id}/execute")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "NOT_DUE"

    def test_tick(self, client, node):
        record = node.registry.create(TESLA_INPUT, end_time=NOW - timedelta(minutes=1))

        body = client.post("/tick").json()

        assert body["ok"] is True
        assert body["report"]["executed"] == [record.id]


class TestValidation:
    """Tests for POST /validate."""

    def test_validate_approves(self, client):
        proof = client.post("/execute", json={"inputString": TESLA_INPUT}).json()["proof_of_task"]

        body = client.post("/validate", json={"proofOfTask": proof}).json()

        assert body["approved"] is True
        assert body["performer_result"] == "yes"
        assert body["validator_result"] == "yes"
        assert body["proof_cid"] == proof

    def test_validate_truncates_input(self, client, node):
        cid = node.store.publish({"inputString": "Condition: " + "x" * 200, "result": "yes"})
        body = client.post("/validate", json={"proofOfTask": cid}).json()
        assert len(body["input_string"]) == 103
        assert body["input_string"].endswith("...")

    def test_validate_missing_proof(self, client):
        """Unknown proofs are a rejected vote, not an HTTP error."""
        response = client.post("/validate", json={"proofOfTask": "0xmissing"})
        assert response.status_code == 200
        assert response.json()["approved"] is False
        assert response.json()["error"]


class TestErrorEnvelope:
    """Tests for store outages surfacing as 503."""

    def test_store_unavailable(self, client, node):
        node.registry.create(TESLA_INPUT)
        node.store.fail_fetch = True

        response = client.get("/predictions")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"
