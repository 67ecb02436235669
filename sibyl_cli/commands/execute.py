"""
CLI Execute Command

Execute an ad-hoc input string (nothing is written to the registry), or a
due registry record by id.

Usage:
    sibyl execute "Condition: ...\nX post: ..." [--task-definition-id N] [--json]
    sibyl execute --id pred_... [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from typing import Any

from orchestrator.execution import ExecutionResult
from sibyl_cli.config import get_services


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_result_human(data: dict[str, Any]) -> None:
    """Print an execution outcome in human-readable format."""
    if data.get("predictionId"):
        print(f"prediction_id: {data['predictionId']}")
    print(f"ok: {str(data['ok']).lower()}")
    if data.get("result") is not None:
        print(f"result: {data['result']}")
    if data.get("proofCid"):
        print(f"proof_cid: {data['proofCid']}")
    if data.get("tweetIds"):
        print(f"tweet_ids: {', '.join(data['tweetIds'])}")
    if data.get("error"):
        stage = f" (at {data['stage']})" if data.get("stage") else ""
        print(f"error{stage}: {data['error']}")


def _execute_input(args: Namespace) -> tuple[bool, dict[str, Any]]:
    services = get_services(args)
    result: ExecutionResult = services.execution.execute_input(
        args.input_string.replace("\\n", "\n"),
        args.task_definition_id,
    )
    return result.ok, result.to_dict()


def _execute_record(args: Namespace) -> tuple[bool, dict[str, Any]]:
    services = get_services(args)
    report = services.scheduler.execute_now(args.id)
    if report is None:
        record = services.registry.get(args.id)
        return False, {
            "ok": False,
            "predictionId": args.id,
            "error": f"Prediction is {record.status.value} and not due for execution",
        }

    record = services.registry.get(args.id)
    ok = args.id in report.executed
    return ok, {
        "ok": ok,
        "predictionId": record.id,
        "status": record.status.value,
        "result": record.result,
        "proofCid": record.proof_cid,
        "tweetIds": record.tweet_ids,
        "error": report.errors.get(args.id) or record.error,
    }


def execute_cmd(args: Namespace) -> int:
    """
    Execute the execute command.

    Returns:
        Exit code (0 when a judgment was reached and recorded)
    """
    if bool(args.input_string) == bool(args.id):
        print("Error: give either an input string or --id", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    ok, data = _execute_record(args) if args.id else _execute_input(args)

    if args.json:
        print(json.dumps(data, indent=2))
    else:
        print_result_human(data)

    return EXIT_SUCCESS if ok else EXIT_RUNTIME_ERROR
