"""
CLI Prediction Commands

Create, list and show prediction records.

Usage:
    sibyl create "<input string>" [--end-time ISO] [--task-definition-id N] [--json]
    sibyl list [--status pending] [--json]
    sibyl show <prediction_id> [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from datetime import datetime

from core.schemas import PredictionRecord, PredictionStatus
from sibyl_cli.config import get_services


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def parse_end_time(value: str) -> datetime:
    """Parse an ISO-8601 instant; a trailing ``Z`` is accepted."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def print_record_human(record: PredictionRecord) -> None:
    print(f"id: {record.id}")
    print(f"status: {record.status.value}")
    print(f"condition: {record.condition or '(unparsed)'}")
    print(f"end_time: {record.end_time.isoformat()}")
    print(f"created_at: {record.created_at.isoformat()}")
    print(f"task_definition_id: {record.task_definition_id}")
    if record.executed_at:
        print(f"executed_at: {record.executed_at.isoformat()}")
    if record.result is not None:
        print(f"result: {record.result}")
    if record.proof_cid:
        print(f"proof_cid: {record.proof_cid}")
    if record.tweet_ids:
        print(f"tweet_ids: {', '.join(record.tweet_ids)}")
    if record.error:
        print(f"error: {record.error}")
    if record.validated_at:
        print(f"validated_at: {record.validated_at.isoformat()}")


def create_cmd(args: Namespace) -> int:
    """Register a new pending prediction."""
    try:
        end_time = parse_end_time(args.end_time) if args.end_time else None
    except ValueError:
        print(f"Error: invalid --end-time: {args.end_time}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    services = get_services(args)
    record = services.registry.create(
        args.input_string.replace("\\n", "\n"),
        end_time=end_time,
        task_definition_id=args.task_definition_id,
    )

    if args.json:
        print(json.dumps(record.to_wire(), indent=2))
    else:
        print(f"Created prediction {record.id}")
        print(f"registry_cid: {services.registry.current_cid}")
        print_record_human(record)
    return EXIT_SUCCESS


def list_cmd(args: Namespace) -> int:
    """List predictions, optionally filtered by status."""
    services = get_services(args)
    records = services.registry.list()
    if args.status:
        wanted = PredictionStatus(args.status)
        records = [r for r in records if r.status == wanted]

    if args.json:
        print(json.dumps([r.to_wire() for r in records], indent=2))
        return EXIT_SUCCESS

    if not records:
        print("No predictions")
        return EXIT_SUCCESS

    for record in records:
        result = f" -> {record.result}" if record.result is not None else ""
        print(f"{record.id}  [{record.status.value}]  due {record.end_time.isoformat()}{result}")
        print(f"    {record.condition or record.input_string[:80]}")
    return EXIT_SUCCESS


def show_cmd(args: Namespace) -> int:
    """Show one prediction."""
    services = get_services(args)
    record = services.registry.get(args.prediction_id)

    if args.json:
        print(json.dumps(record.to_wire(), indent=2))
    else:
        print_record_human(record)
    return EXIT_SUCCESS
