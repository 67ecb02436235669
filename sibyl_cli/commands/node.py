"""
CLI Node Commands

Long-running and one-shot scheduler commands:
- run: scheduler loop in the foreground
- tick: one scheduler pass
- serve: HTTP API with the scheduler on a background thread

Usage:
    sibyl run [--interval 60]
    sibyl tick [--json]
    sibyl serve [--host 0.0.0.0] [--port 8000] [--no-scheduler]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from orchestrator.scheduler import TickReport
from sibyl_cli.config import get_services


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_report_human(report: TickReport) -> None:
    """Print a tick report in human-readable format."""
    if report.skipped:
        print("tick: skipped (previous tick still running)")
        return
    print(f"started_at: {report.started_at.isoformat()}")
    print(f"due: {len(report.due)}")
    print(f"executed: {len(report.executed)}")
    print(f"failed: {len(report.failed)}")
    if report.already_running:
        print(f"already_running: {len(report.already_running)}")
    for prediction_id in report.executed:
        print(f"  ✓ {prediction_id}")
    for prediction_id in report.failed:
        print(f"  ✗ {prediction_id}: {report.errors.get(prediction_id, '')}")
    print(f"duration_s: {report.duration_s:.3f}")


def run_cmd(args: Namespace) -> int:
    """Run the scheduler loop until interrupted."""
    services = get_services(args)
    scheduler = services.scheduler
    if args.interval is not None:
        scheduler.interval_s = args.interval

    logger.info(f"Scheduler running every {scheduler.interval_s}s; Ctrl+C to stop")
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping scheduler")
        scheduler.stop()
    return EXIT_SUCCESS


def tick_cmd(args: Namespace) -> int:
    """Run one scheduler pass and print the report."""
    services = get_services(args)
    report = services.scheduler.tick()

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report_human(report)

    return EXIT_RUNTIME_ERROR if report.failed else EXIT_SUCCESS


def serve_cmd(args: Namespace) -> int:
    """Serve the HTTP API; the scheduler runs alongside unless disabled."""
    import uvicorn

    from api.app import create_app

    services = get_services(args)
    app = create_app(services)

    if not args.no_scheduler:
        services.scheduler.start()
    try:
        level = args.log_level or args.runtime_config.log_level
        uvicorn.run(app, host=args.host, port=args.port, log_level=level.lower())
    finally:
        if services.scheduler.running:
            services.scheduler.stop(timeout=5.0)
    return EXIT_SUCCESS
