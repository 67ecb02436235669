"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m sibyl_cli run [--interval N]
    python -m sibyl_cli tick [--json]
    python -m sibyl_cli serve [--host H] [--port P] [--no-scheduler]
    python -m sibyl_cli create "<input string>" [--end-time ISO] [--task-definition-id N]
    python -m sibyl_cli list [--status STATUS] [--json]
    python -m sibyl_cli show <prediction_id> [--json]
    python -m sibyl_cli execute "<input string>" | --id <prediction_id> [--json]
    python -m sibyl_cli validate <proof_cid> [--json]
    python -m sibyl_cli config --init | --show

Environment Variables:
    SIBYL_LOG_LEVEL             Log level (default: INFO)
    SIBYL_PERFORMER_PROVIDER    Performer LLM provider (default: hyperbolic)
    SIBYL_VALIDATOR_PROVIDER    Validator LLM provider (default: gaia)
    SIBYL_REGISTRY_CID          Initial registry snapshot reference
    SIBYL_REGISTRY_POINTER      File that persists the registry reference
    SIBYL_INTERVAL_S            Scheduler period in seconds
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Optional, Sequence

from core.config import load_runtime_config
from core.schemas import PredictionStatus, SibylException
from orchestrator.services import Services
from sibyl_cli.commands import execute, node, predictions, validate
from sibyl_cli.config import get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="sibyl",
        description="Sibyl CLI - Schedule, execute and validate AI-judged predictions.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./sibyl.yaml or ~/.config/sibyl/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- run command ---
    run_parser = subparsers.add_parser(
        "run",
        help="Run the scheduler loop in the foreground",
        description="Poll the registry and execute due predictions until interrupted.",
    )
    run_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Tick period in seconds (default: from config, 60)",
    )
    run_parser.set_defaults(func=node.run_cmd)

    # --- tick command ---
    tick_parser = subparsers.add_parser(
        "tick",
        help="Run one scheduler pass",
    )
    tick_parser.add_argument("--json", action="store_true", help="JSON output")
    tick_parser.set_defaults(func=node.tick_cmd)

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the HTTP API (scheduler included)",
    )
    serve_parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument(
        "--no-scheduler",
        action="store_true",
        default=False,
        help="Do not run the scheduler alongside the API",
    )
    serve_parser.set_defaults(func=node.serve_cmd)

    # --- create command ---
    create_parser_ = subparsers.add_parser(
        "create",
        help="Register a pending prediction",
    )
    create_parser_.add_argument(
        "input_string",
        type=str,
        help='Input template, e.g. "Condition: <text>\\nX post: <text>" (\\n is unescaped)',
    )
    create_parser_.add_argument(
        "--end-time",
        type=str,
        default=None,
        help="ISO-8601 instant the prediction becomes due (default: 24h from now)",
    )
    create_parser_.add_argument(
        "--task-definition-id",
        type=int,
        default=0,
        help="Task definition id for the downstream consumer (default: 0)",
    )
    create_parser_.add_argument("--json", action="store_true", help="JSON output")
    create_parser_.set_defaults(func=predictions.create_cmd)

    # --- list command ---
    list_parser = subparsers.add_parser(
        "list",
        help="List predictions",
    )
    list_parser.add_argument(
        "--status",
        type=str,
        choices=[s.value for s in PredictionStatus],
        default=None,
        help="Filter by status",
    )
    list_parser.add_argument("--json", action="store_true", help="JSON output")
    list_parser.set_defaults(func=predictions.list_cmd)

    # --- show command ---
    show_parser = subparsers.add_parser(
        "show",
        help="Show one prediction",
    )
    show_parser.add_argument("prediction_id", type=str, help="Prediction id")
    show_parser.add_argument("--json", action="store_true", help="JSON output")
    show_parser.set_defaults(func=predictions.show_cmd)

    # --- execute command ---
    execute_parser = subparsers.add_parser(
        "execute",
        help="Execute an input string, or a due prediction by id",
    )
    execute_parser.add_argument(
        "input_string",
        type=str,
        nargs="?",
        default=None,
        help="Ad-hoc input string (nothing is written to the registry)",
    )
    execute_parser.add_argument(
        "--id",
        type=str,
        default=None,
        help="Execute this registry record now",
    )
    execute_parser.add_argument(
        "--task-definition-id",
        type=int,
        default=0,
        help="Task definition id for ad-hoc execution (default: 0)",
    )
    execute_parser.add_argument("--json", action="store_true", help="JSON output")
    execute_parser.set_defaults(func=execute.execute_cmd)

    # --- validate command ---
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a published proof (exit 2 when rejected)",
    )
    validate_parser.add_argument("proof_cid", type=str, help="Content id of the proof artifact")
    validate_parser.add_argument("--json", action="store_true", help="JSON output")
    validate_parser.set_defaults(func=validate.validate_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage node configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration (API keys omitted)",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="sibyl.yaml",
        help="Path for config file (default: sibyl.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your node.")
        print("You can also use environment variables (SIBYL_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: sibyl config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None, services: Optional[Services] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        services: Prebuilt services to run commands against

    Returns:
        Exit code (0=success, 1=error, 2=vote rejected)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    setup_logging(level=args.log_level or config.log_level)

    # Attach config (and injected services) for commands to use
    args.runtime_config = config
    args.services = services

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except SibylException as e:
        if args.debug:
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
