"""
CLI Validate Command

Re-judge a published proof with the validator oracle and print the vote.

Usage:
    sibyl validate <proof_cid> [--json]

Exit codes: 0 approved, 1 runtime error, 2 rejected.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from core.schemas import ValidationVote
from sibyl_cli.config import get_services


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def print_vote_human(vote: ValidationVote) -> None:
    print(f"proof_cid: {vote.proof_cid}")
    print(f"approved: {str(vote.approved).lower()}")
    print(f"performer_result: {vote.performer_result}")
    print(f"validator_result: {vote.validator_result}")
    if vote.error:
        print(f"error: {vote.error}")


def validate_cmd(args: Namespace) -> int:
    services = get_services(args)
    vote = services.validation.validate(args.proof_cid)

    if args.json:
        print(json.dumps(vote.to_wire(), indent=2))
    else:
        print_vote_human(vote)

    return EXIT_SUCCESS if vote.approved else EXIT_VERIFICATION_FAILED
