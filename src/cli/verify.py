# =============================================================================
# src/cli/verify.py — Verification CLI (votes from the command line)
# =============================================================================
#
# Operator tool for inspecting and seeding community votes without running
# the API server.  Talks straight to the SQLite verification store named by
# VERIFICATION_DB_PATH and applies the same verified-badge policy as the
# web app (config/config.yaml + environment overrides).
#
# Typical usage:
#   python -m src.cli stats ChIJ123                 # tally + badge verdict
#   python -m src.cli stats ChIJ123 --json          # same, machine-readable
#   python -m src.cli vote ChIJ123 --user 7 --yes   # record / change a vote
#   python -m src.cli me ChIJ123 --user 7           # show one user's vote
#
# Exit codes: 0 success, 1 usage/validation error, 2 store unavailable.
# =============================================================================

"""Standalone CLI for the crowd-verification store.

Usage::

    python -m src.cli stats PLACE_ID [--json]
    python -m src.cli vote PLACE_ID --user N (--yes | --no)
    python -m src.cli me PLACE_ID --user N
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from src.config.loader import load_config, policy_from_config
from src.config.settings import Settings
from src.models.verification import VerificationPolicy
from src.providers.verification.sqlite_verification_provider import (
    SQLiteVerificationProvider,
)
from src.services.verification_filter import classify, verification_percentage
from src.services.verification_service import VerificationService
from src.utils.errors import StoreUnavailableError, ValidationError

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_STORE_UNAVAILABLE = 2


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_stats(
    args: argparse.Namespace,
    service: VerificationService,
    policy: VerificationPolicy,
) -> int:
    """Print the vote tally and the verified-badge verdict."""
    stats = await service.get_stats(args.place_id)
    if not stats.available:
        print("Verification store unavailable.", file=sys.stderr)
        return EXIT_STORE_UNAVAILABLE

    verified = classify(stats, policy)
    if args.json_output:
        print(
            json.dumps(
                {
                    "place_id": args.place_id,
                    "verified": stats.positive_count,
                    "unverified": stats.negative_count,
                    "total": stats.total_count,
                    "is_verified": verified,
                }
            )
        )
        return EXIT_OK

    percentage = verification_percentage(stats)
    print(f"Place: {args.place_id}")
    print("=" * 40)
    print(f"  Yes votes:   {stats.positive_count}")
    print(f"  No votes:    {stats.negative_count}")
    print(f"  Total:       {stats.total_count}")
    print(f"  Yes share:   {'-' if percentage is None else f'{percentage}%'}")
    print(
        f"  Verified:    {'yes' if verified else 'no'}"
        f"  (needs {policy.min_samples} votes, {policy.min_ratio:.0%} yes)"
    )
    return EXIT_OK


async def _handle_vote(args: argparse.Namespace, service: VerificationService) -> int:
    """Record or overwrite a user's vote."""
    vote = await service.submit_vote(args.place_id, args.user, args.value)
    if vote is None:
        print("Vote could not be saved: verification store unavailable.", file=sys.stderr)
        return EXIT_STORE_UNAVAILABLE
    answer = "yes" if vote.value else "no"
    print(f"Recorded '{answer}' from user {vote.user_id} for {vote.venue_id}.")
    return EXIT_OK


async def _handle_me(args: argparse.Namespace, service: VerificationService) -> int:
    """Show one user's current vote."""
    vote = await service.get_user_vote(args.place_id, args.user)
    if vote is None:
        print(f"User {args.user} has not voted on {args.place_id}.")
        return EXIT_OK
    answer = "yes" if vote.value else "no"
    print(f"User {vote.user_id} voted '{answer}' on {vote.venue_id} at {vote.recorded_at.isoformat()}.")
    return EXIT_OK


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    store = SQLiteVerificationProvider(db_path=app_settings.verification_db_path)
    try:
        await store.initialize()
    except StoreUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_STORE_UNAVAILABLE

    service = VerificationService(store)
    try:
        if args.command == "stats":
            policy = policy_from_config(load_config(settings=app_settings), app_settings)
            return await _handle_stats(args, service, policy)
        if args.command == "vote":
            return await _handle_vote(args, service)
        return await _handle_me(args, service)
    except ValidationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return EXIT_USAGE


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the verification CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Inspect and record piña colada verification votes.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Verification commands")

    # -- stats --
    stats_parser = subparsers.add_parser("stats", help="Show a bar's vote tally")
    stats_parser.add_argument("place_id", help="Places provider id of the bar")
    stats_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print machine-readable JSON",
    )

    # -- vote --
    vote_parser = subparsers.add_parser("vote", help="Record or change a user's vote")
    vote_parser.add_argument("place_id", help="Places provider id of the bar")
    vote_parser.add_argument("--user", required=True, type=int, help="Voting user id")
    answer = vote_parser.add_mutually_exclusive_group(required=True)
    answer.add_argument("--yes", action="store_const", const=True, dest="value", help="Serves piña coladas")
    answer.add_argument("--no", action="store_const", const=False, dest="value", help="Does not")

    # -- me --
    me_parser = subparsers.add_parser("me", help="Show a user's current vote")
    me_parser.add_argument("place_id", help="Places provider id of the bar")
    me_parser.add_argument("--user", required=True, type=int, help="User id")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse arguments, run the command, exit with its code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(EXIT_USAGE)

    app_settings = Settings()
    sys.exit(asyncio.run(_run(args, app_settings)))


if __name__ == "__main__":
    main()
