from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from aedsync.app import cleanup_runs, reconcile
from aedsync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile Hjertestarterregisteret AEDs with OpenStreetMap"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile_cmd = subparsers.add_parser("reconcile", help="Plan and optionally upload changes")
    mode = reconcile_cmd.add_mutually_exclusive_group()
    mode.add_argument(
        "--live",
        dest="live",
        action="store_const",
        const=True,
        default=None,
        help="Upload the planned changes to OpenStreetMap",
    )
    mode.add_argument(
        "--dry-run",
        dest="live",
        action="store_const",
        const=False,
        help="Only write the review files (default unless DRY_RUN=false)",
    )
    reconcile_cmd.add_argument(
        "--osc",
        type=Path,
        help="Path of the osmChange review file (defaults to config)",
    )
    reconcile_cmd.add_argument(
        "--geojson",
        type=Path,
        help="Path of the GeoJSON review file (defaults to config)",
    )
    reconcile_cmd.add_argument(
        "--max-delete-fraction",
        type=float,
        help="Abort when planned deletes exceed this share of managed nodes",
    )

    cleanup = subparsers.add_parser("cleanup", help="Fail stuck runs and prune old run history")
    cleanup.add_argument(
        "--stuck-hours",
        type=float,
        help="Mark runs still running after this many hours as failed (defaults to config)",
    )
    cleanup.add_argument(
        "--retention-days",
        type=float,
        help="Delete finished runs older than this many days (defaults to config)",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "reconcile":
        fraction = args.max_delete_fraction
        if fraction is not None and not 0 <= fraction <= 1:
            raise ValueError("--max-delete-fraction must be between 0 and 1")
    elif args.command == "cleanup":
        for name in ("stuck_hours", "retention_days"):
            value = getattr(args, name)
            if value is not None and value <= 0:
                raise ValueError(f"--{name.replace('_', '-')} must be positive")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO, force=True)

    try:
        if parsed_args.command == "reconcile":
            result = reconcile(
                live=parsed_args.live,
                osc_path=parsed_args.osc,
                geojson_path=parsed_args.geojson,
                max_delete_fraction=parsed_args.max_delete_fraction,
            )
            log.info(
                "Review files: %s, %s",
                result.output_paths.osc_path,
                result.output_paths.geojson_path,
            )
        elif parsed_args.command == "cleanup":
            cleanup_runs(
                stuck_timeout=(
                    timedelta(hours=parsed_args.stuck_hours)
                    if parsed_args.stuck_hours is not None
                    else None
                ),
                retention=(
                    timedelta(days=parsed_args.retention_days)
                    if parsed_args.retention_days is not None
                    else None
                ),
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load ``.env``, trap SIGINT, then dispatch."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
