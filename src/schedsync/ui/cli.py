from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from schedsync.adapters.spreadsheet import AtomEntryReader
from schedsync.app import sync_speakers, sync_vendors
from schedsync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from schedsync.app import SyncSummary

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise schedule spreadsheets")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every reconciliation decision",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("vendors", "Sync the vendors (sandbox) feed"),
        ("speakers", "Sync the speakers feed"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument(
            "--feed-file",
            type=Path,
            help="Read the Atom document from a local file instead of the configured URL",
        )
        command.add_argument(
            "--dry-run",
            action="store_true",
            help="Compute the mutation batch without writing it",
        )

    return parser.parse_args(list(argv))


def _open_feed_file(path: Path) -> AtomEntryReader:
    if not path.is_file():
        raise ValueError(f"Feed file does not exist: {path}")
    return AtomEntryReader(path.open("rb"))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        with ExitStack() as stack:
            reader = None
            if parsed_args.feed_file is not None:
                reader = stack.enter_context(_open_feed_file(parsed_args.feed_file))

            summary: SyncSummary
            if parsed_args.command == "vendors":
                summary = sync_vendors(reader=reader, dry_run=parsed_args.dry_run)
            elif parsed_args.command == "speakers":
                summary = sync_speakers(reader=reader, dry_run=parsed_args.dry_run)
            else:
                raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ConfigurationError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    log.info(
        "%s sync %s: %s mutations from %s rows",
        summary.kind,
        "applied" if summary.applied else "not applied",
        summary.mutations,
        summary.read,
    )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
