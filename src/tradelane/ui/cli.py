from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from tradelane.adapters.drive import DriveCsvSource
from tradelane.adapters.files import LocalCsvSource
from tradelane.app import (
    ContinuousSync,
    create_import_session,
    finalize_import,
    list_drive_files,
    stage_csv_import,
    write_template,
)
from tradelane.config import ConfigurationError, configure_logging, get_import_config
from tradelane.domain.importing import ImportStage, MessageLevel, Resolution

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from tradelane.config import ImportConfig
    from tradelane.domain.importing import ImportOutcome, ImportSession

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import shipment CSV files")
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Import a local CSV file")
    importer.add_argument("path", type=Path, help="CSV file to import")
    choice = importer.add_mutually_exclusive_group()
    choice.add_argument(
        "--accept-all",
        action="store_true",
        help="Replace every flagged name with its suggestion (default)",
    )
    choice.add_argument(
        "--keep-all",
        action="store_true",
        help="Keep every flagged name as imported",
    )
    choice.add_argument(
        "--interactive",
        action="store_true",
        help="Ask for each flagged name",
    )

    subparsers.add_parser("drive-files", help="List CSV files in the remote file store")

    sync = subparsers.add_parser("sync", help="Continuously import a remote CSV file")
    sync.add_argument("file_id", type=str, help="Remote file id")
    sync.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between ticks (defaults to config)",
    )
    sync.add_argument(
        "--max-ticks",
        type=int,
        help="Stop after this many ticks",
    )
    sync.add_argument(
        "--keep-imported",
        action="store_true",
        help="Keep flagged names as imported instead of using suggestions",
    )

    template = subparsers.add_parser("template", help="Write the CSV import template")
    template.add_argument(
        "--output",
        type=Path,
        help="File to write (prints to stdout when omitted)",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace, config: ImportConfig) -> None:
    if args.command != "sync":
        return
    if args.interval is not None and args.interval <= 0:
        raise ValueError("Sync interval must be positive")
    if args.max_ticks is not None and args.max_ticks < 1:
        raise ValueError("--max-ticks must be at least 1")
    if args.interval is None:
        args.interval = config.sync_interval_seconds


def _ask(prompt: str) -> bool:
    answer = input(f"{prompt} [Y/n] ").strip().lower()
    return answer in {"", "y", "yes"}


def _review_interactively(session: ImportSession) -> None:
    for entry in session.conflicts:
        use_suggestion = _ask(
            f"{entry.key} {entry.field.value}: replace {entry.imported!r} "
            f"with {entry.suggestion!r}?"
        )
        resolution = Resolution.USE_SUGGESTION if use_suggestion else Resolution.KEEP_IMPORTED
        session.resolve(entry.id, resolution)


def _report(outcome: ImportOutcome) -> None:
    for message in outcome.messages:
        level = logging.ERROR if message.level is MessageLevel.ERROR else logging.INFO
        log.log(level, message.text)
    log.info(
        "Import finished: added=%s, rejected=%s, flagged=%s, skipped=%s",
        outcome.added,
        outcome.rejected,
        outcome.flagged,
        outcome.skipped,
    )


def _run_import(args: argparse.Namespace, config: ImportConfig) -> None:
    session = create_import_session(config=config)
    outcome = stage_csv_import(LocalCsvSource(args.path), session=session)
    if session.stage is ImportStage.REVIEW:
        log.info("%s names need review", outcome.conflicts)
        if args.interactive:
            _review_interactively(session)
            outcome = finalize_import(session)
        elif args.keep_all:
            outcome = finalize_import(session, resolution=Resolution.KEEP_IMPORTED)
        else:
            outcome = finalize_import(session, resolution=Resolution.USE_SUGGESTION)
    _report(outcome)


def _run_sync(args: argparse.Namespace, config: ImportConfig) -> None:
    resolution = Resolution.KEEP_IMPORTED if args.keep_imported else Resolution.USE_SUGGESTION
    sync = ContinuousSync(
        source=DriveCsvSource(args.file_id),
        session=create_import_session(config=config),
        resolution=resolution,
        interval_seconds=args.interval,
    )
    log.info("Starting continuous sync of %s every %ss", args.file_id, args.interval)
    for outcome in sync.run(max_ticks=args.max_ticks):
        _report(outcome)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        import_config = get_import_config()
        _validate(parsed_args, import_config)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "import":
            _run_import(parsed_args, import_config)
        elif parsed_args.command == "drive-files":
            for drive_file in list_drive_files():
                modified = drive_file.modified_time.isoformat() if drive_file.modified_time else "-"
                sys.stdout.write(f"{drive_file.id}\t{drive_file.name}\t{modified}\n")
        elif parsed_args.command == "sync":
            _run_sync(parsed_args, import_config)
        elif parsed_args.command == "template":
            text = write_template(parsed_args.output)
            if parsed_args.output is None:
                sys.stdout.write(text)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
