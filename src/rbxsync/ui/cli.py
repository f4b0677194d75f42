from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from rbxsync.app import export_project, publish_places, sync_project
from rbxsync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from rbxsync.app import ExportFormat, PublishResult
    from rbxsync.domain import SyncReport

log = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--universe-id",
        type=int,
        help="Target universe id (overrides ROBLOX_UNIVERSE_ID)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log request details at DEBUG level",
    )


def _add_project_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project",
        type=Path,
        help="Path to the project file (default: ./rbxsync.yaml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        help="Project root holding .rbxsync/ (default: directory of the project file)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Declaratively sync Roblox monetization")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Sync passes, products and badges")
    _add_project_arguments(sync)
    _add_common_arguments(sync)

    export = subparsers.add_parser("export", help="Export remote resources as a Luau table")
    export.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file (default: config.luau, config.lua or config.json)",
    )
    fmt = export.add_mutually_exclusive_group()
    fmt.add_argument("--lua", action="store_true", help="Write config.lua instead of config.luau")
    fmt.add_argument("--json", action="store_true", help="Write the snapshot as JSON")
    _add_common_arguments(export)

    publish = subparsers.add_parser("publish", help="Publish the configured place files")
    _add_project_arguments(publish)
    _add_common_arguments(publish)

    args = parser.parse_args(list(argv))
    if args.universe_id is not None and args.universe_id <= 0:
        raise ValueError(f"Universe id must be positive, got {args.universe_id}")
    return args


def _export_format(args: argparse.Namespace) -> ExportFormat:
    if args.json:
        return "json"
    if args.lua:
        return "lua"
    return "luau"


def _log_report(report: SyncReport) -> None:
    for outcome in report.outcomes:
        if outcome.failed:
            log.error("%s %r failed: %s", outcome.category.label, outcome.name, outcome.error)
        else:
            log.info(
                "%s %r %s (id %s%s)",
                outcome.category.label,
                outcome.name,
                outcome.action,
                outcome.identifier,
                ", icon uploaded" if outcome.icon_uploaded else "",
            )
    if report.universe_error is not None:
        log.error("Universe settings failed: %s", report.universe_error)
    log.info(
        "Sync finished: %s succeeded, %s failed, %s upload(s)",
        len(report.succeeded),
        len(report.failures),
        report.uploads,
    )


def _log_publish_results(results: Sequence[PublishResult]) -> None:
    published = sum(1 for result in results if not result.failed)
    log.info("Publish finished: %s published, %s failed", published, len(results) - published)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "sync":
            report = sync_project(
                project_file=parsed_args.project,
                project_root=parsed_args.root,
                universe_id=parsed_args.universe_id,
            )
            _log_report(report)
            if not report.ok:
                sys.exit(1)
        elif parsed_args.command == "export":
            export_project(
                universe_id=parsed_args.universe_id,
                output=parsed_args.output,
                export_format=_export_format(parsed_args),
            )
        elif parsed_args.command == "publish":
            results = publish_places(
                project_file=parsed_args.project,
                project_root=parsed_args.root,
                universe_id=parsed_args.universe_id,
            )
            _log_publish_results(results)
            if any(result.failed for result in results):
                sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
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
