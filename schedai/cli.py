"""Command-line entry point for the schedule manager."""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Sequence

from schedai.app import CliApp
from schedai.scheduler import ScheduleError
from schedai.storage import StorageError

_VERSION = "0.1.0"
_LIMIT = re.compile(r"\+?\d+")


def _parse_limit(text: str | None) -> int | None:
    """Read a non-negative count; anything unreadable means no limit."""
    if text is None or not _LIMIT.fullmatch(text):
        return None
    return int(text)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all schedule commands."""
    parser = argparse.ArgumentParser(
        prog="schedule-ai", description="AI-powered schedule management tool"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    add = commands.add_parser("add", help="Add a new event")
    add.add_argument("title", help="Event title")
    add.add_argument("--description", help="Event description")
    add.add_argument("--start", required=True, help="Start time (ISO 8601 format)")
    add.add_argument("--end", required=True, help="End time (ISO 8601 format)")
    add.add_argument("--location", help="Location")
    add.add_argument("--priority", help="Priority (low, medium, high, urgent)")

    listing = commands.add_parser("list", help="List events")
    listing.add_argument("--upcoming", action="store_true", help="Show only upcoming events")
    listing.add_argument("--today", action="store_true", help="Show only today's events")
    listing.add_argument("--limit", help="Limit number of events")

    search = commands.add_parser("search", help="Search events")
    search.add_argument("query", help="Search query")

    commands.add_parser("stats", help="Show statistics")
    commands.add_parser("backup", help="Backup schedule")
    commands.add_parser("restore", help="Restore from backup")

    export = commands.add_parser("export", help="Export schedule")
    export.add_argument("path", help="Export file path")

    importing = commands.add_parser("import", help="Import schedule")
    importing.add_argument("path", help="Import file path")

    return parser


def _dispatch(app: CliApp, args: argparse.Namespace) -> None:
    match args.command:
        case "add":
            app.add_event(
                args.title,
                args.start,
                args.end,
                description=args.description,
                location=args.location,
                priority=args.priority,
            )
        case "list":
            app.list_events(
                upcoming=args.upcoming, today=args.today, limit=_parse_limit(args.limit)
            )
        case "search":
            app.search_events(args.query)
        case "stats":
            app.show_statistics()
        case "backup":
            app.backup()
        case "restore":
            app.restore()
        case "export":
            app.export(args.path)
        case "import":
            app.import_schedule(args.path)
        case _:
            raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0
    try:
        app = CliApp(verbose=args.verbose, color=False if args.no_color else None)
        _dispatch(app, args)
    except (StorageError, ScheduleError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())