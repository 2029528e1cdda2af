#!/usr/bin/env python3
"""Leitner CLI - Command line interface for the seven-level review schedule."""
import argparse
import logging
from pathlib import Path
from typing import Optional

from cli.config import export_dir, load_config, log_level, store_path
from core import THEMES
from core.calendar import Clock
from core.errors import LeitnerError
from services import ActionResult, ScheduleService
from storage import ScheduleRepository, SQLiteStore

logger = logging.getLogger(__name__)


def _report(result: ActionResult) -> int:
    print(result.message)
    return 0 if result.ok else 1


def _require_schedule(service: ScheduleService) -> bool:
    if service.is_initialized:
        return True
    print("No schedule yet. Run `leitner start` to create one.")
    return False


def start_schedule(service: ScheduleService, args: argparse.Namespace) -> int:
    return _report(service.start(args.date or None))


def show_status(service: ScheduleService, args: argparse.Namespace) -> int:
    if not _require_schedule(service):
        return 0
    summary = service.summary()
    print(f"Today: {summary.today} (day {summary.day_number})")
    print(summary.status_text())

    sections = summary.sections
    print("\n## Now")
    if sections.actionable is None:
        print("- None")
    else:
        lv = sections.actionable
        print(f"- L{lv.level} (due {lv.next_due})")

    print("\n## Pending")
    if not sections.pending:
        print("- None")
    for lv in sections.pending:
        print(f"- L{lv.level} (due {lv.next_due})")

    print("\n## Upcoming")
    if not sections.upcoming:
        print("- None")
    for lv in sections.upcoming:
        last = f", last done {lv.last_completed}" if lv.last_completed else ""
        print(f"- L{lv.level} (due {lv.next_due}{last})")
    return 0


def mark_done(service: ScheduleService, args: argparse.Namespace) -> int:
    if not _require_schedule(service):
        return 1
    return _report(service.mark_done(args.level))


def undo_done(service: ScheduleService, args: argparse.Namespace) -> int:
    if not _require_schedule(service):
        return 1
    return _report(service.undo(args.level, args.date or None))


def set_theme(service: ScheduleService, args: argparse.Namespace) -> int:
    return _report(service.set_theme(args.theme))


def export_schedule(service: ScheduleService, args: argparse.Namespace) -> int:
    if not _require_schedule(service):
        return 1
    directory = Path(args.dir) if args.dir else export_dir(args.config_data)
    path = service.export(directory)
    print(f"Exported: {path}")
    return 0


def import_schedule(service: ScheduleService, args: argparse.Namespace) -> int:
    return _report(service.import_file(Path(args.file)))


def reset_schedule(service: ScheduleService, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Reset clears your start date, level due dates, and history. Re-run with --yes to confirm.")
        return 1
    service.reset()
    print("Schedule reset.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Leitner: a seven-level spaced-repetition schedule.")
    parser.add_argument("--config", default="", help="Config file path.")
    parser.add_argument("--db", default="", help="SQLite store path (overrides config).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_start = sub.add_parser("start", help="Create a new schedule.")
    p_start.add_argument("--date", default="", help="Start date (YYYY-MM-DD), defaults to today.")
    p_start.set_defaults(func=start_schedule)

    p_status = sub.add_parser("status", help="Show what is due now, pending, and upcoming.")
    p_status.set_defaults(func=show_status)

    p_done = sub.add_parser("done", help="Mark the actionable level as reviewed today.")
    p_done.add_argument("--level", type=int, choices=range(1, 8), help="Level you expect to complete.")
    p_done.set_defaults(func=mark_done)

    p_undo = sub.add_parser("undo", help="Undo a completion.")
    p_undo.add_argument("--level", type=int, required=True, choices=range(1, 8), help="Level to revert.")
    p_undo.add_argument("--date", default="", help="Completion date (YYYY-MM-DD), defaults to today.")
    p_undo.set_defaults(func=undo_done)

    p_theme = sub.add_parser("theme", help="Set the display theme.")
    p_theme.add_argument("theme", choices=THEMES, help="Theme name.")
    p_theme.set_defaults(func=set_theme)

    p_export = sub.add_parser("export", help="Write the schedule to a JSON file.")
    p_export.add_argument("--dir", default="", help="Output directory (overrides config).")
    p_export.set_defaults(func=export_schedule)

    p_import = sub.add_parser("import", help="Replace the schedule with an exported file.")
    p_import.add_argument("--file", required=True, help="Input file path.")
    p_import.set_defaults(func=import_schedule)

    p_reset = sub.add_parser("reset", help="Delete the schedule and its history.")
    p_reset.add_argument("--yes", action="store_true", help="Confirm the reset.")
    p_reset.set_defaults(func=reset_schedule)

    return parser


def main(argv: Optional[list[str]] = None, clock: Optional[Clock] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(Path(args.config).expanduser() if args.config else None)
    args.config_data = config

    logging.basicConfig(
        level=logging.INFO if args.verbose else log_level(config),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db_path = Path(args.db).expanduser() if args.db else store_path(config)
    store = SQLiteStore.open(db_path)
    try:
        service = ScheduleService(ScheduleRepository(store), clock=clock)
        service.load()
        return args.func(service, args)
    except (LeitnerError, FileNotFoundError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}")
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
