from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from . import dates, schedule as ops, storage
from .config import default_schedule_path
from .errors import DoqError, InvalidRepeatSyntax, MalformedDate, TaskNotFound
from .logging_setup import setup_logging
from .matching import resolve_name
from .models import RepeatRule, Schedule
from .recurrence import repeat_from_string
from .render import color_enabled, render_table

logger = logging.getLogger(__name__)


class _Cancelled(Exception):
    pass


def _parse_date(d: str) -> date:
    try:
        return dates.parse_date(d)
    except MalformedDate as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_repeat(text: str) -> RepeatRule:
    try:
        return repeat_from_string(text)
    except InvalidRepeatSyntax as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _schedule_path_from_args(ns: argparse.Namespace) -> Path:
    if getattr(ns, "file", None):
        return Path(ns.file).expanduser().resolve()
    return default_schedule_path()


def _resolve(schedule: Schedule, query: str) -> str:
    name = resolve_name(query, schedule.names())
    if name is None:
        raise TaskNotFound(query)
    if name != query:
        logger.debug("Resolved %r to task %r", query, name)
    return name


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _print_tasks(ns: argparse.Namespace, schedule: Schedule, today: date) -> None:
    use_color = color_enabled(sys.stdout) and not ns.no_color
    print(render_table(ops.by_urgency(schedule, today), use_color=use_color))


def cmd_list(ns: argparse.Namespace, schedule: Schedule, today: date) -> bool:
    return False


def cmd_add(ns: argparse.Namespace, schedule: Schedule, today: date) -> bool:
    task = ops.add_task(
        schedule,
        ns.name,
        ns.repeat,
        today=today,
        due=ns.due,
        at_least=ns.at_least,
    )
    print(f"Added task '{task.name}', due {dates.format_date(task.date_due)}.")
    return True


def cmd_remove(ns: argparse.Namespace, schedule: Schedule, today: date) -> bool:
    task = ops.remove_task(schedule, ns.name)
    print(f"Removed task '{task.name}'.")
    return True


def cmd_did(ns: argparse.Namespace, schedule: Schedule, today: date) -> bool:
    name = _resolve(schedule, ns.task)
    on = ns.on or today
    if not ns.yes and not _confirm(f"Mark task '{name}' as done on {dates.format_date(on)}? (y/N) "):
        print("Cancelling", file=sys.stderr)
        raise _Cancelled()

    updated = ops.mark_done(schedule, name, on)
    if updated is None:
        print(f"Task '{name}' does not repeat and has been removed.")
    else:
        print(f"Marked '{name}' done. Next due {dates.format_date(updated.date_due)}.")
    return True


def cmd_edit(ns: argparse.Namespace, schedule: Schedule, today: date) -> bool:
    name = _resolve(schedule, ns.task)
    task = ops.edit_task(
        schedule,
        name,
        new_name=ns.new_name,
        due=ns.due,
        repeat=ns.repeat,
        at_least=ns.at_least,
    )
    print(f"Updated task '{task.name}'.")
    return True


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="doq",
        description="doq: track tasks which need done regularly.",
    )
    p.add_argument(
        "-f",
        "--file",
        help="Schedule file to read and write (default: ~/.doq_schedule, DOQ_SCHEDULE env var, "
        "or schedule_file in ~/.doq)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    p.add_argument("--no-color", action="store_true", help="Disable coloured output.")
    p.set_defaults(func=cmd_list)
    sub = p.add_subparsers(dest="cmd")

    s = sub.add_parser("list", help="Show tracked tasks, most urgent first.")
    s.set_defaults(func=cmd_list)

    s = sub.add_parser("add", help="Add a task to track.")
    s.add_argument("name", help="Name of the task.")
    s.add_argument(
        "-r",
        "--repeat",
        type=_parse_repeat,
        required=True,
        help="How often it repeats: never, or a count with a unit (3d, 2m, 1y).",
    )
    s.add_argument("--due", type=_parse_date, help="First due date in YYYY-MM-DD (default: today).")
    s.add_argument(
        "--at-least",
        action="store_true",
        help="Measure each interval from when the task was done, not from its due date.",
    )
    s.set_defaults(func=cmd_add)

    s = sub.add_parser("remove", help="Stop tracking a task.")
    s.add_argument("name", help="Exact name of the task to remove.")
    s.set_defaults(func=cmd_remove)

    s = sub.add_parser("did", help="Mark a task as done.")
    s.add_argument("task", help="Name of the task. Fuzzily matched.")
    s.add_argument("--on", type=_parse_date, help="Date of completion in YYYY-MM-DD (default: today).")
    s.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt.")
    s.set_defaults(func=cmd_did)

    s = sub.add_parser("edit", help="Change a task.")
    s.add_argument("task", help="Name of the task. Fuzzily matched.")
    s.add_argument("--name", dest="new_name", help="Rename the task.")
    s.add_argument("--due", type=_parse_date, help="New due date in YYYY-MM-DD.")
    s.add_argument("-r", "--repeat", type=_parse_repeat, help="New repeat rule.")
    g = s.add_mutually_exclusive_group()
    g.add_argument("--at-least", dest="at_least", action="store_const", const=True,
                   help="Measure intervals from completion.")
    g.add_argument("--fixed", dest="at_least", action="store_const", const=False,
                   help="Measure intervals from the due date.")
    s.set_defaults(func=cmd_edit, at_least=None)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    setup_logging(verbose=ns.verbose)

    today = dates.today()
    try:
        path = _schedule_path_from_args(ns)
        storage.ensure_schedule_file(path)
        schedule, migration = storage.read_schedule(path, today)
        changed = ns.func(ns, schedule, today)
        if changed or migration.upgraded or migration.dropped:
            storage.save_schedule(path, schedule)
    except _Cancelled:
        return 1
    except DoqError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"doq: error: {e}", file=sys.stderr)
        return 1

    _print_tasks(ns, schedule, today)
    return 0
