"""
Terminal table of tracked tasks.

Colour is on when stdout is a TTY or FORCE_COLOR is set, and always off
when NO_COLOR is set.
"""
from __future__ import annotations

import os
import sys
from typing import Iterable, Optional, TextIO

from .dates import format_date
from .models import Task
from .recurrence import repeat_to_string

RESET = "\033[0m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BOLD = "\033[1m"

NAME_WIDTH = 20


def color_enabled(stream: Optional[TextIO] = None) -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    if os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}:
        return True
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


def color(text: str, *styles: str, enabled: bool = True) -> str:
    if not enabled or not styles:
        return text
    return "".join(styles) + text + RESET


def status_text(days: int) -> tuple[str, str]:
    """(label, colour) for a task due in `days` days."""
    if days > 1:
        return f"Due in {days} days", GREEN
    if days == 1:
        return "Due tomorrow", GREEN
    if days == 0:
        return "Due today", YELLOW
    if days == -1:
        return "1 day overdue!", RED
    return f"{-days} days overdue!", RED


def render_table(entries: Iterable[tuple[int, Task]], *, use_color: bool = False) -> str:
    entries = list(entries)
    if not entries:
        return "No tasks tracked."

    width = max(NAME_WIDTH, *(len(t.name) for _, t in entries))
    header = f"{'Task':<{width}}  {'Repeat':>6}  {'Due':<10}  {'Last done':<10}  Status"
    lines = [color(header, BOLD, enabled=use_color), "-" * len(header)]
    for days, t in entries:
        done = format_date(t.date_completed) if t.date_completed else "Never"
        repeat = repeat_to_string(t.repeat)
        if t.at_least:
            repeat += "+"
        label, tint = status_text(days)
        line = f"{t.name:<{width}}  {repeat:>6}  {format_date(t.date_due):<10}  {done:<10}  {label}"
        lines.append(color(line, tint, enabled=use_color))
    return "\n".join(lines)
