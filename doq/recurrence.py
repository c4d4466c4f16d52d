from __future__ import annotations

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from .dates import days_between
from .errors import InvalidCount, MissingUnit, RecurrenceOverflow
from .models import Days, Months, Never, RepeatRule, Years

_UNITS = {"d": Days, "m": Months, "y": Years}


def days_until_due(due_date: date, today: date) -> int:
    """Positive: not yet due. Zero: due today. Negative: overdue."""
    return days_between(due_date, today)


def _interval(repeat: RepeatRule) -> relativedelta:
    if isinstance(repeat, Days):
        return relativedelta(days=repeat.count)
    if isinstance(repeat, Months):
        return relativedelta(months=repeat.count)
    if isinstance(repeat, Years):
        return relativedelta(years=repeat.count)
    raise TypeError(f"No interval for repeat rule {repeat!r}")


def _lattice_point(anchor: date, step: relativedelta, k: int) -> date:
    """
    anchor + k * step, always measured from the anchor so a clamped
    month end (Jan 31 -> Feb 28) does not carry into later points.
    """
    try:
        return anchor + step * k
    except (OverflowError, ValueError) as e:
        raise RecurrenceOverflow(
            f"Advancing {anchor.isoformat()} by {k} x {step} leaves the supported date range."
        ) from e


def next_due_date(
    anchor_date: date, completion_date: date, repeat: RepeatRule
) -> Optional[date]:
    """
    First lattice point anchor + k * interval strictly after completion_date.

    Returns None for Never: the caller retires the task. When the anchor is
    already after the completion date it is returned unchanged, so a due
    date never moves backwards. Day-of-month overflow clamps to the last
    day of the target month.
    """
    if isinstance(repeat, Never):
        return None
    if not isinstance(repeat, (Days, Months, Years)):
        raise TypeError(f"Unknown repeat rule {repeat!r}")

    step = _interval(repeat)
    k = 0
    if isinstance(repeat, Days) and anchor_date <= completion_date:
        # Jump straight to the last lattice point at or before completion.
        k = days_between(completion_date, anchor_date) // repeat.count

    due = _lattice_point(anchor_date, step, k)
    while due <= completion_date:
        k += 1
        due = _lattice_point(anchor_date, step, k)
    return due


def repeat_from_string(text: str) -> RepeatRule:
    """
    "never", or a count followed by one of the units d, m, y ("3d", "1m", "2y").
    Case-sensitive; surrounding whitespace is ignored.
    """
    text = text.strip()
    if text == "never":
        return Never()
    if not text or text[-1] not in _UNITS:
        raise MissingUnit(text)

    count_text, unit = text[:-1], text[-1]
    if not count_text or not (count_text.isascii() and count_text.isdigit()):
        raise InvalidCount(text)
    count = int(count_text)
    if count < 1:
        raise InvalidCount(text)
    return _UNITS[unit](count)


def repeat_to_string(repeat: RepeatRule) -> str:
    if isinstance(repeat, Never):
        return "never"
    if isinstance(repeat, Days):
        return f"{repeat.count}d"
    if isinstance(repeat, Months):
        return f"{repeat.count}m"
    if isinstance(repeat, Years):
        return f"{repeat.count}y"
    raise TypeError(f"Unknown repeat rule {repeat!r}")
