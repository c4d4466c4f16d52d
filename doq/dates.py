from __future__ import annotations

import re
from datetime import date

from .errors import MalformedDate

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_date(text: str) -> date:
    """
    Strict YYYY-MM-DD. Anything else, including impossible calendar
    dates like 2017-02-30, raises MalformedDate.
    """
    if not isinstance(text, str) or not _ISO_DATE.fullmatch(text):
        raise MalformedDate(text)
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise MalformedDate(text) from e


def format_date(d: date) -> str:
    return d.isoformat()


def days_between(a: date, b: date) -> int:
    """Signed day count a - b (positive when a is after b)."""
    return (a - b).days


def today() -> date:
    return date.today()
