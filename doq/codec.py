from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from .dates import format_date, parse_date
from .errors import MalformedRecord
from .models import Days, LegacyTask, Months, Never, RepeatRule, Task, Years

_TAGS = {"days": Days, "months": Months, "years": Years}


def repeat_to_json(repeat: RepeatRule) -> Any:
    if isinstance(repeat, Never):
        return "never"
    if isinstance(repeat, Days):
        return {"days": repeat.count}
    if isinstance(repeat, Months):
        return {"months": repeat.count}
    if isinstance(repeat, Years):
        return {"years": repeat.count}
    raise TypeError(f"Unknown repeat rule {repeat!r}")


def repeat_from_json(raw: Any) -> RepeatRule:
    """
    Accepts "never" or a single-key object {"days": n}. Tags are
    case-insensitive so files written as "Never" / {"Days": n} still load.
    """
    if isinstance(raw, str) and raw.lower() == "never":
        return Never()
    if isinstance(raw, Mapping) and len(raw) == 1:
        (tag, count), = raw.items()
        cls = _TAGS.get(str(tag).lower())
        if cls is not None:
            return cls(count)
    raise MalformedRecord(f"Unrecognised repeat rule: {raw!r}")


def _require(raw: Mapping[str, Any], key: str) -> Any:
    if key not in raw:
        raise MalformedRecord(f"Task record is missing '{key}': {dict(raw)!r}")
    return raw[key]


def _name(raw: Mapping[str, Any]) -> str:
    name = _require(raw, "name")
    if not isinstance(name, str) or not name.strip():
        raise MalformedRecord(f"Task record has an invalid name: {name!r}")
    return name


def _date(value: Any) -> date:
    # YAML loads unquoted 2017-05-27 as a date already.
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_date(value)


def _optional_date(value: Any) -> Optional[date]:
    return None if value is None else _date(value)


def task_to_json(t: Task) -> dict[str, Any]:
    return {
        "name": t.name,
        "date_completed": format_date(t.date_completed) if t.date_completed else None,
        "date_due": format_date(t.date_due),
        "repeat": repeat_to_json(t.repeat),
        "at_least": t.at_least,
    }


def task_from_json(raw: Mapping[str, Any]) -> Task:
    at_least = raw.get("at_least", False)
    if not isinstance(at_least, bool):
        raise MalformedRecord(f"'at_least' must be true or false, got {at_least!r}")
    return Task(
        name=_name(raw),
        date_completed=_optional_date(raw.get("date_completed")),
        date_due=_date(_require(raw, "date_due")),
        repeat=repeat_from_json(_require(raw, "repeat")),
        at_least=at_least,
    )


def legacy_from_json(raw: Mapping[str, Any]) -> LegacyTask:
    frequency = _require(raw, "frequency_days")
    if isinstance(frequency, bool) or not isinstance(frequency, int):
        raise MalformedRecord(f"'frequency_days' must be a whole number, got {frequency!r}")
    return LegacyTask(
        name=_name(raw),
        frequency_days=frequency,
        last_completed=_optional_date(raw.get("last_completed")),
    )
