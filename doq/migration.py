"""
Upgrades stored task records to the current schema.

Two record shapes exist:
  - current: name, date_completed, date_due, repeat, at_least
  - 0.1.0:   name, frequency_days, last_completed

Records are told apart by their keys, not by a version field, since 0.1.0
files carry none.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Union

from .codec import legacy_from_json, task_from_json
from .errors import InvalidCount, MalformedRecord, RecurrenceOverflow, UnresolvableLegacyRecord
from .models import Days, LegacyTask, Task
from .recurrence import next_due_date


@dataclass
class MigrationResult:
    tasks: list[Task] = field(default_factory=list)
    upgraded: int = 0
    dropped: list[str] = field(default_factory=list)


def decode_record(raw: Any) -> Union[Task, LegacyTask]:
    if not isinstance(raw, Mapping):
        raise MalformedRecord(f"Task record must be an object, got {raw!r}")
    if "date_due" in raw:
        return task_from_json(raw)
    if "frequency_days" in raw:
        return legacy_from_json(raw)
    raise MalformedRecord(f"Unrecognised task record: {dict(raw)!r}")


def upgrade_legacy_task(legacy: LegacyTask, today: date) -> Optional[Task]:
    """
    A 0.1.0 record becomes a fixed-cadence day rule. With no completion
    history it is due today; otherwise the old due date is taken to equal
    the last completion and the rule is replayed forward from there.
    """
    try:
        repeat = Days(legacy.frequency_days)
    except InvalidCount:
        return None

    if legacy.last_completed is None:
        date_due: Optional[date] = today
    else:
        try:
            date_due = next_due_date(legacy.last_completed, legacy.last_completed, repeat)
        except RecurrenceOverflow:
            return None
    if date_due is None:
        return None

    return Task(
        name=legacy.name,
        date_completed=legacy.last_completed,
        date_due=date_due,
        repeat=repeat,
        at_least=False,
    )


def migrate_record(raw: Any, today: date) -> Task:
    record = decode_record(raw)
    if isinstance(record, Task):
        return record
    task = upgrade_legacy_task(record, today)
    if task is None:
        raise UnresolvableLegacyRecord(record.name)
    return task


def migrate_records(raws: Iterable[Any], today: date) -> MigrationResult:
    result = MigrationResult()
    for raw in raws:
        try:
            task = migrate_record(raw, today)
        except UnresolvableLegacyRecord as e:
            result.dropped.append(e.name)
            continue
        if "date_due" not in raw:
            result.upgraded += 1
        result.tasks.append(task)
    return result
