from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from .errors import DuplicateTask, InvalidTaskName, TaskNotFound
from .models import RepeatRule, Schedule, Task
from .recurrence import days_until_due, next_due_date

logger = logging.getLogger(__name__)


def _check_name(schedule: Schedule, name: str) -> str:
    if not name or not name.strip():
        raise InvalidTaskName("Task name must not be empty.")
    if schedule.index_of(name) is not None:
        raise DuplicateTask(name)
    return name


def _index(schedule: Schedule, name: str) -> int:
    i = schedule.index_of(name)
    if i is None:
        raise TaskNotFound(name)
    return i


def find_task(schedule: Schedule, name: str) -> Task:
    return schedule.tasks[_index(schedule, name)]


def add_task(
    schedule: Schedule,
    name: str,
    repeat: RepeatRule,
    *,
    today: date,
    due: Optional[date] = None,
    at_least: bool = False,
) -> Task:
    task = Task(
        name=_check_name(schedule, name),
        date_completed=None,
        date_due=due or today,
        repeat=repeat,
        at_least=at_least,
    )
    schedule.tasks.append(task)
    logger.debug("Added task %r due %s", task.name, task.date_due)
    return task


def remove_task(schedule: Schedule, name: str) -> Task:
    task = schedule.tasks.pop(_index(schedule, name))
    logger.debug("Removed task %r", task.name)
    return task


def complete_task(task: Task, completion_date: date) -> Optional[Task]:
    """
    Returns the task advanced past completion_date, or None when it never
    repeats and should be retired.

    Fixed cadence measures from the previous due date; at-least cadence
    measures from the day it was actually done.
    """
    anchor = completion_date if task.at_least else task.date_due
    due = next_due_date(anchor, completion_date, task.repeat)
    if due is None:
        return None
    return replace(task, date_completed=completion_date, date_due=due)


def mark_done(schedule: Schedule, name: str, completion_date: date) -> Optional[Task]:
    i = _index(schedule, name)
    updated = complete_task(schedule.tasks[i], completion_date)
    if updated is None:
        retired = schedule.tasks.pop(i)
        logger.info("Task %r does not repeat; removed after completion", retired.name)
        return None
    schedule.tasks[i] = updated
    logger.debug("Task %r done on %s, next due %s", name, completion_date, updated.date_due)
    return updated


def edit_task(
    schedule: Schedule,
    name: str,
    *,
    new_name: Optional[str] = None,
    due: Optional[date] = None,
    repeat: Optional[RepeatRule] = None,
    at_least: Optional[bool] = None,
) -> Task:
    i = _index(schedule, name)
    task = schedule.tasks[i]
    changes: dict = {}
    if new_name is not None and new_name != task.name:
        changes["name"] = _check_name(schedule, new_name)
    if due is not None:
        changes["date_due"] = due
    if repeat is not None:
        changes["repeat"] = repeat
    if at_least is not None:
        changes["at_least"] = at_least
    if changes:
        task = replace(task, **changes)
        schedule.tasks[i] = task
        logger.debug("Edited task %r: %s", name, sorted(changes))
    return task


def by_urgency(schedule: Schedule, today: date) -> list[tuple[int, Task]]:
    """
    (days_until_due, task) pairs, most overdue first.
    """
    pairs = [(days_until_due(t.date_due, today), t) for t in schedule.tasks]
    pairs.sort(key=lambda p: (p[0], p[1].name))
    return pairs
