from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from .errors import InvalidCount


@dataclass(frozen=True)
class Never:
    pass


@dataclass(frozen=True)
class _Interval:
    count: int

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise InvalidCount(self.count)


@dataclass(frozen=True)
class Days(_Interval):
    pass


@dataclass(frozen=True)
class Months(_Interval):
    pass


@dataclass(frozen=True)
class Years(_Interval):
    pass


RepeatRule = Union[Never, Days, Months, Years]


@dataclass(frozen=True)
class Task:
    name: str
    date_completed: Optional[date]
    date_due: date
    repeat: RepeatRule
    at_least: bool = False  # True: measure from completion, False: from previous due date


@dataclass(frozen=True)
class LegacyTask:
    """Record shape written by doq 0.1.0: a day interval and nothing else."""

    name: str
    frequency_days: int
    last_completed: Optional[date]


@dataclass
class Schedule:
    tasks: list[Task] = field(default_factory=list)

    def names(self) -> list[str]:
        return [t.name for t in self.tasks]

    def index_of(self, name: str) -> Optional[int]:
        for i, t in enumerate(self.tasks):
            if t.name == name:
                return i
        return None
