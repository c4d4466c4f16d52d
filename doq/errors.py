from __future__ import annotations


class DoqError(Exception):
    """Base class for every failure doq reports to its caller."""


class MalformedDate(DoqError, ValueError):
    def __init__(self, text: object) -> None:
        super().__init__(f"Invalid date '{text}'. Use YYYY-MM-DD.")
        self.text = text


class InvalidRepeatSyntax(DoqError, ValueError):
    pass


class MissingUnit(InvalidRepeatSyntax):
    def __init__(self, text: str) -> None:
        super().__init__(
            f"Invalid repeat '{text}': expected a suffix (d, m, y) for days, months, or years."
        )
        self.text = text


class InvalidCount(InvalidRepeatSyntax):
    def __init__(self, text: object) -> None:
        super().__init__(f"Invalid repeat '{text}': expected a positive whole number.")
        self.text = text


class UnresolvableLegacyRecord(DoqError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Cannot upgrade legacy task '{name}'.")
        self.name = name


class MalformedRecord(DoqError):
    pass


class RecurrenceOverflow(DoqError):
    pass


class TaskNotFound(DoqError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No task named '{name}'.")
        self.name = name


class DuplicateTask(DoqError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Task '{name}' already exists.")
        self.name = name


class InvalidTaskName(DoqError):
    pass


class StorageError(DoqError):
    pass


class ConfigError(DoqError):
    pass
