from __future__ import annotations

import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import IO, Iterator

import yaml

from .codec import task_to_json
from .errors import StorageError
from .migration import MigrationResult, migrate_records
from .models import Schedule

logger = logging.getLogger(__name__)


@contextmanager
def _atomic_write(path: Path) -> Iterator[IO[str]]:
    """
    Write to a temporary file beside path and move it into place only if
    the block finishes without raising. An existing file keeps its mode.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            yield fh
        if path.exists():
            os.chmod(tmp, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


def export_json(schedule: Schedule) -> dict:
    return {"tasks": [task_to_json(t) for t in schedule.tasks]}


def save_schedule(path: Path, schedule: Schedule) -> None:
    data = export_json(schedule)
    try:
        with _atomic_write(path) as fh:
            yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise StorageError(f"Failed to write schedule file {path}: {e}") from e
    logger.debug("Saved %d task(s) to %s", len(schedule.tasks), path)


def ensure_schedule_file(path: Path) -> None:
    if not path.exists():
        save_schedule(path, Schedule())
        logger.info("Created empty schedule at %s", path)


def load_schedule(path: Path, today: date) -> Schedule:
    schedule, _ = read_schedule(path, today)
    return schedule


def read_schedule(path: Path, today: date) -> tuple[Schedule, MigrationResult]:
    """
    Read the schedule document, upgrading records written by older versions.

    A missing or empty file is an empty schedule. The document is YAML
    (JSON included) holding {"tasks": [...]}; a bare list of records is
    accepted too. The MigrationResult tells the caller whether the file
    should be rewritten in the current format.
    """
    if not path.exists():
        return Schedule(), MigrationResult()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise StorageError(f"Failed to read schedule file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise StorageError(f"Failed to parse schedule file {path}: {e}") from e

    if data is None:
        records = []
    elif isinstance(data, dict):
        records = data.get("tasks") or []
    else:
        records = data
    if not isinstance(records, list):
        raise StorageError(f"Schedule file {path} must hold a list of tasks.")

    result = migrate_records(records, today)
    if result.upgraded:
        logger.info("Upgraded %d task(s) from the 0.1.0 format in %s", result.upgraded, path)
    for name in result.dropped:
        logger.warning("Dropped task %r: it could not be upgraded", name)
    return Schedule(tasks=result.tasks), result
