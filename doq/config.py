from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError


def dotfile_path() -> Path:
    return Path.home() / ".doq"


def default_schedule_path(dotfile: Optional[Path] = None) -> Path:
    """
    Default per-user schedule:
      ~/.doq_schedule

    Override with the DOQ_SCHEDULE env var, a "schedule_file" entry in the
    YAML dotfile ~/.doq, or the --file CLI option.
    """
    env = os.getenv("DOQ_SCHEDULE")
    if env:
        return Path(env).expanduser().resolve()

    dotfile = dotfile or dotfile_path()
    if dotfile.exists():
        try:
            data = yaml.safe_load(dotfile.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config file {dotfile}: {e}") from e
        schedule_file = data.get("schedule_file") if isinstance(data, dict) else None
        if schedule_file:
            return Path(str(schedule_file)).expanduser().resolve()

    return (Path.home() / ".doq_schedule").resolve()
