from __future__ import annotations

import logging
import sys


def setup_logging(*, verbose: bool = False) -> None:
    """
    Configure logging once, before the first command runs.

    Everything goes to stderr so the task table on stdout stays clean.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    logging.captureWarnings(True)
