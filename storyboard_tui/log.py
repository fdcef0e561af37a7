"""Package logger for Storyboard TUI."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger("storyboard_tui")

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(path: Path, *, debug: bool = False) -> None:
    """Send package log records to *path*.

    The TUI owns the terminal, so records never go to stderr while the app
    is running.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
