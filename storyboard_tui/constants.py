"""Module-level constants for Storyboard TUI."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "storyboard-tui"
VERSION = "0.1.0"

# Data directory: $STORYBOARD_HOME overrides the default.
HOME_ENV_VAR = "STORYBOARD_HOME"
DEFAULT_HOME = Path.home() / ".storyboard"

PREFERENCES_FILE = "preferences.yaml"
STORYBOARDS_DIR = "storyboards"
LOG_FILE = "storyboard-tui.log"

# Slideshow seconds per page when the timestamp carries no usable number
DEFAULT_PAGE_DURATION = 5.0

BLOB_KINDS = ("image", "audio")
FALLBACK_MIME = "application/octet-stream"

# Page fields editable through update_page (id and page_number are derived)
EDITABLE_FIELDS: tuple[str, ...] = (
    "page_name",
    "image",
    "dialogue",
    "context",
    "timestamp",
    "audio",
)


def storyboard_home(override: Path | None = None) -> Path:
    """Return the data directory, honouring *override* then the environment."""
    if override is not None:
        return override
    env = os.environ.get(HOME_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return DEFAULT_HOME
