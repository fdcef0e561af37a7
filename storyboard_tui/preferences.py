"""User preferences: the fast scalar store.

Small values live in ``preferences.yaml`` under the data directory and are
read synchronously at startup, before the storyboards themselves load, so
the UI can draw with the right colors and tab straight away.  Falls back to
defaults if the file doesn't exist or is invalid, and creates a default file
on first run so users can discover and edit it.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .log import logger

COLOR_MODES = ("dark", "light")

_DEFAULT_YAML = """\
# Storyboard TUI Preferences
# Delete this file to reset to defaults.

active_tab: 0                    # tab selected when the app last closed
color_mode: "dark"               # dark or light
setup_complete: false            # first-run setup has been shown
user_name: ""                    # used for the greeting only
open_storyboards: null           # ids of the open tabs; null reopens every saved one
"""


@dataclass
class Preferences:
    """Top-level TUI preferences."""

    active_tab: int = 0
    color_mode: str = "dark"
    setup_complete: bool = False
    user_name: str = ""
    open_storyboards: list[int] | None = None


PREFERENCE_KEYS: tuple[str, ...] = tuple(f.name for f in fields(Preferences))


def _coerce(key: str, value: Any) -> Any:
    """Validate *value* for *key*, raising ValueError when it does not fit."""
    if key == "active_tab":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"active_tab must be a non-negative integer, got {value!r}")
        return value
    if key == "color_mode":
        if value not in COLOR_MODES:
            raise ValueError(f"color_mode must be one of {COLOR_MODES}, got {value!r}")
        return value
    if key == "setup_complete":
        return bool(value)
    if key == "user_name":
        return "" if value is None else str(value)
    if key == "open_storyboards":
        if value is None:
            return None
        if not isinstance(value, (list, tuple)) or not all(
            isinstance(item, int) and not isinstance(item, bool) and item > 0
            for item in value
        ):
            raise ValueError(f"open_storyboards must be a list of storyboard ids, got {value!r}")
        return list(value)
    raise KeyError(f"Unknown preference: {key!r}")


def load_preferences(path: Path) -> Preferences:
    """Load preferences from YAML file.

    Invalid individual values keep their defaults; an unreadable file gives
    all defaults.  Creates a default preferences file on first run.
    """
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError):
            logger.debug("failed to read preferences from %s", path, exc_info=True)
            return prefs
        if not isinstance(data, dict):
            return prefs
        for key in PREFERENCE_KEYS:
            if key not in data:
                continue
            try:
                setattr(prefs, key, _coerce(key, data[key]))
            except ValueError:
                logger.debug("ignoring invalid preference %s=%r", key, data[key])
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML, encoding="utf-8")
        except OSError:
            logger.debug("could not create default preferences file", exc_info=True)

    return prefs


class PreferenceStore:
    """Scalar key/value access to the preferences file.

    ``set`` surgically updates a single ``key: value`` line, preserving user
    comments and the other keys as-is.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Preferences:
        return load_preferences(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value of *key*, or *default* when unset."""
        if key not in PREFERENCE_KEYS:
            raise KeyError(f"Unknown preference: {key!r}")
        value = getattr(self.load(), key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> bool:
        """Persist *key* = *value*. Returns False if the file could not be written.

        Raises:
            KeyError: If *key* is not a known preference.
            ValueError: If *value* is not valid for *key*.
        """
        value = _coerce(key, value)
        rendered = json.dumps(value, ensure_ascii=False)
        try:
            if self.path.exists():
                text = self.path.read_text(encoding="utf-8")
            else:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                text = _DEFAULT_YAML

            line = re.compile(
                rf"^({re.escape(key)}:)[ \t]*(?:\"(?:[^\"\\]|\\.)*\"|[^#\n]*?)([ \t]*(?:#.*)?)$",
                re.MULTILINE,
            )
            if line.search(text):
                text = line.sub(
                    lambda m: f"{m.group(1)} {rendered}{m.group(2)}", text, count=1
                )
            else:
                # Key missing -- append it
                text = text.rstrip() + f"\n{key}: {rendered}\n"

            self.path.write_text(text, encoding="utf-8")
        except OSError:
            logger.warning("could not save preference %s", key, exc_info=True)
            return False
        return True
