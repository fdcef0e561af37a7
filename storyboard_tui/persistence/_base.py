"""Base JSON persistence store."""

from __future__ import annotations

import json
import os
from pathlib import Path

from ..log import logger


class JsonStore:
    """One JSON document on disk with atomic writes."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load_raw(self) -> dict | list:
        """Read and parse the JSON file, returning ``{}`` on any error."""
        try:
            if self.path.exists():
                return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.debug("failed to load JSON store from %s", self.path, exc_info=True)
        return {}

    def save_raw(self, data: dict | list) -> None:
        """Write *data* as pretty-printed JSON, creating parents as needed.

        The text goes to a sibling temp file that is renamed over the target,
        so readers see either the old or the new file, never a partial one.
        Raises ``OSError`` if the write fails; the old file is kept.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        try:
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def delete(self) -> None:
        """Remove the backing file if it exists."""
        self.path.unlink(missing_ok=True)
