"""Durable per-storyboard record store.

One JSON file per storyboard id (``<dir>/<id>.json``) holding
``{"name": ..., "pages": [...]}``.  Undo history is never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.fileformat import pages_from_payload, storyboard_payload
from ..core.pages import PageCollection
from ..core.registry import Storyboard
from ..errors import InvalidStoryboardFile
from ..log import logger
from ._base import JsonStore


@dataclass(frozen=True)
class StoryboardRecord:
    """The persisted form of one storyboard: its present snapshot only."""

    id: int
    name: str
    pages: PageCollection

    @classmethod
    def capture(cls, storyboard: Storyboard) -> StoryboardRecord:
        return cls(id=storyboard.id, name=storyboard.name, pages=storyboard.pages)

    def to_payload(self) -> dict[str, Any]:
        return storyboard_payload(self.name, self.pages)

    def restore(self) -> Storyboard:
        """Rebuild a storyboard with empty past and future."""
        return Storyboard(self.id, self.name, self.pages)


class StoryboardStore:
    """Storyboard records keyed by id, one atomic JSON file each."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _store(self, storyboard_id: int) -> JsonStore:
        return JsonStore(self.directory / f"{storyboard_id}.json")

    def put(self, record: StoryboardRecord) -> None:
        """Write *record*, replacing any previous one with the same id.

        Raises ``OSError`` when the write fails.
        """
        self._store(record.id).save_raw(record.to_payload())

    def get(self, storyboard_id: int) -> StoryboardRecord | None:
        return self._read(self._store(storyboard_id).path)

    def get_all(self) -> list[StoryboardRecord]:
        """Return every readable record in id order; a missing directory is empty."""
        if not self.directory.is_dir():
            return []
        records = []
        for path in self.directory.glob("*.json"):
            record = self._read(path)
            if record is not None:
                records.append(record)
        return sorted(records, key=lambda record: record.id)

    def delete(self, storyboard_id: int) -> None:
        try:
            self._store(storyboard_id).delete()
        except OSError:
            logger.debug(
                "failed to delete storyboard record %s", storyboard_id, exc_info=True
            )

    def _read(self, path: Path) -> StoryboardRecord | None:
        if not path.stem.isdigit() or not path.exists():
            return None
        data = JsonStore(path).load_raw()
        name = data.get("name") if isinstance(data, dict) else None
        raw_pages = data.get("pages") if isinstance(data, dict) else None
        if not isinstance(name, str) or not name or not isinstance(raw_pages, list):
            logger.warning("skipping unreadable storyboard record %s", path)
            return None
        try:
            pages = pages_from_payload(raw_pages)
        except InvalidStoryboardFile:
            logger.warning("skipping storyboard record %s with bad pages", path)
            return None
        return StoryboardRecord(id=int(path.stem), name=name, pages=pages)
