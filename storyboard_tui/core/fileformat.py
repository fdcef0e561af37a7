"""Storyboard export/import file format.

A storyboard file is UTF-8 JSON::

    {"name": "...", "pages": [{"id": 1, "pageNumber": 1, "pageName": "",
      "image": "", "dialogue": "", "context": "", "timestamp": "",
      "audio": ""}, ...]}

The same ``{name, pages}`` shape is used for durable-store records.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

from ..errors import InvalidStoryboardFile
from .pages import Page, PageCollection, ids, renumber
from .registry import Storyboard


def storyboard_payload(name: str, pages: PageCollection) -> dict[str, Any]:
    """Return the JSON-serialisable ``{name, pages}`` mapping."""
    return {"name": name, "pages": [page.to_payload() for page in pages]}


def storyboard_to_json(storyboard: Storyboard) -> str:
    """Serialise the present snapshot of *storyboard*."""
    return json.dumps(
        storyboard_payload(storyboard.name, storyboard.pages),
        indent=2,
        ensure_ascii=False,
    )


def export_storyboard(storyboard: Storyboard, path: Path) -> Path:
    """Write *storyboard* to *path*; a directory gets ``<name>.json`` inside it.

    Clearing the unsaved-changes flag is left to the caller, which knows
    whether the write happened.
    """
    if path.is_dir():
        path = path / f"{storyboard.name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(storyboard_to_json(storyboard) + "\n", encoding="utf-8")
    return path


def pages_from_payload(raw_pages: list[Any]) -> PageCollection:
    """Build pages from file entries.

    Missing text fields become empty strings, missing or repeated ids are
    replaced with fresh ones, and page numbers are recomputed.
    """
    pages: list[Page] = []
    seen: set[int] = set()
    for position, entry in enumerate(raw_pages):
        if not isinstance(entry, dict):
            raise InvalidStoryboardFile(f"Page {position + 1} is not an object")
        page = Page.from_payload(entry, fallback_id=0)
        if page.id <= 0 or page.id in seen:
            page = dataclasses.replace(page, id=ids.next_id(above=max(seen, default=0)))
        seen.add(page.id)
        pages.append(page)
    return renumber(pages)


def parse_storyboard(text: str | bytes) -> tuple[str, PageCollection]:
    """Validate storyboard file *text* and return ``(name, pages)``.

    Raises:
        InvalidStoryboardFile: If the text is not JSON, is not an object,
            lacks a non-empty ``name`` or lacks a ``pages`` list.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidStoryboardFile(f"Not a storyboard file: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidStoryboardFile("Storyboard file must contain a JSON object")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidStoryboardFile("Storyboard file is missing a name")
    raw_pages = data.get("pages")
    if not isinstance(raw_pages, list):
        raise InvalidStoryboardFile("Storyboard file is missing its pages")
    return name, pages_from_payload(raw_pages)


def import_storyboard(path: Path) -> tuple[str, PageCollection]:
    """Read and validate the storyboard file at *path*."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise InvalidStoryboardFile(f"Cannot read {path}: {exc}") from exc
    return parse_storyboard(data)
