"""Pages and pure page-collection operations.

A ``PageCollection`` is a tuple of frozen ``Page`` objects, so every
collection is a snapshot that can be shared between history entries without
copying.  All operations return a new collection and leave their input
untouched.  Page numbers are recomputed over the whole collection after each
structural change.
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import Any

from ..constants import EDITABLE_FIELDS
from ..errors import IndexOutOfRange


@dataclass(frozen=True)
class Page:
    """One storyboard frame."""

    id: int
    page_number: int
    page_name: str = ""
    image: str = ""  # data URL or empty
    dialogue: str = ""
    context: str = ""
    timestamp: str = ""  # free-text display cue
    audio: str = ""  # data URL or empty

    def to_payload(self) -> dict[str, Any]:
        """Return the page in the storyboard file shape (camelCase keys)."""
        return {
            "id": self.id,
            "pageNumber": self.page_number,
            "pageName": self.page_name,
            "image": self.image,
            "dialogue": self.dialogue,
            "context": self.context,
            "timestamp": self.timestamp,
            "audio": self.audio,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any], *, fallback_id: int) -> Page:
        """Build a page from the file shape; missing text fields become ``""``."""
        raw_id = payload.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            raw_id = fallback_id
        raw_number = payload.get("pageNumber")
        number = raw_number if isinstance(raw_number, int) else 0

        def text(key: str) -> str:
            value = payload.get(key)
            return "" if value is None else str(value)

        return cls(
            id=raw_id,
            page_number=number,
            page_name=text("pageName"),
            image=text("image"),
            dialogue=text("dialogue"),
            context=text("context"),
            timestamp=text("timestamp"),
            audio=text("audio"),
        )


PageCollection = tuple[Page, ...]

EMPTY: PageCollection = ()


class IdSource:
    """Mint wall-clock millisecond ids that never repeat within a process."""

    def __init__(self) -> None:
        self._last = 0

    def next_id(self, above: int = 0) -> int:
        """Return a fresh id greater than every id minted so far and *above*."""
        candidate = max(int(time.time() * 1000), self._last + 1, above + 1)
        self._last = candidate
        return candidate


ids = IdSource()


def check_index(collection: PageCollection, index: int) -> None:
    if not isinstance(index, int) or not 0 <= index < len(collection):
        raise IndexOutOfRange(index, len(collection))


def renumber(pages: PageCollection | list[Page]) -> PageCollection:
    """Return *pages* with page numbers ``1..N`` in sequence order."""
    return tuple(
        page
        if page.page_number == number
        else dataclasses.replace(page, page_number=number)
        for number, page in enumerate(pages, start=1)
    )


def insert_page(collection: PageCollection) -> PageCollection:
    """Append an empty page with a fresh id."""
    highest = max((page.id for page in collection), default=0)
    page = Page(id=ids.next_id(above=highest), page_number=len(collection) + 1)
    return renumber(collection + (page,))


def update_page(
    collection: PageCollection, index: int, **changes: str
) -> PageCollection:
    """Replace fields of the page at *index*.

    Raises:
        IndexOutOfRange: If *index* is not a valid position.
        ValueError: If *changes* names ``id``, ``page_number`` or an unknown
            field.
    """
    check_index(collection, index)
    invalid = sorted(set(changes) - set(EDITABLE_FIELDS))
    if invalid:
        raise ValueError(f"Cannot update page field(s): {', '.join(invalid)}")
    pages = list(collection)
    pages[index] = dataclasses.replace(pages[index], **changes)
    return tuple(pages)


def delete_page(collection: PageCollection, index: int) -> PageCollection:
    """Remove the page at *index* and renumber the rest."""
    check_index(collection, index)
    return renumber(collection[:index] + collection[index + 1 :])


def reorder_pages(
    collection: PageCollection, source: int, target: int
) -> PageCollection:
    """Move the page at *source* so it ends up at *target*.

    *target* is a position in the sequence after removal, so the call
    behaves like ``pages.insert(target, pages.pop(source))``.  Moving a page
    onto itself returns *collection* unchanged.
    """
    check_index(collection, source)
    check_index(collection, target)
    if source == target:
        return collection
    pages = list(collection)
    moved = pages.pop(source)
    pages.insert(target, moved)
    return renumber(pages)


def find_page(collection: PageCollection, page_id: int) -> int | None:
    """Return the position of the page with *page_id*, or None."""
    for index, page in enumerate(collection):
        if page.id == page_id:
            return index
    return None
