"""Page table for the active storyboard."""

from __future__ import annotations

from textual.coordinate import Coordinate
from textual.widgets import DataTable

from ..core.pages import Page, PageCollection

COLUMNS = ("#", "Name", "Image", "Dialogue", "Context", "Time", "Audio")

_PREVIEW_CHARS = 32


def blob_summary(blob: str) -> str:
    """Short label for a data-URL blob: its MIME type and approximate size."""
    if not blob:
        return "—"
    header, _, payload = blob.partition(",")
    mime = header.removeprefix("data:").split(";", 1)[0] or "blob"
    size = len(payload) * 3 // 4
    if size >= 1024 * 1024:
        return f"{mime} {size / (1024 * 1024):.1f} MB"
    if size >= 1024:
        return f"{mime} {size // 1024} KB"
    return f"{mime} {size} B"


def preview(text: str) -> str:
    flat = " ".join(text.split())
    if len(flat) > _PREVIEW_CHARS:
        return flat[: _PREVIEW_CHARS - 1] + "…"
    return flat


def page_row(page: Page) -> tuple[str, ...]:
    return (
        str(page.page_number),
        preview(page.page_name),
        blob_summary(page.image),
        preview(page.dialogue),
        preview(page.context),
        preview(page.timestamp),
        blob_summary(page.audio),
    )


class PageTable(DataTable):
    """One row per page.

    When the same pages are shown again in the same order only the changed
    cells are rewritten, so typing into a page field does not move the
    cursor.  Any structural change rebuilds the rows.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self._ids: tuple[int, ...] = ()
        self._rows: list[tuple[str, ...]] = []

    def on_mount(self) -> None:
        self.add_columns(*COLUMNS)

    def show_pages(self, pages: PageCollection, select: int | None = None) -> None:
        """Display *pages*, moving the cursor to row *select* when given."""
        ids = tuple(page.id for page in pages)
        rows = [page_row(page) for page in pages]
        if ids == self._ids:
            for r, (old, new) in enumerate(zip(self._rows, rows)):
                for c, (before, after) in enumerate(zip(old, new)):
                    if before != after:
                        self.update_cell_at(Coordinate(r, c), after)
        else:
            if select is None:
                select = self.cursor_row
            self.clear()
            for page, row in zip(pages, rows):
                self.add_row(*row, key=str(page.id))
        self._ids = ids
        self._rows = rows
        if pages and select is not None and select != self.cursor_row:
            self.move_cursor(row=min(max(select, 0), len(pages) - 1))

    @property
    def selected_index(self) -> int | None:
        """Row under the cursor, or None when the table is empty."""
        if not self._ids:
            return None
        return min(max(self.cursor_row, 0), len(self._ids) - 1)
