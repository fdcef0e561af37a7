"""Widget behavioral tests.

Covers the pure formatting helpers behind the page table and the theme
lookup.  Textual DOM behaviour is exercised in test_app.py.
"""

from __future__ import annotations

import base64

import pytest

from storyboard_tui.core.pages import Page
from storyboard_tui.theme import TEXTUAL_THEMES, theme_for
from storyboard_tui.widgets import blob_summary
from storyboard_tui.widgets.page_table import COLUMNS, page_row, preview


def data_url(mime: str, size: int) -> str:
    return f"data:{mime};base64," + base64.b64encode(b"\0" * size).decode()


class TestBlobSummary:
    def test_empty(self):
        assert blob_summary("") == "—"

    @pytest.mark.parametrize(
        ("size", "label"),
        [(300, "300 B"), (3 * 1024, "3 KB"), (2 * 1024 * 1024, "2.0 MB")],
    )
    def test_sizes(self, size, label):
        assert blob_summary(data_url("image/png", size)) == f"image/png {label}"


class TestPageRow:
    def test_preview_flattens_and_truncates(self):
        assert preview("a\n  b") == "a b"
        long = preview("x" * 100)
        assert len(long) == 32
        assert long.endswith("…")

    def test_row_matches_columns(self):
        page = Page(id=1, page_number=4, page_name="Wide", dialogue="Hi\nthere")
        row = page_row(page)
        assert len(row) == len(COLUMNS)
        assert row[0] == "4"
        assert row[3] == "Hi there"


class TestTheme:
    def test_known_modes(self):
        assert theme_for("light").name == "storyboard-light"
        assert theme_for("dark").name == "storyboard-dark"

    def test_unknown_mode_is_dark(self):
        assert theme_for("sepia") is TEXTUAL_THEMES["dark"]
