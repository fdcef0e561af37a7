"""Shared test fixtures for storyboard-tui test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from storyboard_tui.core.pages import Page, renumber
from storyboard_tui.core.registry import Storyboard, StoryboardRegistry


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for file-based tests."""
    return tmp_path


@pytest.fixture
def registry() -> StoryboardRegistry:
    return StoryboardRegistry()


@pytest.fixture
def storyboard() -> Storyboard:
    """A storyboard with three pages (ids 1, 2, 3) and no history."""
    return Storyboard(
        100,
        "Opening",
        renumber(
            [
                Page(id=1, page_number=0, page_name="Wide", dialogue="Hello"),
                Page(id=2, page_number=0, page_name="Close", timestamp="2.5s"),
                Page(id=3, page_number=0, context="Night", audio="data:audio/wav;base64,AA=="),
            ]
        ),
    )


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A data directory whose first-run setup is already done."""
    (tmp_path / "preferences.yaml").write_text(
        'active_tab: 0\ncolor_mode: "dark"\nsetup_complete: true\nuser_name: "Ada"\n',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def make_pages():
    """Build pages with the given ids, numbered 1..N."""

    def build(*ids: int, **fields: str):
        return renumber([Page(id=page_id, page_number=0, **fields) for page_id in ids])

    return build
