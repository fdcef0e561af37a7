"""Tab bar widgets for Storyboard TUI."""

from __future__ import annotations

from rich.markup import escape
from textual.containers import Horizontal
from textual.widgets import Static

_MAX_LABEL = 24


class TabButton(Static):
    """Clickable label for one open storyboard."""

    def __init__(self, name: str, page_count: int, tab_index: int, **kwargs) -> None:
        short = name if len(name) <= _MAX_LABEL else name[: _MAX_LABEL - 1] + "…"
        super().__init__(f" {escape(short)} [dim]{page_count}[/] ", **kwargs)
        self.tab_index = tab_index
        self.tooltip = name

    def on_click(self) -> None:
        self.app.switch_to_tab(self.tab_index)


class TabBar(Horizontal):
    """Open storyboards in tab order, with the active one highlighted."""

    def update_tabs(self, tabs: list[tuple[str, int]], active_index: int | None) -> None:
        """Rebuild the buttons from ``(name, page_count)`` pairs."""
        self.remove_children()
        for i, (name, page_count) in enumerate(tabs):
            cls = "tab-btn tab-active" if i == active_index else "tab-btn tab-inactive"
            self.mount(TabButton(name, page_count, tab_index=i, classes=cls))
        if not tabs:
            self.mount(Static(" No storyboards open ", classes="tab-empty"))
