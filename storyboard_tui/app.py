"""Main Storyboard TUI application.

The app is a thin adapter: every key press becomes one call into the
storyboard registry, and the screen is redrawn from the registry whenever
it reports a change.  It owns no storyboard state itself.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.timer import Timer
from textual.widgets import DataTable, Footer, Input, Static, TextArea

from .constants import PREFERENCES_FILE, STORYBOARDS_DIR, storyboard_home
from .core.blobs import attach_blob
from .core.fileformat import export_storyboard, import_storyboard
from .core.gateway import PersistenceGateway
from .core.playback import PlaybackCursor, audio_queue, slideshow
from .core.registry import Storyboard, StoryboardRegistry
from .errors import (
    BlobReadFailed,
    IndexOutOfRange,
    InvalidStoryboardFile,
    PersistenceWriteFailed,
)
from .log import logger
from .persistence import StoryboardStore
from .preferences import PreferenceStore
from .theme import TEXTUAL_THEMES, theme_for
from .widgets import (
    ConfirmScreen,
    PageTable,
    PromptScreen,
    RecentScreen,
    SetupScreen,
    SlideshowScreen,
    TabBar,
)

# Editor widget id -> page field
FIELD_WIDGETS: dict[str, str] = {
    "field-page-name": "page_name",
    "field-timestamp": "timestamp",
    "field-dialogue": "dialogue",
    "field-context": "context",
}

# Actions that change storyboards; disabled while a modal screen is open
_EDIT_ACTIONS = frozenset(
    {
        "new_storyboard",
        "import_storyboard",
        "open_recent",
        "export_storyboard",
        "close_storyboard",
        "add_page",
        "delete_page",
        "move_page",
        "undo",
        "redo",
        "cycle_tab",
        "attach",
        "slideshow",
        "play_audio",
    }
)


class StoryboardApp(App):
    """Storyboard TUI - pages, undo/redo and tabs in the terminal."""

    CSS_PATH = "styles.tcss"
    TITLE = "Storyboard"

    BINDINGS = [
        Binding("ctrl+n", "new_storyboard", "New", show=True),
        Binding("ctrl+o", "import_storyboard", "Open", show=True),
        Binding("ctrl+r", "open_recent", "Recent", show=True),
        Binding("ctrl+s", "export_storyboard", "Export", show=True, priority=True),
        Binding("ctrl+w", "close_storyboard", "Close", show=True),
        Binding("a", "add_page", "Add page", show=True),
        Binding("delete", "delete_page", "Delete page", show=True),
        Binding("ctrl+up", "move_page(-1)", "Move up", show=False),
        Binding("ctrl+down", "move_page(1)", "Move down", show=False),
        Binding("ctrl+z", "undo", "Undo", show=True, priority=True),
        Binding("ctrl+y", "redo", "Redo", show=True, priority=True),
        Binding("ctrl+pageup", "cycle_tab(-1)", show=False),
        Binding("ctrl+pagedown", "cycle_tab(1)", show=False),
        Binding("i", "attach('image')", "Image", show=False),
        Binding("m", "attach('audio')", "Audio", show=False),
        Binding("f5", "slideshow", "Play", show=True),
        Binding("f6", "play_audio", "Play audio", show=False),
        Binding("ctrl+t", "toggle_color_mode", "Theme", show=False),
        Binding("ctrl+q", "quit", "Quit", show=True, priority=True),
    ]

    def __init__(
        self,
        data_dir: Path | None = None,
        import_path: Path | None = None,
    ) -> None:
        super().__init__()
        home = storyboard_home(data_dir)
        self.import_path = import_path
        self.registry = StoryboardRegistry()
        self.preferences = PreferenceStore(home / PREFERENCES_FILE)
        self.gateway = PersistenceGateway(
            StoryboardStore(home / STORYBOARDS_DIR),
            self.preferences,
            on_error=self._on_persistence_error,
        )
        # Small scalars first, so the first frame already has the right theme
        self._prefs = self.gateway.load_preferences()
        self._want_row: int | None = None
        self._audio_cursor: PlaybackCursor | None = None
        self._audio_timer: Timer | None = None
        self._shown_tabs: tuple[list[tuple[str, int]], int | None] | None = None

    # ── Layout ──────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Vertical(id="main-container"):
            yield TabBar(id="tab-bar")
            yield PageTable(id="page-table")
            with Horizontal(id="page-editor"):
                with Vertical(id="editor-short"):
                    yield Input(placeholder="Page name (optional)", id="field-page-name")
                    yield Input(placeholder="Timestamp (optional)", id="field-timestamp")
                yield TextArea(id="field-dialogue", soft_wrap=True)
                yield TextArea(id="field-context", soft_wrap=True)
            with Horizontal(id="status-bar"):
                yield Static("", id="status-greeting")
                yield Static("Loading storyboards…", id="status-state")
        yield Footer()

    async def on_mount(self) -> None:
        for theme in TEXTUAL_THEMES.values():
            self.register_theme(theme)
        self.theme = theme_for(self._prefs.color_mode).name
        self.query_one("#field-dialogue", TextArea).border_title = "Dialogue"
        self.query_one("#field-context", TextArea).border_title = "Context"

        self.registry.add_listener(self._on_registry_change)
        self.gateway.attach(self.registry)
        self._update_greeting()
        self._on_registry_change(self.registry)
        self.query_one(PageTable).focus()

        # Storyboards stream in after the first frame
        self.run_worker(self._restore(), exclusive=True, group="restore")

        if not self._prefs.setup_complete:
            self.push_screen(SetupScreen(), self._finish_setup)
        elif not self._prefs.user_name:
            self._ask_user_name()

    async def _restore(self) -> None:
        storyboards = await self.gateway.load_all()
        self.registry.adopt(storyboards, active_index=self._prefs.active_tab)
        if self.import_path is not None:
            await self._import_file(self.import_path)
            self.import_path = None

    # ── First run ───────────────────────────────────────────────

    def _finish_setup(self, color_mode: str | None) -> None:
        self._apply_color_mode(color_mode or "dark")
        self.preferences.set("setup_complete", True)
        self._prefs.setup_complete = True
        if not self._prefs.user_name:
            self._ask_user_name()

    def _ask_user_name(self) -> None:
        def save_name(name: str | None) -> None:
            self._prefs.user_name = (name or "").strip() or "User"
            self.preferences.set("user_name", self._prefs.user_name)
            self._update_greeting()

        self.push_screen(PromptScreen("What is your name?"), save_name)

    def _update_greeting(self) -> None:
        name = self._prefs.user_name
        greeting = f"Hello, {escape(name)}" if name else "Storyboard"
        self.query_one("#status-greeting", Static).update(greeting)

    def _apply_color_mode(self, color_mode: str) -> None:
        self.theme = theme_for(color_mode).name
        self._prefs.color_mode = color_mode
        self.preferences.set("color_mode", color_mode)

    # ── Rendering ───────────────────────────────────────────────

    def _on_registry_change(self, registry: StoryboardRegistry) -> None:
        """Redraw tabs, pages, editor and status from the registry."""
        tabs = [(sb.name, len(sb.pages)) for sb in registry.storyboards]
        if (tabs, registry.active_index) != self._shown_tabs:
            self._shown_tabs = (tabs, registry.active_index)
            self.query_one(TabBar).update_tabs(tabs, registry.active_index)

        storyboard = registry.active
        table = self.query_one(PageTable)
        table.show_pages(storyboard.pages if storyboard else (), select=self._want_row)
        self._want_row = None
        self._load_editor()
        self._update_status()

    def _load_editor(self) -> None:
        """Show the selected page's fields, touching only widgets that differ."""
        storyboard = self.registry.active
        index = self.query_one(PageTable).selected_index
        page = storyboard.pages[index] if storyboard and index is not None else None
        for widget_id, field in FIELD_WIDGETS.items():
            value = getattr(page, field) if page else ""
            widget = self.query_one(f"#{widget_id}")
            widget.disabled = page is None
            if isinstance(widget, Input):
                if widget.value != value:
                    widget.value = value
            elif isinstance(widget, TextArea) and widget.text != value:
                widget.load_text(value)

    def _update_status(self) -> None:
        storyboard = self.registry.active
        if storyboard is None:
            text = "No storyboard open. Ctrl+N new, Ctrl+O open"
        else:
            count = len(storyboard.pages)
            text = f"{escape(storyboard.name)} · {count} page{'s' if count != 1 else ''}"
            if self.registry.dirty:
                text += " · [b]unsaved[/b]"
        self.query_one("#status-state", Static).update(text)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        # Rebuilding the table queues highlights for rows it passed through
        if event.cursor_row == event.data_table.cursor_row:
            self._load_editor()

    # ── Field editing (every change is one undo step) ───────────

    def on_input_changed(self, event: Input.Changed) -> None:
        field = FIELD_WIDGETS.get(event.input.id or "")
        if field and event.input.has_focus:
            self._edit_field(field, event.value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        field = FIELD_WIDGETS.get(event.text_area.id or "")
        if field and event.text_area.has_focus:
            self._edit_field(field, event.text_area.text)

    def _edit_field(self, field: str, value: str) -> None:
        storyboard = self.registry.active
        index = self.query_one(PageTable).selected_index
        if storyboard is None or index is None:
            return
        if getattr(storyboard.pages[index], field) == value:
            return
        storyboard.update_page(index, **{field: value})

    # ── Actions ─────────────────────────────────────────────────

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action in _EDIT_ACTIONS and isinstance(self.screen, ModalScreen):
            return False
        return True

    def _active_or_warn(self) -> Storyboard | None:
        storyboard = self.registry.active
        if storyboard is None:
            self.notify("Open or create a storyboard first.", severity="warning")
        return storyboard

    def switch_to_tab(self, index: int) -> None:
        try:
            self.registry.set_active(index)
        except IndexOutOfRange:
            self.bell()

    def action_cycle_tab(self, delta: int) -> None:
        count = len(self.registry)
        if count < 2 or self.registry.active_index is None:
            return
        self.switch_to_tab((self.registry.active_index + delta) % count)

    def action_new_storyboard(self) -> None:
        def create(name: str | None) -> None:
            if name and name.strip():
                self.registry.open_new(name.strip())

        self.push_screen(PromptScreen("Name for the new storyboard"), create)

    def action_import_storyboard(self) -> None:
        def open_path(value: str | None) -> None:
            if value and value.strip():
                self.run_worker(self._import_file(Path(value.strip()).expanduser()))

        self.push_screen(
            PromptScreen("Open storyboard file", placeholder="path/to/storyboard.json"),
            open_path,
        )

    async def _import_file(self, path: Path) -> None:
        try:
            name, pages = await asyncio.to_thread(import_storyboard, path)
        except InvalidStoryboardFile as exc:
            logger.debug("rejected storyboard file %s: %s", path, exc)
            self.notify(str(exc), title="Invalid storyboard file", severity="error")
            return
        self.registry.open_from_snapshot(name, pages)

    def action_open_recent(self) -> None:
        self.run_worker(self._show_recent(), exclusive=True, group="recent")

    async def _show_recent(self) -> None:
        records = await self.gateway.load_recent()
        if not records:
            self.notify("No closed storyboards are saved.", severity="warning")
            return
        by_id = {record.id: record for record in records}

        def choose(choice: tuple[str, int] | None) -> None:
            if choice is None:
                return
            verb, storyboard_id = choice
            record = by_id[storyboard_id]
            if verb == "open":
                self.registry.reopen(record.restore())
            elif verb == "delete":
                self.gateway.forget(storyboard_id)
                self.notify(f"Removed {escape(record.name)} from recent storyboards.")

        self.push_screen(RecentScreen(records), choose)

    def action_export_storyboard(self) -> None:
        storyboard = self._active_or_warn()
        if storyboard is None:
            return

        def export_to(value: str | None) -> None:
            if value and value.strip():
                path = Path(value.strip()).expanduser()
                self.run_worker(self._export_file(storyboard, path))

        default = Path.cwd() / f"{storyboard.name}.json"
        self.push_screen(PromptScreen("Export storyboard to", value=str(default)), export_to)

    async def _export_file(self, storyboard: Storyboard, path: Path) -> None:
        try:
            written = await asyncio.to_thread(export_storyboard, storyboard, path)
        except OSError as exc:
            logger.warning("export of %s to %s failed: %s", storyboard.id, path, exc)
            self.notify(str(exc), title="Export failed", severity="error")
            return
        self.registry.clear_dirty()
        self.notify(f"Saved {written}")

    def action_close_storyboard(self) -> None:
        index = self.registry.active_index
        if index is None:
            return

        def close(confirmed: bool | None) -> None:
            if confirmed and index < len(self.registry):
                self.registry.close(index)

        if self.registry.dirty:
            name = escape(self.registry.storyboards[index].name)
            self.push_screen(
                ConfirmScreen(
                    f"Close {name}? Unsaved changes will be lost unless you exported."
                ),
                close,
            )
        else:
            close(True)

    def action_add_page(self) -> None:
        storyboard = self._active_or_warn()
        if storyboard is None:
            return
        self._want_row = len(storyboard.pages)
        storyboard.add_page()

    def action_delete_page(self) -> None:
        storyboard = self.registry.active
        index = self.query_one(PageTable).selected_index
        if storyboard is None or index is None:
            self.bell()
            return
        storyboard.delete_page(index)

    def action_move_page(self, delta: int) -> None:
        storyboard = self.registry.active
        index = self.query_one(PageTable).selected_index
        if storyboard is None or index is None:
            return
        try:
            self._want_row = index + delta
            storyboard.reorder_pages(index, index + delta)
        except IndexOutOfRange:
            self._want_row = None
            self.bell()

    def action_undo(self) -> None:
        storyboard = self.registry.active
        if storyboard is None or not storyboard.undo():
            self.bell()

    def action_redo(self) -> None:
        storyboard = self.registry.active
        if storyboard is None or not storyboard.redo():
            self.bell()

    def action_attach(self, kind: str) -> None:
        storyboard = self.registry.active
        index = self.query_one(PageTable).selected_index
        if storyboard is None or index is None:
            self.notify("Select a page first.", severity="warning")
            return

        def attach(value: str | None) -> None:
            if value is None:
                return
            if not value.strip():
                if getattr(storyboard.pages[index], kind):
                    storyboard.update_page(index, **{kind: ""})
                return
            path = Path(value.strip()).expanduser()
            self.run_worker(self._attach_file(storyboard, index, kind, path))

        self.push_screen(
            PromptScreen(f"Attach {kind} file (leave empty to remove)"), attach
        )

    async def _attach_file(
        self, storyboard: Storyboard, index: int, kind: str, path: Path
    ) -> None:
        try:
            await attach_blob(storyboard, index, kind, path)
        except (BlobReadFailed, IndexOutOfRange) as exc:
            logger.debug("could not attach %s: %s", path, exc)
            self.notify(str(exc), title=f"Could not load {kind}", severity="error")

    def action_slideshow(self) -> None:
        storyboard = self._active_or_warn()
        if storyboard is None:
            return
        steps = slideshow(storyboard.pages)
        if not steps:
            self.notify("This storyboard has no pages yet.", severity="warning")
            return
        self.push_screen(SlideshowScreen(steps))

    def action_play_audio(self) -> None:
        """Step through the pages that carry audio, highlighting each in turn."""
        if self._audio_cursor is not None:
            self._stop_audio()
            return
        storyboard = self._active_or_warn()
        if storyboard is None:
            return
        cursor = PlaybackCursor(audio_queue(storyboard.pages))
        if cursor.start() is None:
            self.notify("No pages have audio.", severity="warning")
            return
        self._audio_cursor = cursor
        self._show_audio_step()

    def _show_audio_step(self) -> None:
        step = self._audio_cursor.current if self._audio_cursor else None
        if step is None:
            self._stop_audio()
            return
        self.query_one(PageTable).move_cursor(row=step.index)
        self.query_one("#status-state", Static).update(
            f"♪ Page {step.page.page_number} · {step.duration:g}s (F6 to stop)"
        )
        self._audio_timer = self.set_timer(step.duration, self._next_audio_step)

    def _next_audio_step(self) -> None:
        if self._audio_cursor is None:
            return
        self._audio_cursor.advance()
        self._show_audio_step()

    def _stop_audio(self) -> None:
        if self._audio_timer is not None:
            self._audio_timer.stop()
            self._audio_timer = None
        if self._audio_cursor is not None:
            self._audio_cursor.stop()
            self._audio_cursor = None
        self._update_status()

    def action_toggle_color_mode(self) -> None:
        self._apply_color_mode("light" if self._prefs.color_mode == "dark" else "dark")

    async def action_quit(self) -> None:
        def leave(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self._flush_and_exit())

        if self.registry.dirty:
            self.push_screen(
                ConfirmScreen("You have unsaved changes. Quit anyway?"), leave
            )
        else:
            await self._flush_and_exit()

    async def _flush_and_exit(self) -> None:
        await self.gateway.flush()
        self.exit()

    # ── Persistence feedback ────────────────────────────────────

    def _on_persistence_error(self, error: PersistenceWriteFailed) -> None:
        self.notify(str(error), title="Not saved yet", severity="warning")


def run_app(data_dir: Path | None = None, import_path: Path | None = None) -> None:
    """Run the Storyboard TUI."""
    app = StoryboardApp(data_dir=data_dir, import_path=import_path)
    app.run()
