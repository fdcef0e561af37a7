"""Modal screen widgets for Storyboard TUI."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, OptionList, Static
from textual.widgets.option_list import Option

from ..core.playback import PlaybackCursor, PlaybackStep
from ..persistence import StoryboardRecord
from .page_table import blob_summary


class PromptScreen(ModalScreen[str | None]):
    """Ask for one line of text. Dismisses with the text, or None on Escape."""

    BINDINGS = [
        Binding("escape", "cancel", show=False),
    ]

    def __init__(self, title: str, value: str = "", placeholder: str = "") -> None:
        super().__init__()
        self._title = title
        self._value = value
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-box"):
            yield Static(self._title, classes="modal-title")
            yield Input(
                value=self._value, placeholder=self._placeholder, id="prompt-input"
            )
            yield Static("[dim]Enter to confirm, Escape to cancel[/]")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no question, used before closing or quitting with unsaved changes."""

    BINDINGS = [
        Binding("y", "answer(True)", show=False),
        Binding("n", "answer(False)", show=False),
        Binding("escape", "answer(False)", show=False),
    ]

    def __init__(self, question: str) -> None:
        super().__init__()
        self._question = question

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-box"):
            yield Static(self._question, classes="modal-title")
            with Horizontal(classes="modal-buttons"):
                yield Button("Yes", id="confirm-yes", variant="warning")
                yield Button("No", id="confirm-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class RecentScreen(ModalScreen[tuple[str, int] | None]):
    """Pick a stored storyboard that is not open.

    Dismisses with ``("open", id)`` or ``("delete", id)``, or None on Escape.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("delete", "delete", "Remove", show=True),
    ]

    def __init__(self, records: list[StoryboardRecord]) -> None:
        super().__init__()
        self._records = records

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-box"):
            yield Static("Recently opened", classes="modal-title")
            yield OptionList(
                *(
                    Option(
                        f"{escape(record.name)} [dim]· {len(record.pages)} "
                        f"page{'s' if len(record.pages) != 1 else ''}[/]",
                        id=str(record.id),
                    )
                    for record in self._records
                ),
                id="recent-list",
            )
            yield Static("[dim]Enter to open, Delete to remove, Escape to cancel[/]")

    def on_mount(self) -> None:
        options = self.query_one("#recent-list", OptionList)
        if self._records:
            options.highlighted = 0
        options.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.dismiss(("open", int(event.option.id)))

    def action_delete(self) -> None:
        options = self.query_one("#recent-list", OptionList)
        if options.highlighted is None:
            return
        option = options.get_option_at_index(options.highlighted)
        self.dismiss(("delete", int(option.id)))

    def action_cancel(self) -> None:
        self.dismiss(None)


class SetupScreen(ModalScreen[str]):
    """First-run setup: pick the color mode. Dismisses with ``dark`` or ``light``."""

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-box"):
            yield Static("Welcome to Storyboard", classes="modal-title")
            yield Static("Choose a color mode. You can switch later with Ctrl+T.")
            with Horizontal(classes="modal-buttons"):
                yield Button("Dark", id="mode-dark", variant="primary")
                yield Button("Light", id="mode-light")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss("light" if event.button.id == "mode-light" else "dark")


class SlideshowScreen(ModalScreen[None]):
    """Full-screen playback: each page stays up for its duration."""

    BINDINGS = [
        Binding("escape", "stop", "Exit", show=True),
        Binding("space", "next", "Next", show=True),
    ]

    def __init__(self, steps: list[PlaybackStep]) -> None:
        super().__init__()
        self.cursor = PlaybackCursor(steps)
        self._timer = None

    def compose(self) -> ComposeResult:
        with Vertical(id="slideshow"):
            yield Static("", id="slide-header")
            yield Static("", id="slide-image")
            yield Static("", id="slide-dialogue")
            yield Static("", id="slide-context")

    def on_mount(self) -> None:
        self._show(self.cursor.start())

    def _show(self, step: PlaybackStep | None) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        if step is None:
            self.dismiss(None)
            return
        page = step.page
        total = len(self.cursor.steps)
        title = f" — {escape(page.page_name)}" if page.page_name else ""
        audio = "  ♪" if page.audio else ""
        self.query_one("#slide-header", Static).update(
            f"[b]Page {page.page_number} of {total}{title}[/b]{audio}  "
            f"[dim]{step.duration:g}s[/]"
        )
        self.query_one("#slide-image", Static).update(
            f"[dim]{blob_summary(page.image)}[/]" if page.image else ""
        )
        self.query_one("#slide-dialogue", Static).update(escape(page.dialogue))
        self.query_one("#slide-context", Static).update(
            f"[i]{escape(page.context)}[/i]" if page.context else ""
        )
        self._timer = self.set_timer(step.duration, self.action_next)

    def action_next(self) -> None:
        self._show(self.cursor.advance())

    def action_stop(self) -> None:
        self.cursor.stop()
        self._show(None)
