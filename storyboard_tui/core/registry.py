"""Open storyboards, the active tab and the unsaved-changes flag."""

from __future__ import annotations

from typing import Callable, Iterable

from ..errors import IndexOutOfRange
from . import pages as ops
from .history import VersionedStore
from .pages import EMPTY, PageCollection


class Storyboard:
    """A named page collection with its own undo/redo history.

    The page operations below compute a new collection and commit it, so
    each call is exactly one undoable step.
    """

    def __init__(
        self,
        storyboard_id: int,
        name: str,
        pages: PageCollection = EMPTY,
    ) -> None:
        self.id = storyboard_id
        self.name = name
        self.history = VersionedStore(pages)

    def __repr__(self) -> str:
        return f"Storyboard(id={self.id}, name={self.name!r}, pages={len(self.pages)})"

    @property
    def pages(self) -> PageCollection:
        """The present snapshot; the only view used for rendering and export."""
        return self.history.present

    def add_page(self) -> None:
        self.history.commit(ops.insert_page(self.pages))

    def update_page(self, index: int, **changes: str) -> None:
        self.history.commit(ops.update_page(self.pages, index, **changes))

    def delete_page(self, index: int) -> None:
        self.history.commit(ops.delete_page(self.pages, index))

    def reorder_pages(self, source: int, target: int) -> bool:
        """Move a page; returns False (and records nothing) for a no-op move."""
        moved = ops.reorder_pages(self.pages, source, target)
        if moved is self.pages:
            return False
        self.history.commit(moved)
        return True

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()


RegistryListener = Callable[["StoryboardRegistry"], None]


class StoryboardRegistry:
    """Owns the open storyboards in tab order.

    The storyboard list and ``active_index`` change only through the methods
    here.  Listeners run after every change, including commits, undos and
    redos on any open storyboard.
    """

    def __init__(self) -> None:
        self._storyboards: list[Storyboard] = []
        self._active_index: int | None = None
        self._dirty = False
        self._listeners: list[RegistryListener] = []

    # -- queries ---------------------------------------------------------------

    @property
    def storyboards(self) -> tuple[Storyboard, ...]:
        return tuple(self._storyboards)

    @property
    def active_index(self) -> int | None:
        return self._active_index

    @property
    def active(self) -> Storyboard | None:
        if self._active_index is None:
            return None
        return self._storyboards[self._active_index]

    @property
    def dirty(self) -> bool:
        """True when there are changes that have not been exported."""
        return self._dirty

    def __len__(self) -> int:
        return len(self._storyboards)

    def find(self, storyboard_id: int) -> int | None:
        """Return the tab index of *storyboard_id*, or None if it is not open."""
        for index, storyboard in enumerate(self._storyboards):
            if storyboard.id == storyboard_id:
                return index
        return None

    # -- listeners -------------------------------------------------------------

    def add_listener(self, listener: RegistryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: RegistryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -- opening and closing ---------------------------------------------------

    def open_new(self, name: str) -> Storyboard:
        """Open an empty storyboard called *name* and make it active."""
        return self._append(Storyboard(ops.ids.next_id(), _validate_name(name)))

    def open_from_snapshot(
        self,
        name: str,
        pages: PageCollection,
        storyboard_id: int | None = None,
    ) -> Storyboard:
        """Open *pages* as a new storyboard with empty undo history."""
        if storyboard_id is None or self.find(storyboard_id) is not None:
            storyboard_id = ops.ids.next_id()
        storyboard = Storyboard(storyboard_id, _validate_name(name), tuple(pages))
        return self._append(storyboard)

    def reopen(self, storyboard: Storyboard) -> Storyboard:
        """Open a previously stored storyboard, or switch to it if already open.

        Reopening is not an unsaved change, so the dirty flag is left alone.
        """
        index = self.find(storyboard.id)
        if index is not None:
            self.set_active(index)
            return self._storyboards[index]
        return self._append(storyboard, dirty=False)

    def adopt(self, storyboards: Iterable[Storyboard], active_index: int = 0) -> None:
        """Populate the registry with storyboards restored at startup.

        Restored storyboards are not unsaved changes, so the dirty flag is
        left alone.  *active_index* is clamped into range.
        """
        for storyboard in storyboards:
            if self.find(storyboard.id) is not None:
                continue
            self._watch(storyboard)
            self._storyboards.append(storyboard)
        if self._storyboards:
            self._active_index = min(max(active_index, 0), len(self._storyboards) - 1)
        self._notify()

    def close(self, index: int) -> Storyboard:
        """Close the storyboard at *index* and return it.

        When the active tab closes, the tab before it becomes active (or the
        new first tab, or nothing once the registry is empty).
        """
        self._check_index(index)
        storyboard = self._storyboards.pop(index)
        storyboard.history.on_change = None
        active = self._active_index
        if not self._storyboards:
            self._active_index = None
        elif active is not None and index < active:
            self._active_index = active - 1
        elif index == active:
            self._active_index = max(index - 1, 0)
        self._notify()
        return storyboard

    def set_active(self, index: int) -> None:
        self._check_index(index)
        self._active_index = index
        self._notify()

    # -- dirty flag ------------------------------------------------------------

    def mark_dirty(self) -> None:
        self._dirty = True
        self._notify()

    def clear_dirty(self) -> None:
        """Called after an explicit export; nothing else clears the flag."""
        self._dirty = False
        self._notify()

    # -- internals -------------------------------------------------------------

    def _append(self, storyboard: Storyboard, *, dirty: bool = True) -> Storyboard:
        self._watch(storyboard)
        self._storyboards.append(storyboard)
        self._active_index = len(self._storyboards) - 1
        if dirty:
            self._dirty = True
        self._notify()
        return storyboard

    def _watch(self, storyboard: Storyboard) -> None:
        def changed() -> None:
            self._dirty = True
            self._notify()

        storyboard.history.on_change = changed

    def _check_index(self, index: int) -> None:
        if not isinstance(index, int) or not 0 <= index < len(self._storyboards):
            raise IndexOutOfRange(index, len(self._storyboards), what="storyboard")


def _validate_name(name: str) -> str:
    """Reject blank names; the name itself is kept exactly as given."""
    if not isinstance(name, str):
        raise TypeError(f"storyboard name must be a string, got {type(name)!r}")
    if not name.strip():
        raise ValueError("storyboard name must be a non-empty string")
    return name
