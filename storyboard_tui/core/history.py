"""Linear undo/redo history over immutable page-collection snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .pages import EMPTY, PageCollection


@dataclass(frozen=True)
class HistoryFrame:
    """Past, present and future snapshots.

    ``past`` is oldest first; ``future`` is nearest-redo first.
    """

    present: PageCollection = EMPTY
    past: tuple[PageCollection, ...] = ()
    future: tuple[PageCollection, ...] = ()


class VersionedStore:
    """Undo/redo wrapper around one page collection.

    ``commit``, ``undo`` and ``redo`` are the only ways to change the
    history.  Each builds a complete new ``HistoryFrame`` and swaps it in,
    so a frame is never observed half-updated.
    """

    def __init__(
        self,
        present: PageCollection = EMPTY,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._frame = HistoryFrame(present=tuple(present))
        self.on_change = on_change

    @property
    def frame(self) -> HistoryFrame:
        return self._frame

    @property
    def present(self) -> PageCollection:
        return self._frame.present

    @property
    def can_undo(self) -> bool:
        return bool(self._frame.past)

    @property
    def can_redo(self) -> bool:
        return bool(self._frame.future)

    def commit(self, collection: PageCollection) -> None:
        """Make *collection* the present; the old present becomes undoable.

        Any redo entries are discarded.
        """
        frame = self._frame
        self._swap(
            HistoryFrame(
                present=tuple(collection),
                past=frame.past + (frame.present,),
                future=(),
            )
        )

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when there is nothing to undo."""
        frame = self._frame
        if not frame.past:
            return False
        self._swap(
            HistoryFrame(
                present=frame.past[-1],
                past=frame.past[:-1],
                future=(frame.present,) + frame.future,
            )
        )
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False when there is nothing to redo."""
        frame = self._frame
        if not frame.future:
            return False
        self._swap(
            HistoryFrame(
                present=frame.future[0],
                past=frame.past + (frame.present,),
                future=frame.future[1:],
            )
        )
        return True

    def _swap(self, frame: HistoryFrame) -> None:
        self._frame = frame
        if self.on_change is not None:
            self.on_change()
