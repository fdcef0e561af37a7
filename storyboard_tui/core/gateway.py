"""Keep the durable store and the fast scalar store in step with the registry.

Writes are fire-and-forget for the caller.  Each storyboard id has a queue
of depth one: while a write for an id is in flight, a newer record for the
same id replaces any record still waiting behind it, so records land in the
order they were issued and the last one wins.  Different ids are written
independently, and each record is written atomically, so a failure for one
storyboard never leaves another with a partial page list.

Closing a tab does not remove its record.  Stored storyboards that are not
open are the "recent" list, and only ``forget`` deletes one.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Iterable

from ..errors import PersistenceWriteFailed
from ..log import logger
from ..persistence import StoryboardRecord, StoryboardStore
from ..preferences import PreferenceStore, Preferences
from .registry import Storyboard, StoryboardRegistry

ErrorCallback = Callable[[PersistenceWriteFailed], None]


class PersistenceGateway:
    """Synchronises open storyboards to durable storage.

    Must be used from a running asyncio event loop; store I/O runs in worker
    threads so interactive edits never wait for the disk.
    """

    def __init__(
        self,
        store: StoryboardStore,
        preferences: PreferenceStore,
        *,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.store = store
        self.preferences = preferences
        self.on_error = on_error
        self._pending: dict[int, StoryboardRecord] = {}
        self._inflight: dict[int, asyncio.Task[None]] = {}
        self._written: dict[int, StoryboardRecord] = {}
        self._dropping: set[int] = set()
        self._open_ids: set[int] = set()
        self._active_tab: int | None = None
        self._open_order: list[int] | None = None

    # -- startup -----------------------------------------------------------------

    def load_preferences(self) -> Preferences:
        """Synchronous read of the small scalars, before ``load_all``."""
        prefs = self.preferences.load()
        self._active_tab = prefs.active_tab
        self._open_order = prefs.open_storyboards
        return prefs

    async def load_all(self) -> list[Storyboard]:
        """Restore the storyboards that were open, with empty undo history.

        Tabs come back in the order they were saved.  Before any order has
        been saved every stored storyboard is opened, in id order.  A missing
        or empty store gives an empty list.
        """
        records = await asyncio.to_thread(self.store.get_all)
        for record in records:
            self._written[record.id] = record
        if self._open_order is not None:
            by_id = {record.id: record for record in records}
            records = [by_id[i] for i in dict.fromkeys(self._open_order) if i in by_id]
        self._open_ids = {record.id for record in records}
        logger.debug("restoring %d storyboard(s) from %s", len(records), self.store.directory)
        return [record.restore() for record in records]

    async def load_recent(self) -> list[StoryboardRecord]:
        """Stored storyboards that are not open, newest first."""
        await self.flush()
        records = await asyncio.to_thread(self.store.get_all)
        closed = [record for record in records if record.id not in self._open_ids]
        for record in closed:
            self._written[record.id] = record
        return sorted(closed, key=lambda record: record.id, reverse=True)

    def attach(self, registry: StoryboardRegistry) -> None:
        """Persist the registry after every change it reports."""
        self._open_ids = {storyboard.id for storyboard in registry.storyboards}
        registry.add_listener(self._on_registry_change)

    def _on_registry_change(self, registry: StoryboardRegistry) -> None:
        # A closed storyboard's queued write still lands; it just stops
        # being tracked as open.
        self._open_ids = {storyboard.id for storyboard in registry.storyboards}
        self.save_all(registry.storyboards)
        self.save_active_tab(registry.active_index)
        self.save_open_tabs([storyboard.id for storyboard in registry.storyboards])

    # -- writes ------------------------------------------------------------------

    def save_all(self, storyboards: Iterable[Storyboard]) -> None:
        """Queue a write for every storyboard whose snapshot changed."""
        for storyboard in storyboards:
            record = StoryboardRecord.capture(storyboard)
            self._dropping.discard(record.id)
            if record == self._written.get(record.id) and record.id not in self._inflight:
                continue
            self._enqueue(record)

    def save_active_tab(self, index: int | None) -> None:
        if index is None or index == self._active_tab:
            return
        if self.preferences.set("active_tab", index):
            self._active_tab = index

    def save_open_tabs(self, storyboard_ids: list[int]) -> None:
        """Remember which storyboards are open, in tab order."""
        if storyboard_ids == self._open_order:
            return
        if self.preferences.set("open_storyboards", storyboard_ids):
            self._open_order = list(storyboard_ids)

    def forget(self, storyboard_id: int) -> None:
        """Delete the stored record of a closed storyboard.

        A write that has not started yet is discarded; one already in flight
        finishes first and the record is deleted afterwards.

        Raises:
            ValueError: If the storyboard is still open.
        """
        if storyboard_id in self._open_ids:
            raise ValueError(f"storyboard {storyboard_id} is open; close it first")
        self._pending.pop(storyboard_id, None)
        self._written.pop(storyboard_id, None)
        self._dropping.add(storyboard_id)
        if storyboard_id not in self._inflight:
            self._start(storyboard_id)

    async def flush(self) -> None:
        """Wait until every queued write and delete has finished."""
        while self._inflight:
            await asyncio.gather(*self._inflight.values())

    @property
    def busy(self) -> bool:
        return bool(self._inflight)

    def _enqueue(self, record: StoryboardRecord) -> None:
        self._pending[record.id] = record
        if record.id not in self._inflight:
            self._start(record.id)

    def _start(self, storyboard_id: int) -> None:
        task = asyncio.get_running_loop().create_task(self._drain(storyboard_id))
        self._inflight[storyboard_id] = task

    async def _drain(self, storyboard_id: int) -> None:
        try:
            while True:
                if storyboard_id in self._pending:
                    record = self._pending.pop(storyboard_id)
                    if record != self._written.get(storyboard_id):
                        await self._write(record)
                elif storyboard_id in self._dropping:
                    self._dropping.discard(storyboard_id)
                    self._written.pop(storyboard_id, None)
                    await asyncio.to_thread(self.store.delete, storyboard_id)
                else:
                    break
        finally:
            del self._inflight[storyboard_id]

    async def _write(self, record: StoryboardRecord) -> None:
        try:
            await asyncio.to_thread(self.store.put, record)
        except OSError as exc:
            # Not remembered as written, so the next change retries it
            self._written.pop(record.id, None)
            self._report(PersistenceWriteFailed(record.id, str(exc)))
        else:
            self._written[record.id] = record

    def _report(self, error: PersistenceWriteFailed) -> None:
        logger.warning("%s (will retry on next change)", error)
        if self.on_error is not None:
            self.on_error(error)
