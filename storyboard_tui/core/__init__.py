"""Versioned state engine: pages, undo/redo history, registry, persistence."""

from .history import HistoryFrame, VersionedStore
from .pages import (
    Page,
    PageCollection,
    delete_page,
    insert_page,
    renumber,
    reorder_pages,
    update_page,
)
from .registry import Storyboard, StoryboardRegistry

__all__ = [
    "HistoryFrame",
    "Page",
    "PageCollection",
    "Storyboard",
    "StoryboardRegistry",
    "VersionedStore",
    "delete_page",
    "insert_page",
    "renumber",
    "reorder_pages",
    "update_page",
]
