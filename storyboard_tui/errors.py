"""Error taxonomy for the storyboard state engine.

Every error is recoverable at the boundary where it occurs; none of them
leaves a storyboard's history partially updated.
"""

from __future__ import annotations


class StoryboardError(Exception):
    """Base class for all storyboard errors."""


class IndexOutOfRange(StoryboardError, IndexError):
    """A page or tab position is outside the valid range."""

    def __init__(self, index: int, size: int, what: str = "page") -> None:
        super().__init__(f"{what} index {index} out of range (0..{size - 1})")
        self.index = index
        self.size = size


class InvalidStoryboardFile(StoryboardError, ValueError):
    """An imported storyboard file is malformed or misses required fields."""


class BlobReadFailed(StoryboardError, OSError):
    """A user-selected image or audio file could not be read."""


class PersistenceWriteFailed(StoryboardError, OSError):
    """The durable store rejected a storyboard write."""

    def __init__(self, storyboard_id: int, reason: str) -> None:
        super().__init__(f"could not save storyboard {storyboard_id}: {reason}")
        self.storyboard_id = storyboard_id
