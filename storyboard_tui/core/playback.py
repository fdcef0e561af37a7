"""Playback planning: play-all audio queue and timed slideshow.

The terminal never plays audio itself; these helpers only decide which
pages are shown, in which order and for how long.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..constants import DEFAULT_PAGE_DURATION
from .pages import Page, PageCollection

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class PlaybackStep:
    """One page in a playback run."""

    index: int  # position in the storyboard
    page: Page
    duration: float


def page_duration(page: Page) -> float:
    """Seconds to show *page*: the leading number of its timestamp.

    ``"3"``, ``"2.5s"`` and ``" 4 seconds"`` all parse; anything without a
    positive leading number falls back to the default duration.
    """
    match = _LEADING_NUMBER.match(page.timestamp or "")
    if match:
        seconds = float(match.group(1))
        if seconds > 0:
            return seconds
    return DEFAULT_PAGE_DURATION


def audio_queue(pages: PageCollection) -> list[PlaybackStep]:
    """Pages carrying audio, in storyboard order."""
    return [
        PlaybackStep(index, page, page_duration(page))
        for index, page in enumerate(pages)
        if page.audio
    ]


def slideshow(pages: PageCollection) -> list[PlaybackStep]:
    """Every page with the time it stays on screen."""
    return [PlaybackStep(index, page, page_duration(page)) for index, page in enumerate(pages)]


class PlaybackCursor:
    """Walks a list of steps with explicit start/advance/stop transitions."""

    def __init__(self, steps: list[PlaybackStep]) -> None:
        self.steps = steps
        self._position: int | None = None
        self._finished = False

    @property
    def current(self) -> PlaybackStep | None:
        if self._position is None:
            return None
        return self.steps[self._position]

    @property
    def running(self) -> bool:
        return self._position is not None

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self) -> PlaybackStep | None:
        """Begin at the first step; an empty run finishes immediately."""
        self._finished = False
        if not self.steps:
            self._position = None
            self._finished = True
            return None
        self._position = 0
        return self.steps[0]

    def advance(self) -> PlaybackStep | None:
        """Move to the next step, finishing after the last one."""
        if self._position is None:
            return None
        if self._position + 1 >= len(self.steps):
            self.stop()
            self._finished = True
            return None
        self._position += 1
        return self.steps[self._position]

    def stop(self) -> None:
        self._position = None
