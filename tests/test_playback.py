"""Tests for playback planning."""

from __future__ import annotations

import pytest

from storyboard_tui.core.pages import Page
from storyboard_tui.core.playback import (
    PlaybackCursor,
    audio_queue,
    page_duration,
    slideshow,
)


@pytest.mark.parametrize(
    ("timestamp", "expected"),
    [
        ("3", 3.0),
        ("2.5s", 2.5),
        (" 4 seconds", 4.0),
        ("", 5.0),
        ("0:30", 5.0),
        ("dawn", 5.0),
        ("-2", 5.0),
    ],
)
def test_page_duration(timestamp, expected):
    page = Page(id=1, page_number=1, timestamp=timestamp)
    assert page_duration(page) == expected


class TestPlans:
    def test_slideshow_covers_every_page(self, storyboard):
        steps = slideshow(storyboard.pages)
        assert [step.index for step in steps] == [0, 1, 2]
        assert [step.duration for step in steps] == [5.0, 2.5, 5.0]

    def test_audio_queue_only_pages_with_audio(self, storyboard):
        steps = audio_queue(storyboard.pages)
        assert [step.index for step in steps] == [2]
        assert steps[0].page.id == 3

    def test_empty(self):
        assert slideshow(()) == []
        assert audio_queue(()) == []


class TestPlaybackCursor:
    def test_walks_all_steps(self, storyboard):
        cursor = PlaybackCursor(slideshow(storyboard.pages))
        assert cursor.current is None
        assert cursor.start().index == 0
        assert cursor.advance().index == 1
        assert cursor.advance().index == 2
        assert cursor.running
        assert cursor.advance() is None
        assert cursor.finished
        assert not cursor.running

    def test_stop_is_not_finished(self, storyboard):
        cursor = PlaybackCursor(slideshow(storyboard.pages))
        cursor.start()
        cursor.stop()
        assert cursor.current is None
        assert not cursor.finished
        assert cursor.advance() is None

    def test_empty_run_finishes_at_start(self):
        cursor = PlaybackCursor([])
        assert cursor.start() is None
        assert cursor.finished
