"""Tests for data-directory resolution."""

from __future__ import annotations

from pathlib import Path

from storyboard_tui.constants import DEFAULT_HOME, storyboard_home


class TestStoryboardHome:
    def test_override_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORYBOARD_HOME", "/elsewhere")
        assert storyboard_home(tmp_path) == tmp_path

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("STORYBOARD_HOME", "/srv/boards")
        assert storyboard_home() == Path("/srv/boards")

    def test_default(self, monkeypatch):
        monkeypatch.delenv("STORYBOARD_HOME", raising=False)
        assert storyboard_home() == DEFAULT_HOME
        assert DEFAULT_HOME.name == ".storyboard"
