"""Tests for the preferences file (the fast scalar store)."""

from __future__ import annotations

import pytest
import yaml

from storyboard_tui.preferences import (
    Preferences,
    PreferenceStore,
    load_preferences,
)


class TestLoadPreferences:
    def test_first_run_creates_default_file(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        prefs = load_preferences(path)
        assert prefs == Preferences()
        assert path.exists()
        assert yaml.safe_load(path.read_text()) == {
            "active_tab": 0,
            "color_mode": "dark",
            "setup_complete": False,
            "user_name": "",
            "open_storyboards": None,
        }

    def test_reads_values(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("active_tab: 2\ncolor_mode: light\nuser_name: Ada\n")
        prefs = load_preferences(path)
        assert prefs.active_tab == 2
        assert prefs.color_mode == "light"
        assert prefs.user_name == "Ada"
        assert prefs.setup_complete is False

    def test_invalid_values_keep_defaults(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("active_tab: -1\ncolor_mode: purple\nuser_name: Bo\n")
        prefs = load_preferences(path)
        assert prefs.active_tab == 0
        assert prefs.color_mode == "dark"
        assert prefs.user_name == "Bo"

    @pytest.mark.parametrize("text", ["[unclosed", "- a list\n- of things\n"])
    def test_unusable_file_gives_defaults(self, tmp_path, text):
        path = tmp_path / "preferences.yaml"
        path.write_text(text)
        assert load_preferences(path) == Preferences()


class TestPreferenceStore:
    def test_set_then_get(self, tmp_path):
        store = PreferenceStore(tmp_path / "preferences.yaml")
        assert store.set("active_tab", 3) is True
        assert store.set("user_name", 'Zoë "Z" Smith') is True
        assert store.get("active_tab") == 3
        assert store.get("user_name") == 'Zoë "Z" Smith'

    def test_set_preserves_comments_and_other_keys(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        store = PreferenceStore(path)
        store.load()
        store.set("color_mode", "light")
        text = path.read_text()
        assert "# Storyboard TUI Preferences" in text
        assert "# dark or light" in text
        assert 'color_mode: "light"' in text
        assert yaml.safe_load(text)["setup_complete"] is False

    def test_set_replaces_unquoted_value(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("user_name: Ada Lovelace   # greeting\nactive_tab: 1\n")
        store = PreferenceStore(path)
        store.set("user_name", "Grace")
        data = yaml.safe_load(path.read_text())
        assert data == {"user_name": "Grace", "active_tab": 1}
        assert "# greeting" in path.read_text()

    def test_set_appends_missing_key(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        path.write_text("color_mode: dark\n")
        PreferenceStore(path).set("setup_complete", True)
        assert yaml.safe_load(path.read_text()) == {
            "color_mode": "dark",
            "setup_complete": True,
        }

    def test_unknown_key(self, tmp_path):
        store = PreferenceStore(tmp_path / "preferences.yaml")
        with pytest.raises(KeyError):
            store.set("font_size", 12)
        with pytest.raises(KeyError):
            store.get("font_size")

    def test_invalid_value(self, tmp_path):
        store = PreferenceStore(tmp_path / "preferences.yaml")
        with pytest.raises(ValueError):
            store.set("color_mode", "sepia")
        with pytest.raises(ValueError):
            store.set("active_tab", -1)

    def test_unwritable_returns_false(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = PreferenceStore(blocker / "preferences.yaml")
        assert store.set("active_tab", 1) is False

    def test_open_storyboards_round_trip(self, tmp_path):
        path = tmp_path / "preferences.yaml"
        store = PreferenceStore(path)
        store.load()
        assert store.get("open_storyboards") is None
        assert store.set("open_storyboards", [1700000000002, 1700000000001]) is True
        assert store.get("open_storyboards") == [1700000000002, 1700000000001]
        assert "# ids of the open tabs" in path.read_text()
        store.set("open_storyboards", [])
        assert store.get("open_storyboards") == []

    @pytest.mark.parametrize("value", [[0], [-3], ["12"], [True], 5, "1,2"])
    def test_invalid_open_storyboards(self, tmp_path, value):
        store = PreferenceStore(tmp_path / "preferences.yaml")
        with pytest.raises(ValueError):
            store.set("open_storyboards", value)
