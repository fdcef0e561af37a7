"""Tests for persistence stores.

Each store is tested for:
  1. reads of a non-existent file or directory return the empty default
  2. a write then a read round-trips
  3. corrupt files are skipped (graceful degradation)
  4. store-specific features
"""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest

from storyboard_tui.persistence import StoryboardRecord, StoryboardStore
from storyboard_tui.persistence._base import JsonStore


# ---------------------------------------------------------------------------
# Base JsonStore
# ---------------------------------------------------------------------------


class TestJsonStore:
    def test_load_raw_nonexistent(self, tmp_path):
        store = JsonStore(tmp_path / "nope.json")
        assert store.load_raw() == {}

    def test_save_and_load_raw(self, tmp_path):
        store = JsonStore(tmp_path / "data.json")
        store.save_raw({"key": "välue"})
        assert store.load_raw() == {"key": "välue"}

    def test_load_raw_corrupt_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not valid json{{{")
        assert JsonStore(path).load_raw() == {}

    def test_save_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "a" / "b" / "data.json"
        JsonStore(path).save_raw([1, 2])
        assert json.loads(path.read_text()) == [1, 2]

    def test_save_keeps_key_order(self, tmp_path):
        path = tmp_path / "data.json"
        JsonStore(path).save_raw({"name": "Board", "pages": [{"id": 1, "audio": ""}]})
        text = path.read_text()
        assert text.index('"name"') < text.index('"pages"')
        assert text.index('"id"') < text.index('"audio"')
        assert text.startswith('{\n  "name"')

    def test_non_json_value_raises(self, tmp_path):
        store = JsonStore(tmp_path / "data.json")
        with pytest.raises(TypeError):
            store.save_raw({"when": object()})
        assert not store.path.exists()

    def test_failed_save_keeps_old_file(self, tmp_path):
        path = tmp_path / "data.json"
        store = JsonStore(path)
        store.save_raw({"v": 1})
        with patch("storyboard_tui.persistence._base.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                store.save_raw({"v": 2})
        assert store.load_raw() == {"v": 1}
        assert os.listdir(tmp_path) == ["data.json"]

    def test_delete(self, tmp_path):
        store = JsonStore(tmp_path / "data.json")
        store.save_raw({})
        store.delete()
        store.delete()
        assert not store.path.exists()


# ---------------------------------------------------------------------------
# StoryboardStore
# ---------------------------------------------------------------------------


class TestStoryboardStore:
    def test_get_all_missing_directory(self, tmp_path):
        assert StoryboardStore(tmp_path / "storyboards").get_all() == []

    def test_put_and_get(self, tmp_path, storyboard):
        store = StoryboardStore(tmp_path)
        record = StoryboardRecord.capture(storyboard)
        store.put(record)
        assert store.get(storyboard.id) == record
        data = json.loads((tmp_path / f"{storyboard.id}.json").read_text())
        assert set(data) == {"name", "pages"}

    def test_get_missing(self, tmp_path):
        assert StoryboardStore(tmp_path).get(5) is None

    def test_get_all_sorted_by_id(self, tmp_path, make_pages):
        store = StoryboardStore(tmp_path)
        for record_id in (30, 10, 20):
            store.put(StoryboardRecord(record_id, f"SB {record_id}", make_pages(1)))
        assert [record.id for record in store.get_all()] == [10, 20, 30]

    def test_corrupt_records_skipped(self, tmp_path, make_pages):
        store = StoryboardStore(tmp_path)
        store.put(StoryboardRecord(1, "Good", make_pages(1)))
        (tmp_path / "2.json").write_text("{broken")
        (tmp_path / "3.json").write_text('{"name": "No pages"}')
        (tmp_path / "4.json").write_text('{"name": "Bad page", "pages": ["x"]}')
        (tmp_path / "notes.json").write_text('{"name": "x", "pages": []}')
        assert [record.name for record in store.get_all()] == ["Good"]

    def test_delete(self, tmp_path, make_pages):
        store = StoryboardStore(tmp_path)
        store.put(StoryboardRecord(1, "Gone", make_pages(1)))
        store.delete(1)
        store.delete(1)
        assert store.get_all() == []

    def test_restore_has_empty_history(self, storyboard):
        storyboard.add_page()
        restored = StoryboardRecord.capture(storyboard).restore()
        assert restored.id == storyboard.id
        assert restored.pages == storyboard.pages
        assert not restored.history.can_undo
