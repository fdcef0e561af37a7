"""Tests for the __main__ entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from storyboard_tui.__main__ import build_parser, main


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.data_dir is None
        assert args.import_path is None
        assert args.debug is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "storyboard-tui 0.1.0" in capsys.readouterr().out


class TestMain:
    def test_runs_app_with_data_dir(self, tmp_path):
        with patch("storyboard_tui.app.run_app") as run_app:
            main(["--data-dir", str(tmp_path)])
        run_app.assert_called_once_with(data_dir=tmp_path, import_path=None)
        assert (tmp_path / "storyboard-tui.log").exists()

    def test_environment_data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORYBOARD_HOME", str(tmp_path))
        with patch("storyboard_tui.app.run_app") as run_app:
            main([])
        assert run_app.call_args.kwargs["data_dir"] == tmp_path

    def test_passes_import_file(self, tmp_path):
        board = tmp_path / "board.json"
        board.write_text('{"name": "A", "pages": []}')
        with patch("storyboard_tui.app.run_app") as run_app:
            main(["--data-dir", str(tmp_path), "--import", str(board)])
        assert run_app.call_args.kwargs["import_path"] == board

    def test_missing_import_file_exits(self, tmp_path, capsys):
        with patch("storyboard_tui.app.run_app") as run_app:
            with pytest.raises(SystemExit) as exc_info:
                main(["--data-dir", str(tmp_path), "--import", str(tmp_path / "nope.json")])
        assert exc_info.value.code == 2
        assert "No such storyboard file" in capsys.readouterr().err
        run_app.assert_not_called()

    def test_crash_exits_nonzero(self, tmp_path):
        with patch("storyboard_tui.app.run_app", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                main(["--data-dir", str(tmp_path)])
        assert exc_info.value.code == 1
