"""Tests for the queue-resume command line."""

from __future__ import annotations

from pathlib import Path

import pytest

import queue_resume.cli as cli_module
from queue_resume.queue_state import QueueState, ShuffleMode, write_state_file
from queue_resume.version import __version__


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch, tmp_path):
    captured: dict[str, object] = {}

    def fake_setup_logging(*, log_dir: Path, level: str, log_file: Path | None):
        captured["log_dir"] = log_dir
        captured["level"] = level
        captured["log_file"] = log_file

    monkeypatch.setattr(cli_module, "setup_logging", fake_setup_logging)
    monkeypatch.setattr(cli_module, "log_dir", lambda: tmp_path / "logs")
    return captured


def test_help_includes_version_epilog() -> None:
    help_text = cli_module.build_parser().format_help()
    assert "Platform: " in help_text
    assert f"Version: {__version__}" in help_text


def test_main_passes_effective_level_and_log_file(no_logging_setup, tmp_path) -> None:
    state_file = tmp_path / "queue.json"
    rc = cli_module.main(
        [
            "--verbose",
            "--log-file",
            str(tmp_path / "cli.log"),
            "--state-file",
            str(state_file),
        ]
    )
    assert rc == 0
    assert no_logging_setup["level"] == "DEBUG"
    assert no_logging_setup["log_file"] == tmp_path / "cli.log"


def test_show_uses_default_state_path(app_dirs, capsys) -> None:
    write_state_file(
        app_dirs / "config" / "queue.json",
        QueueState(
            track_ids=("first-id", "second-id"),
            current_index=1,
            playback_time=3.0,
            shuffle_mode=ShuffleMode.SONGS,
        ),
    )

    rc = cli_module.main(["show"])
    out = capsys.readouterr().out

    assert rc == 0
    assert "first-id" in out
    assert "second-id" in out
    assert "shuffle songs" in out


def test_show_reports_missing_state(tmp_path, capsys) -> None:
    rc = cli_module.main(["--state-file", str(tmp_path / "none.json"), "show"])
    assert rc == 0
    assert "No saved queue" in capsys.readouterr().out


def test_show_reports_corrupt_state(tmp_path, capsys) -> None:
    path = tmp_path / "queue.json"
    path.write_text("{oops", encoding="utf-8")
    rc = cli_module.main(["--state-file", str(path), "show"])
    assert rc == 1
    assert "Cannot read saved queue" in capsys.readouterr().out


def test_clear_removes_state(tmp_path, capsys) -> None:
    path = tmp_path / "queue.json"
    write_state_file(path, QueueState(track_ids=("a",)))

    assert cli_module.main(["--state-file", str(path), "clear"]) == 0
    assert not path.exists()
    assert "Removed" in capsys.readouterr().out

    assert cli_module.main(["--state-file", str(path), "clear"]) == 0
    assert "No saved queue" in capsys.readouterr().out


def test_demo_restores_rotated_queue(tmp_path, capsys) -> None:
    path = tmp_path / "queue.json"
    rc = cli_module.main(
        [
            "--state-file",
            str(path),
            "demo",
            "--tracks",
            "4",
            "--current",
            "2",
            "--missing",
            "1",
            "--batch-size",
            "2",
        ]
    )
    out = capsys.readouterr().out

    assert rc == 0
    assert "restored" in out
    assert "Catalog batches: 2" in out
    assert "track-002, track-003, track-000" in out


def test_demo_rejects_out_of_range_current(tmp_path) -> None:
    state_file = str(tmp_path / "q.json")
    rc = cli_module.main(
        ["--state-file", state_file, "demo", "--tracks", "2", "--current", "5"]
    )
    assert rc == 2


def test_version_flag_matches_help_epilog(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"queue-resume {__version__}"
    assert cli_module.__version__ == __version__
