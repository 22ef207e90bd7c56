"""Test configuration."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import queue_resume.paths as paths  # noqa: E402
import queue_resume.services.queue_persistence as queue_persistence_module  # noqa: E402


class FakeAppDirs:
    """AppDirs stand-in that roots every per-user directory under tmp_path."""

    def __init__(self, root: Path) -> None:
        self.user_config_dir = str(root / "config")
        self.user_log_dir = str(root / "logs")


@pytest.fixture(autouse=True)
def run_blocking_inline(monkeypatch: pytest.MonkeyPatch):
    """Run blocking adapters inline in tests to avoid thread hangs in CI/sandbox."""

    async def _inline(func, /, *args, **kwargs):
        return func(*args, **kwargs)

    monkeypatch.setattr(queue_persistence_module, "run_blocking", _inline)


@pytest.fixture
def app_dirs(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point platformdirs lookups at a test-local root."""

    def fake_app_dirs(app_name: str, appauthor: bool | None = None) -> FakeAppDirs:
        del app_name, appauthor
        return FakeAppDirs(tmp_path)

    monkeypatch.setattr(paths, "AppDirs", fake_app_dirs)
    paths.get_app_dirs.cache_clear()
    yield tmp_path
    paths.get_app_dirs.cache_clear()
