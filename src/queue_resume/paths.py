"""Per-user locations for saved queue state and logs."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import AppDirs

DEFAULT_APP_NAME = "queue-resume"
QUEUE_STATE_FILENAME = "queue.json"


@lru_cache(maxsize=4)
def get_app_dirs(app_name: str = DEFAULT_APP_NAME) -> AppDirs:
    """Return platform-specific app directories."""
    return AppDirs(app_name, appauthor=False)


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_dir(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Return the per-user config directory, creating it if needed."""
    return _ensure_dir(Path(get_app_dirs(app_name).user_config_dir))


def log_dir(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Return the per-user log directory, creating it if needed."""
    return _ensure_dir(Path(get_app_dirs(app_name).user_log_dir))


def queue_state_path(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Return the path of the saved queue state file.

    The file may not exist; absence means there is no saved queue.
    """
    return config_dir(app_name) / QUEUE_STATE_FILENAME
