"""JSON persistence for the playback queue saved at shutdown.

Decoding is strict about the track list, the one field a restore cannot do
without. Everything else degrades to a safe default, so an older or
hand-edited file still restores as much as it can.
"""

from __future__ import annotations

import json
import logging
import math
import time
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any
from uuid import uuid4

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class EncodeError(ValueError):
    """Raised when a queue state cannot be represented in the file format."""


class DecodeError(ValueError):
    """Raised when saved bytes are not a usable queue state record."""


class ShuffleMode(Enum):
    OFF = "off"
    SONGS = "songs"


class RepeatMode(Enum):
    NONE = "none"
    ONE = "one"
    ALL = "all"


@dataclass(frozen=True)
class QueueState:
    """Snapshot of the live queue captured on save and consumed on restore."""

    track_ids: tuple[str, ...]
    current_index: int | None = None
    playback_time: float = 0.0
    shuffle_mode: ShuffleMode | None = None
    repeat_mode: RepeatMode | None = None


def encode(state: QueueState) -> bytes:
    """Serialize `state` to pretty-printed UTF-8 JSON."""
    if not all(isinstance(track_id, str) for track_id in state.track_ids):
        raise EncodeError("track identifiers must be strings")
    if isinstance(state.current_index, bool) or not (
        state.current_index is None or isinstance(state.current_index, int)
    ):
        raise EncodeError(f"invalid current index: {state.current_index!r}")
    try:
        playback_time = float(state.playback_time)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"invalid playback time: {state.playback_time!r}") from exc
    if not math.isfinite(playback_time):
        raise EncodeError(f"playback time is not finite: {playback_time!r}")

    payload = {
        "version": FORMAT_VERSION,
        "songIDs": list(state.track_ids),
        "currentIndex": state.current_index,
        "playbackTime": playback_time,
        "shuffleMode": state.shuffle_mode.value if state.shuffle_mode else None,
        "repeatMode": state.repeat_mode.value if state.repeat_mode else None,
    }
    return json.dumps(payload, indent=2, sort_keys=True).encode("utf-8")


def decode(data: bytes) -> QueueState:
    """Parse a saved record; unknown keys are ignored."""
    try:
        raw = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DecodeError("queue state is not valid UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise DecodeError(f"queue state is invalid JSON: {exc.msg}") from exc
    if not isinstance(raw, dict):
        raise DecodeError("queue state is not a JSON object")
    return _coerce_state(raw)


def _coerce_state(data: dict[str, Any]) -> QueueState:
    version = data.get("version", FORMAT_VERSION)
    if isinstance(version, int) and not isinstance(version, bool):
        if version > FORMAT_VERSION:
            raise DecodeError(
                f"queue state version {version} is newer than supported "
                f"version {FORMAT_VERSION}"
            )

    song_ids = data.get("songIDs")
    if not isinstance(song_ids, list) or not all(
        isinstance(value, str) for value in song_ids
    ):
        raise DecodeError("queue state has no valid songIDs list")

    def _int_or_none(value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        return value if isinstance(value, int) else None

    def _seconds(value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0.0
        normalized = float(value)
        return normalized if math.isfinite(normalized) else 0.0

    return QueueState(
        track_ids=tuple(song_ids),
        current_index=_int_or_none(data.get("currentIndex")),
        playback_time=_seconds(data.get("playbackTime")),
        shuffle_mode=parse_shuffle_mode(data.get("shuffleMode")),
        repeat_mode=parse_repeat_mode(data.get("repeatMode")),
    )


def parse_shuffle_mode(value: Any) -> ShuffleMode | None:
    """Map a stored mode string to `ShuffleMode`, or None if unrecognized."""
    if not isinstance(value, str):
        return None
    try:
        return ShuffleMode(value)
    except ValueError:
        logger.debug("Ignoring unknown shuffle mode %r", value)
        return None


def parse_repeat_mode(value: Any) -> RepeatMode | None:
    """Map a stored mode string to `RepeatMode`, or None if unrecognized."""
    if not isinstance(value, str):
        return None
    try:
        return RepeatMode(value)
    except ValueError:
        logger.debug("Ignoring unknown repeat mode %r", value)
        return None


def read_state_file(path: Path) -> QueueState | None:
    """Load a saved queue, or None when no file exists.

    Raises `DecodeError` for a malformed file and `OSError` when it exists
    but cannot be read.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        return None
    return decode(data)


def write_state_file(path: Path, state: QueueState) -> None:
    """Persist state atomically to disk via write-then-replace."""
    payload = encode(state)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.{uuid4().hex}.tmp")
    delay_s = 0.02
    try:
        for attempt in range(4):
            tmp_path.write_bytes(payload)
            try:
                tmp_path.replace(path)
                return
            except OSError as exc:
                if not _is_retryable_replace_error(exc) or attempt >= 3:
                    raise
                time.sleep(delay_s)
                delay_s = min(0.25, delay_s * 2.0)
    finally:
        with suppress(OSError):
            tmp_path.unlink()


def delete_state_file(path: Path) -> bool:
    """Remove a saved queue; returns whether a file was actually removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def _is_retryable_replace_error(exc: OSError) -> bool:
    """Return whether an atomic replace failure is likely transient on Windows."""
    if getattr(exc, "winerror", None) in {32, 5, 2}:
        return True
    if getattr(exc, "errno", None) in {13, 16}:
        return True
    text = str(exc).lower()
    return "used by another process" in text or "permission denied" in text
