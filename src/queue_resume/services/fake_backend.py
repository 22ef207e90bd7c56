"""In-memory player binding and catalog for deterministic testing."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from queue_resume.queue_state import RepeatMode, ShuffleMode
from queue_resume.services.catalog import ResolvedTrack
from queue_resume.services.player_binding import PreparationError, QueueEntry


@dataclass(frozen=True)
class CatalogTrack:
    """Minimal catalog entity returned by `InMemoryCatalog`."""

    track_id: str
    title: str = ""
    artist: str = ""
    duration_s: float = 180.0


class InMemoryCatalog:
    """Catalog double that serves lookups from a fixed track table.

    Every call is recorded in `calls`. `fail_on_call` makes the given 1-based
    call raise, which simulates a network error partway through a restore.
    """

    def __init__(
        self,
        tracks: Iterable[CatalogTrack] = (),
        *,
        fail_on_call: int | None = None,
        latency_s: float = 0.0,
    ) -> None:
        self._tracks = {track.track_id: track for track in tracks}
        self._fail_on_call = fail_on_call
        self._latency_s = latency_s
        self.calls: list[list[str]] = []

    async def lookup(self, track_ids: Sequence[str]) -> list[CatalogTrack]:
        self.calls.append(list(track_ids))
        if self._latency_s > 0:
            await asyncio.sleep(self._latency_s)
        if self._fail_on_call is not None and len(self.calls) == self._fail_on_call:
            raise ConnectionError("catalog unavailable")
        return [self._tracks[tid] for tid in track_ids if tid in self._tracks]


@dataclass
class _BindingState:
    entries: list[QueueEntry] = field(default_factory=list)
    current_entry_id: str | None = None
    playback_time: float = 0.0
    shuffle_mode: Any = ShuffleMode.OFF
    repeat_mode: Any = RepeatMode.NONE
    prepared: bool = False


class FakePlayerBinding:
    """Player binding that keeps its queue in memory and records assignments."""

    def __init__(
        self,
        entries: Iterable[QueueEntry] = (),
        *,
        current_entry_id: str | None = None,
        playback_time: float = 0.0,
        shuffle_mode: Any = ShuffleMode.OFF,
        repeat_mode: Any = RepeatMode.NONE,
        fail_prepare: bool = False,
    ) -> None:
        self._state = _BindingState(
            entries=list(entries),
            current_entry_id=current_entry_id,
            playback_time=playback_time,
            shuffle_mode=shuffle_mode,
            repeat_mode=repeat_mode,
        )
        self._fail_prepare = fail_prepare
        self.assigned_queues: list[list[ResolvedTrack]] = []

    @classmethod
    def with_tracks(
        cls,
        track_ids: Sequence[str],
        *,
        current: int | None = None,
        **kwargs: Any,
    ) -> FakePlayerBinding:
        """Build a binding whose queue holds one track entry per identifier."""
        entries = [
            QueueEntry(entry_id=f"entry-{index}", kind="track", track_id=track_id)
            for index, track_id in enumerate(track_ids)
        ]
        current_entry_id = entries[current].entry_id if current is not None else None
        return cls(entries, current_entry_id=current_entry_id, **kwargs)

    def entries(self) -> list[QueueEntry]:
        return list(self._state.entries)

    def current_entry_id(self) -> str | None:
        return self._state.current_entry_id

    @property
    def playback_time(self) -> float:
        return self._state.playback_time

    @playback_time.setter
    def playback_time(self, seconds: float) -> None:
        self._state.playback_time = max(0.0, float(seconds))

    @property
    def shuffle_mode(self) -> Any:
        return self._state.shuffle_mode

    @shuffle_mode.setter
    def shuffle_mode(self, mode: ShuffleMode) -> None:
        self._state.shuffle_mode = mode

    @property
    def repeat_mode(self) -> Any:
        return self._state.repeat_mode

    @repeat_mode.setter
    def repeat_mode(self, mode: RepeatMode) -> None:
        self._state.repeat_mode = mode

    @property
    def prepared(self) -> bool:
        return self._state.prepared

    def set_queue(
        self, tracks: Sequence[ResolvedTrack], *, current_index: int | None = None
    ) -> None:
        assigned = list(tracks)
        self.assigned_queues.append(assigned)
        self._state.entries = [
            QueueEntry(entry_id=f"entry-{index}", kind="track", track_id=track.track_id)
            for index, track in enumerate(assigned)
        ]
        self._state.current_entry_id = (
            self._state.entries[current_index].entry_id
            if current_index is not None and 0 <= current_index < len(assigned)
            else None
        )
        self._state.playback_time = 0.0
        self._state.prepared = False

    async def prepare_to_play(self) -> None:
        await asyncio.sleep(0)
        if self._fail_prepare:
            raise PreparationError("player could not prepare the queue")
        self._state.prepared = True
