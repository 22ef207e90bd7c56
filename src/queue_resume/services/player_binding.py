"""Player binding contract consumed by `QueuePersistenceService`.

The persistence service never reaches a process-wide player. The host app
passes an object satisfying `PlayerBinding`, which exposes the live queue on
save and accepts the rebuilt queue on restore.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from queue_resume.queue_state import (
    RepeatMode,
    ShuffleMode,
    parse_repeat_mode,
    parse_shuffle_mode,
)
from queue_resume.services.catalog import ResolvedTrack

EntryKind = Literal["track", "other"]


class PreparationError(RuntimeError):
    """Raised by a binding when the newly assigned queue cannot be prepared."""


@dataclass(frozen=True)
class QueueEntry:
    """One live queue slot.

    `entry_id` identifies the slot within the live queue, so the same track
    queued twice still has two distinct entries. `track_id` is the catalog
    identifier and is only set for track entries.
    """

    entry_id: str
    kind: EntryKind
    track_id: str | None = None

    @property
    def is_track(self) -> bool:
        return self.kind == "track" and self.track_id is not None


class PlayerBinding(Protocol):
    """Live player surface read on save and written on restore."""

    def entries(self) -> Sequence[QueueEntry]: ...

    def current_entry_id(self) -> str | None: ...

    @property
    def playback_time(self) -> float: ...

    @playback_time.setter
    def playback_time(self, seconds: float) -> None: ...

    @property
    def shuffle_mode(self) -> Any: ...

    @shuffle_mode.setter
    def shuffle_mode(self, mode: ShuffleMode) -> None: ...

    @property
    def repeat_mode(self) -> Any: ...

    @repeat_mode.setter
    def repeat_mode(self, mode: RepeatMode) -> None: ...

    def set_queue(
        self, tracks: Sequence[ResolvedTrack], *, current_index: int | None = None
    ) -> None: ...

    async def prepare_to_play(self) -> None: ...


def coerce_shuffle_mode(value: Any) -> ShuffleMode | None:
    """Map a live engine shuffle value onto `ShuffleMode`.

    Engines may report their own sentinel or vendor values; anything that is
    not a known mode becomes None rather than an error.
    """
    if isinstance(value, ShuffleMode):
        return value
    return parse_shuffle_mode(getattr(value, "value", value))


def coerce_repeat_mode(value: Any) -> RepeatMode | None:
    """Map a live engine repeat value onto `RepeatMode`."""
    if isinstance(value, RepeatMode):
        return value
    return parse_repeat_mode(getattr(value, "value", value))
