"""Rebuild a playable queue from saved identifiers and catalog results.

Saved tracks that the catalog no longer returns are dropped. The saved
current index is shifted left by the number of dropped entries that came
before it. The surviving list is then rotated so that the current track
plays first.

When the saved current track itself was dropped, the shifted index is used
as computed. It may land on a neighbouring survivor or fall out of range, in
which case no track is marked current.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ReconciledQueue(Generic[T]):
    """Restore-ready queue: rotated tracks and the current position, if any."""

    tracks: tuple[T, ...] = ()
    current_index: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.tracks


def rotate(items: Sequence[T], index: int) -> list[T]:
    """Return `items` reordered so that `items[index]` comes first."""
    if not items:
        return []
    if not 0 <= index < len(items):
        raise IndexError(f"rotation index {index} out of range for {len(items)}")
    return list(items[index:]) + list(items[:index])


def reconcile(
    saved_ids: Sequence[str],
    resolved: Mapping[str, T],
    saved_current_index: int | None,
) -> ReconciledQueue[T]:
    survivors: list[T] = []
    skipped_before_current = 0
    for position, track_id in enumerate(saved_ids):
        track = resolved.get(track_id)
        if track is not None:
            survivors.append(track)
            continue
        logger.debug("Track %s no longer available, skipping", track_id)
        if saved_current_index is not None and position < saved_current_index:
            skipped_before_current += 1

    if not survivors:
        return ReconciledQueue()

    current: int | None = None
    if saved_current_index is not None:
        current = saved_current_index - skipped_before_current
        if not 0 <= current < len(survivors):
            current = None

    if current is None:
        return ReconciledQueue(tracks=tuple(survivors))
    return ReconciledQueue(tracks=tuple(rotate(survivors, current)), current_index=0)
