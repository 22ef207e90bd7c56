"""Batched catalog resolution of saved track identifiers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, TypeVar

from queue_resume.runtime_config import DEFAULT_CATALOG_BATCH_SIZE

logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    """Raised when any catalog batch lookup fails."""


class ResolvedTrack(Protocol):
    """Catalog entity; only its identifier is relied on here."""

    @property
    def track_id(self) -> str: ...


TrackT = TypeVar("TrackT", bound=ResolvedTrack)


class CatalogLookup(Protocol[TrackT]):
    """Async batch lookup primitive provided by the host app."""

    async def lookup(self, track_ids: Sequence[str]) -> Sequence[TrackT]: ...


def chunked(items: Sequence[str], size: int) -> list[list[str]]:
    """Split `items` into consecutive chunks of at most `size`, keeping order."""
    if size < 1:
        raise ValueError("size must be >= 1")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


class CatalogResolver:
    """Resolves identifiers to catalog tracks, one bounded batch at a time."""

    def __init__(self, lookup: CatalogLookup[TrackT]) -> None:
        self._lookup = lookup

    async def resolve(
        self,
        track_ids: Sequence[str],
        batch_size: int = DEFAULT_CATALOG_BATCH_SIZE,
    ) -> dict[str, ResolvedTrack]:
        """Return `{track_id: track}` for every identifier the catalog knows.

        Identifiers the catalog does not return are simply absent. Batches
        are awaited strictly in sequence. If any batch fails, the whole call
        raises `CatalogError` and earlier batch results are dropped.
        """
        batches = chunked(track_ids, batch_size)
        logger.debug(
            "Resolving %d track ids in %d batch(es) of up to %d",
            len(track_ids),
            len(batches),
            batch_size,
        )
        resolved: dict[str, ResolvedTrack] = {}
        for number, batch in enumerate(batches, start=1):
            try:
                tracks = await self._lookup.lookup(batch)
                # A malformed response fails the batch like a failed call.
                resolved.update({track.track_id: track for track in tracks})
            except Exception as exc:
                raise CatalogError(
                    f"catalog lookup failed on batch {number}/{len(batches)}: {exc}"
                ) from exc
        return resolved
