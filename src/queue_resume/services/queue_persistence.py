"""Save the live queue at shutdown and rebuild it at startup.

`save` is synchronous and best-effort. It runs on the shutdown path, so every
failure is logged and reported through its return value, never raised.

`restore` is a single coroutine. It reads the saved record, resolves the
track ids against the catalog in sequential batches, reconciles the
survivors, and hands the result to the player binding. A failure before the
queue is assigned leaves the player untouched. Binding errors after that
point are logged and reported as an outcome, never raised into startup.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from queue_resume.queue_state import (
    DecodeError,
    EncodeError,
    QueueState,
    delete_state_file,
    read_state_file,
    write_state_file,
)
from queue_resume.runtime_config import normalize_batch_size
from queue_resume.services.catalog import CatalogError, CatalogLookup, CatalogResolver
from queue_resume.services.player_binding import (
    PlayerBinding,
    coerce_repeat_mode,
    coerce_shuffle_mode,
)
from queue_resume.services.reconciler import reconcile
from queue_resume.utils.async_utils import run_blocking

logger = logging.getLogger(__name__)


class RestoreOutcome(Enum):
    NO_STATE = "no_state"
    DECODE_FAILED = "decode_failed"
    EMPTY_STATE = "empty_state"
    CATALOG_FAILED = "catalog_failed"
    NOTHING_RESOLVED = "nothing_resolved"
    PREPARE_FAILED = "prepare_failed"
    SETTINGS_FAILED = "settings_failed"
    RESTORED = "restored"


class QueuePersistenceService:
    """Owns the saved queue file for one player binding and one catalog."""

    def __init__(
        self,
        *,
        binding: PlayerBinding,
        catalog: CatalogLookup,
        state_path: Path,
        batch_size: int | None = None,
    ) -> None:
        self._binding = binding
        self._resolver = CatalogResolver(catalog)
        self._state_path = state_path
        self._batch_size = normalize_batch_size(batch_size)

    @property
    def state_path(self) -> Path:
        return self._state_path

    def has_saved_state(self) -> bool:
        return self._state_path.is_file()

    def capture(self) -> QueueState | None:
        """Snapshot the live queue, or None when it holds no tracks."""
        track_ids: list[str] = []
        current_index: int | None = None
        current_entry_id = self._binding.current_entry_id()
        for entry in self._binding.entries():
            if not entry.is_track or entry.track_id is None:
                logger.debug("Skipping non-track queue entry %s", entry.entry_id)
                continue
            if current_entry_id is not None and entry.entry_id == current_entry_id:
                current_index = len(track_ids)
            track_ids.append(entry.track_id)
        if not track_ids:
            return None
        return QueueState(
            track_ids=tuple(track_ids),
            current_index=current_index,
            playback_time=self._binding.playback_time,
            shuffle_mode=coerce_shuffle_mode(self._binding.shuffle_mode),
            repeat_mode=coerce_repeat_mode(self._binding.repeat_mode),
        )

    def save(self) -> bool:
        """Persist the live queue; returns False if the write failed."""
        try:
            state = self.capture()
        except Exception as exc:
            logger.error("Failed to read live queue for saving: %s", exc)
            return False
        if state is None:
            logger.info("Queue is empty, nothing to save.")
            return self.clear()
        try:
            write_state_file(self._state_path, state)
        except (OSError, EncodeError) as exc:
            logger.error("Failed to save queue state to %s: %s", self._state_path, exc)
            return False
        logger.info("Saved queue state (%d tracks).", len(state.track_ids))
        return True

    def clear(self) -> bool:
        """Remove any saved queue; returns False only on an IO error."""
        try:
            removed = delete_state_file(self._state_path)
        except OSError as exc:
            logger.error(
                "Failed to remove queue state at %s: %s", self._state_path, exc
            )
            return False
        if removed:
            logger.debug("Removed saved queue state at %s", self._state_path)
        return True

    async def restore(self) -> RestoreOutcome:
        """Rebuild the saved queue on the player binding."""
        try:
            state = await run_blocking(read_state_file, self._state_path)
        except (OSError, DecodeError) as exc:
            logger.error("Failed to decode queue state: %s", exc)
            return RestoreOutcome.DECODE_FAILED
        if state is None:
            logger.info("No saved queue state found.")
            return RestoreOutcome.NO_STATE
        if not state.track_ids:
            logger.info("Saved queue state has no tracks.")
            return RestoreOutcome.EMPTY_STATE

        try:
            resolved = await self._resolver.resolve(
                state.track_ids, batch_size=self._batch_size
            )
        except CatalogError as exc:
            logger.error("Failed to fetch saved tracks: %s", exc)
            return RestoreOutcome.CATALOG_FAILED

        queue = reconcile(state.track_ids, resolved, state.current_index)
        if queue.is_empty:
            logger.info("No saved tracks could be restored.")
            return RestoreOutcome.NOTHING_RESOLVED

        try:
            self._binding.set_queue(queue.tracks, current_index=queue.current_index)
            await self._binding.prepare_to_play()
        except Exception as exc:
            # Whatever queue the binding accepted stays; time and modes are skipped.
            logger.error("Failed to prepare player: %s", exc)
            return RestoreOutcome.PREPARE_FAILED

        applied = self._apply_setting(
            "playback time", "playback_time", state.playback_time
        )
        if state.shuffle_mode is not None:
            applied &= self._apply_setting(
                "shuffle mode", "shuffle_mode", state.shuffle_mode
            )
        if state.repeat_mode is not None:
            applied &= self._apply_setting(
                "repeat mode", "repeat_mode", state.repeat_mode
            )

        logger.info(
            "Restored queue state (%d of %d tracks).",
            len(queue.tracks),
            len(state.track_ids),
        )
        if not applied:
            return RestoreOutcome.SETTINGS_FAILED
        return RestoreOutcome.RESTORED

    def _apply_setting(self, label: str, attribute: str, value: object) -> bool:
        try:
            setattr(self._binding, attribute, value)
        except Exception as exc:
            logger.error("Failed to restore %s %r: %s", label, value, exc)
            return False
        return True
