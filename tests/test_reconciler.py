"""Tests for restore-time queue reconciliation."""

from __future__ import annotations

import pytest

from queue_resume.services.reconciler import ReconciledQueue, reconcile, rotate


def _resolved(*track_ids: str) -> dict[str, str]:
    return {tid: f"track:{tid}" for tid in track_ids}


def _ids(queue: ReconciledQueue[str]) -> list[str]:
    return [track.removeprefix("track:") for track in queue.tracks]


def test_all_resolved_rotates_current_to_front() -> None:
    queue = reconcile(["A", "B", "C", "D"], _resolved("A", "B", "C", "D"), 2)
    assert _ids(queue) == ["C", "D", "A", "B"]
    assert queue.current_index == 0


def test_missing_track_before_current_shifts_index() -> None:
    queue = reconcile(["A", "B", "C", "D"], _resolved("A", "C", "D"), 2)
    assert _ids(queue) == ["C", "D", "A"]
    assert queue.current_index == 0


def test_missing_track_after_current_does_not_shift() -> None:
    queue = reconcile(["A", "B", "C", "D"], _resolved("A", "B", "C"), 1)
    assert _ids(queue) == ["B", "C", "A"]
    assert queue.current_index == 0


def test_current_zero_keeps_order_and_index() -> None:
    queue = reconcile(["A", "B", "C"], _resolved("A", "B", "C"), 0)
    assert _ids(queue) == ["A", "B", "C"]
    assert queue.current_index == 0


def test_no_current_index_keeps_relative_order() -> None:
    queue = reconcile(["A", "B", "C", "D"], _resolved("A", "C", "D"), None)
    assert _ids(queue) == ["A", "C", "D"]
    assert queue.current_index is None


def test_nothing_resolved_yields_empty_queue() -> None:
    queue = reconcile(["A", "B"], {}, 1)
    assert queue.is_empty
    assert queue.current_index is None


def test_missing_current_track_lands_on_next_survivor_by_arithmetic() -> None:
    # C (index 2) is gone; nothing before it was skipped, so index 2 now
    # points at D in the survivor list.
    queue = reconcile(["A", "B", "C", "D"], _resolved("A", "B", "D"), 2)
    assert _ids(queue) == ["D", "A", "B"]
    assert queue.current_index == 0


def test_missing_last_current_track_falls_out_of_range() -> None:
    queue = reconcile(["A", "B", "C"], _resolved("A", "B"), 2)
    assert _ids(queue) == ["A", "B"]
    assert queue.current_index is None


def test_out_of_range_saved_index_is_discarded() -> None:
    queue = reconcile(["A", "B"], _resolved("A", "B"), 7)
    assert _ids(queue) == ["A", "B"]
    assert queue.current_index is None


def test_negative_saved_index_is_discarded() -> None:
    queue = reconcile(["A", "B"], _resolved("A", "B"), -1)
    assert _ids(queue) == ["A", "B"]
    assert queue.current_index is None


def test_duplicate_ids_each_survive() -> None:
    queue = reconcile(["A", "B", "A"], _resolved("A", "B"), 1)
    assert _ids(queue) == ["B", "A", "A"]


def test_rotate_helper() -> None:
    assert rotate([1, 2, 3, 4], 1) == [2, 3, 4, 1]
    assert rotate([1, 2, 3], 0) == [1, 2, 3]
    assert rotate([], 0) == []
    with pytest.raises(IndexError):
        rotate([1, 2], 2)
