"""
Tests for interval set operations.
"""

import pendulum
import pytest

from meetcal.domain.interval_algebra import (
    covered_by,
    intersect,
    merge_overlapping,
    overlaps,
    sort_intervals,
    subtract,
    subtract_all,
)
from meetcal.domain.models import AvailableInterval, TimeInterval


def _iv(start: str, end: str) -> TimeInterval:
    return TimeInterval(
        start=pendulum.parse(f"2024-01-01 {start}", tz="UTC"),
        end=pendulum.parse(f"2024-01-01 {end}", tz="UTC"),
    )


class TestTimeInterval:
    """Tests for the TimeInterval value type."""

    def test_rejects_start_after_end(self):
        with pytest.raises(ValueError):
            _iv("12:00", "11:00")

    def test_allows_empty_interval(self):
        interval = _iv("12:00", "12:00")
        assert interval.duration_minutes() == 0

    def test_duration(self):
        assert _iv("09:00", "10:30").duration_minutes() == 90
        assert _iv("09:00", "10:30").duration_seconds() == 5400

    def test_available_interval_keeps_annotations_when_rebounded(self):
        interval = AvailableInterval(
            start=pendulum.datetime(2024, 1, 1, 9, tz="UTC"),
            end=pendulum.datetime(2024, 1, 1, 12, tz="UTC"),
            durations=frozenset({30}),
            tables=("t1",),
        )

        moved = interval.with_bounds(interval.start, pendulum.datetime(2024, 1, 1, 10, tz="UTC"))

        assert moved.durations == frozenset({30})
        assert moved.tables == ("t1",)
        assert moved.duration_minutes() == 60


class TestOverlapAndIntersect:
    """Tests for overlaps/intersect."""

    def test_touching_intervals_do_not_overlap(self):
        assert not overlaps(_iv("09:00", "10:00"), _iv("10:00", "11:00"))
        assert intersect(_iv("09:00", "10:00"), _iv("10:00", "11:00")) is None

    def test_partial_overlap(self):
        a = _iv("09:00", "11:00")
        b = _iv("10:00", "12:00")

        assert overlaps(a, b)
        assert overlaps(b, a)
        assert intersect(a, b) == _iv("10:00", "11:00")

    def test_containment(self):
        assert intersect(_iv("09:00", "17:00"), _iv("10:00", "11:00")) == _iv("10:00", "11:00")


class TestSubtract:
    """Tests for subtract/subtract_all."""

    def test_interior_splits_in_two(self):
        assert subtract(_iv("09:00", "17:00"), _iv("10:00", "11:00")) == [
            _iv("09:00", "10:00"),
            _iv("11:00", "17:00"),
        ]

    def test_no_overlap_returns_original(self):
        assert subtract(_iv("09:00", "10:00"), _iv("10:00", "11:00")) == [_iv("09:00", "10:00")]

    def test_full_cover_returns_nothing(self):
        assert subtract(_iv("10:00", "11:00"), _iv("09:00", "12:00")) == []

    def test_edge_cover_truncates(self):
        assert subtract(_iv("09:00", "12:00"), _iv("11:00", "13:00")) == [_iv("09:00", "11:00")]
        assert subtract(_iv("09:00", "12:00"), _iv("08:00", "10:00")) == [_iv("10:00", "12:00")]

    def test_subtract_all(self):
        remaining = subtract_all(
            _iv("08:00", "18:00"),
            [_iv("12:00", "13:00"), _iv("09:00", "10:00"), _iv("17:00", "19:00")],
        )

        assert remaining == [
            _iv("08:00", "09:00"),
            _iv("10:00", "12:00"),
            _iv("13:00", "17:00"),
        ]

    def test_subtract_returns_plain_intervals(self):
        interval = AvailableInterval(start=_iv("09:00", "10:00").start, end=_iv("09:00", "10:00").end)

        parts = subtract(interval, _iv("12:00", "13:00"))

        assert type(parts[0]) is TimeInterval


class TestMergeAndSort:
    """Tests for ordering and union."""

    def test_sort_breaks_ties_by_end(self):
        result = sort_intervals([_iv("09:00", "12:00"), _iv("08:00", "09:00"), _iv("09:00", "10:00")])

        assert result == [_iv("08:00", "09:00"), _iv("09:00", "10:00"), _iv("09:00", "12:00")]

    def test_merge_overlapping_keeps_touching_separate(self):
        merged = merge_overlapping([_iv("10:00", "12:00"), _iv("12:00", "13:00"), _iv("09:00", "11:00")])

        assert merged == [_iv("09:00", "12:00"), _iv("12:00", "13:00")]

    def test_merge_contained(self):
        assert merge_overlapping([_iv("09:00", "17:00"), _iv("10:00", "11:00")]) == [_iv("09:00", "17:00")]

    def test_merge_empty(self):
        assert merge_overlapping([]) == []

    def test_covered_by(self):
        pieces = covered_by([_iv("07:00", "09:30"), _iv("11:00", "20:00")], _iv("09:00", "12:00"))

        assert pieces == [_iv("09:00", "09:30"), _iv("11:00", "12:00")]


class TestAlgebraProperties:
    """Properties that must hold for any input."""

    CASES = [
        (_iv("09:00", "17:00"), _iv("10:00", "11:00")),
        (_iv("09:00", "17:00"), _iv("08:00", "10:00")),
        (_iv("09:00", "17:00"), _iv("16:00", "18:00")),
        (_iv("09:00", "17:00"), _iv("08:00", "18:00")),
        (_iv("09:00", "17:00"), _iv("17:00", "18:00")),
        (_iv("09:00", "17:00"), _iv("09:00", "17:00")),
    ]

    @pytest.mark.parametrize("a,b", CASES)
    def test_subtract_and_intersect_rebuild_the_interval(self, a, b):
        pieces = subtract(a, b)
        common = intersect(a, b)
        if common is not None:
            pieces.append(common)

        pieces = sort_intervals(pieces)

        assert pieces[0].start == a.start
        assert pieces[-1].end == a.end
        for left, right in zip(pieces, pieces[1:]):
            assert left.end == right.start

    def test_merge_is_idempotent(self):
        intervals = [
            _iv("09:00", "11:00"),
            _iv("10:00", "12:00"),
            _iv("12:00", "13:00"),
            _iv("14:00", "15:00"),
            _iv("14:30", "14:45"),
        ]

        once = merge_overlapping(intervals)

        assert merge_overlapping(once) == once


def test_merge_can_join_touching_intervals():
    merged = merge_overlapping(
        [_iv("12:00", "13:00"), _iv("10:00", "12:00"), _iv("14:00", "15:00")],
        join_touching=True,
    )

    assert merged == [_iv("10:00", "13:00"), _iv("14:00", "15:00")]
