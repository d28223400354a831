"""
Tests for merging recurring slots into a calendar.
"""

import pendulum

from meetcal.domain.models import AvailableInterval, CalendarPartition, TimeInterval
from meetcal.domain.partition_merger import PartitionMerger, slot_occurrences
from meetcal.domain.recurring_slots import ResolvedSlot


def _dt(value: str):
    return pendulum.parse(value, tz="UTC")


def _partition(*intervals: AvailableInterval) -> CalendarPartition:
    return CalendarPartition(
        query_start=_dt("2024-01-01T00:00:00Z"),
        query_end=_dt("2024-01-10T00:00:00Z"),
        available=list(intervals),
    )


def _available(start: str, end: str, **kwargs) -> AvailableInterval:
    return AvailableInterval(start=_dt(start), end=_dt(end), **kwargs)


# 2024-01-01 is a Monday
MONDAY_WORKDAY = ResolvedSlot(day=0, start_minute=540, end_minute=1020, durations=frozenset({30, 60}))


class TestSlotOccurrences:
    """Tests for slot_occurrences."""

    def test_occurrences_in_range(self):
        occurrences = slot_occurrences(
            MONDAY_WORKDAY,
            TimeInterval(start=_dt("2024-01-01T00:00:00Z"), end=_dt("2024-01-09T00:00:00Z")),
        )

        assert [occurrence.start for occurrence in occurrences] == [
            _dt("2024-01-01T09:00:00Z"),
            _dt("2024-01-08T09:00:00Z"),
        ]

    def test_includes_previous_day_for_overnight_slots(self):
        sunday_night = ResolvedSlot(day=6, start_minute=1380, end_minute=1500, durations=frozenset({60}))

        occurrences = slot_occurrences(
            sunday_night,
            TimeInterval(start=_dt("2024-01-01T00:00:00Z"), end=_dt("2024-01-01T06:00:00Z")),
        )

        assert occurrences == [TimeInterval(start=_dt("2023-12-31T23:00:00Z"), end=_dt("2024-01-01T01:00:00Z"))]


class TestPartitionMerger:
    """Tests for PartitionMerger."""

    def test_keeps_only_slot_time(self):
        partition = _partition(_available("2024-01-01T00:00:00Z", "2024-01-03T00:00:00Z"))

        result = PartitionMerger().merge(partition, [MONDAY_WORKDAY])

        assert result.available == [
            _available("2024-01-01T09:00:00Z", "2024-01-01T17:00:00Z", durations=frozenset({30, 60}))
        ]
        assert result.unavailable == []

    def test_unmatched_time_can_be_reported(self):
        partition = _partition(_available("2024-01-01T00:00:00Z", "2024-01-03T00:00:00Z"))

        result = PartitionMerger().merge(partition, [MONDAY_WORKDAY], include_unavailable=True)

        assert result.unavailable == [
            TimeInterval(start=_dt("2024-01-01T00:00:00Z"), end=_dt("2024-01-01T09:00:00Z")),
            TimeInterval(start=_dt("2024-01-01T17:00:00Z"), end=_dt("2024-01-03T00:00:00Z")),
        ]

    def test_input_partition_is_untouched(self):
        partition = _partition(_available("2024-01-01T00:00:00Z", "2024-01-03T00:00:00Z"))

        PartitionMerger().merge(partition, [MONDAY_WORKDAY], include_unavailable=True)

        assert len(partition.available) == 1
        assert partition.unavailable == []

    def test_exact_duration(self):
        partition = _partition(_available("2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z"))

        result = PartitionMerger().merge(partition, [MONDAY_WORKDAY], exact_duration=60)

        assert result.available[0].durations == frozenset({60})

    def test_piece_without_viable_duration_is_dropped(self):
        partition = _partition(_available("2024-01-01T08:00:00Z", "2024-01-01T09:50:00Z"))

        result = PartitionMerger().merge(partition, [MONDAY_WORKDAY])

        assert result.available == []

    def test_without_durations(self):
        partition = _partition(_available("2024-01-01T08:00:00Z", "2024-01-01T09:50:00Z"))

        result = PartitionMerger().merge(partition, [MONDAY_WORKDAY], want_durations=False)

        assert result.available == [_available("2024-01-01T09:00:00Z", "2024-01-01T09:50:00Z")]

    def test_interval_spanning_two_occurrences(self):
        partition = _partition(_available("2024-01-01T00:00:00Z", "2024-01-09T00:00:00Z"))

        result = PartitionMerger().merge(partition, [MONDAY_WORKDAY])

        assert [(interval.start, interval.end) for interval in result.available] == [
            (_dt("2024-01-01T09:00:00Z"), _dt("2024-01-01T17:00:00Z")),
            (_dt("2024-01-08T09:00:00Z"), _dt("2024-01-08T17:00:00Z")),
        ]

    def test_overnight_slot(self):
        sunday_night = ResolvedSlot(day=6, start_minute=1380, end_minute=1500, durations=frozenset({15, 60}))
        partition = _partition(_available("2024-01-01T00:00:00Z", "2024-01-01T06:00:00Z"))

        result = PartitionMerger().merge(partition, [sunday_night])

        assert result.available == [
            _available("2024-01-01T00:00:00Z", "2024-01-01T01:00:00Z", durations=frozenset({15, 60}))
        ]

    def test_no_slots(self):
        partition = _partition(_available("2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z"))

        result = PartitionMerger().merge(partition, [], include_unavailable=True)

        assert result.available == []
        assert len(result.unavailable) == 1
