"""
Applies reduced recurring slots onto an absolute-date partition.
"""

import logging
from collections import deque
from typing import Deque, List, Optional, Sequence

from .durations import viable_durations
from .interval_algebra import intersect, merge_overlapping, sort_intervals, subtract
from .models import AvailableInterval, CalendarPartition, TimeInterval
from .recurring_slots import ResolvedSlot
from .timeutils import start_of_day

logger = logging.getLogger(__name__)


def slot_occurrences(slot: ResolvedSlot, interval: TimeInterval) -> List[TimeInterval]:
    """
    Absolute occurrences of a weekly slot that can touch ``interval``.

    Each occurrence is the slot placed on a date with the slot's weekday;
    the day before the interval is included for slots that run past
    midnight.
    """
    occurrences: List[TimeInterval] = []
    day = start_of_day(interval.start).subtract(days=1)

    while day < interval.end:
        if day.day_of_week == slot.day:
            occurrences.append(
                TimeInterval(
                    start=day.add(minutes=slot.start_minute),
                    end=day.add(minutes=slot.end_minute),
                )
            )
        day = day.add(days=1)

    return occurrences


class PartitionMerger:
    """
    Intersects every AVAILABLE interval with the recurring slots.

    Intervals are processed from a work queue. For each interval the first
    productive slot occurrence (earliest first) yields one output interval,
    and whatever the occurrence does not cover goes back on the queue. An
    interval without a productive occurrence is dropped, or folded into
    UNAVAILABLE when requested. Every pass removes a whole occurrence from
    the queued time, so the queue drains.
    """

    def merge(
        self,
        partition: CalendarPartition,
        resolved_slots: Sequence[ResolvedSlot],
        include_unavailable: bool = False,
        want_durations: bool = True,
        exact_duration: Optional[int] = None
    ) -> CalendarPartition:
        """
        Merge resolved slots into ``partition``.

        Args:
            partition: Partition produced by the previous stages
            resolved_slots: Output of RecurringSlotEngine.reduce
            include_unavailable: Fold unmatched time into UNAVAILABLE
            want_durations: Annotate output intervals with viable durations
                and require at least one
            exact_duration: Only this duration may be offered

        Returns:
            A new partition; the input is left untouched
        """
        result = CalendarPartition(
            query_start=partition.query_start,
            query_end=partition.query_end,
            unavailable=list(partition.unavailable),
        )
        queue: Deque[AvailableInterval] = deque(partition.available)

        while queue:
            interval = queue.popleft()
            match = self._first_match(interval, resolved_slots, want_durations, exact_duration)

            if match is None:
                if include_unavailable:
                    result.unavailable.append(interval.bounds())
                continue

            occurrence, output = match
            result.available.append(output)

            for remainder in subtract(interval, occurrence):
                queue.append(interval.with_bounds(remainder.start, remainder.end))

        result.available = sort_intervals(result.available)
        result.unavailable = merge_overlapping(result.unavailable)

        logger.debug(
            "Merged %d slot(s) into %d available interval(s)",
            len(resolved_slots), len(result.available)
        )
        return result

    @staticmethod
    def _first_match(
        interval: AvailableInterval,
        resolved_slots: Sequence[ResolvedSlot],
        want_durations: bool,
        exact_duration: Optional[int]
    ):
        candidates = []
        for slot in resolved_slots:
            for occurrence in slot_occurrences(slot, interval):
                candidates.append((occurrence, slot))

        candidates.sort(key=lambda candidate: candidate[0].sort_key())

        for occurrence, slot in candidates:
            common = intersect(interval, occurrence)
            if common is None:
                continue

            durations = viable_durations(common, slot.durations, exact_duration)
            if want_durations and not durations:
                continue

            output = AvailableInterval(
                start=common.start,
                end=common.end,
                durations=durations if want_durations else frozenset(),
                tables=interval.tables,
            )
            return occurrence, output

        return None
