"""
Reclassification of AVAILABLE time against busy or declared-available time.

This is the shared engine behind the group and per-user intersections;
those services only differ in where their intervals come from.
"""

import logging
from typing import List, Sequence

from .interval_algebra import covered_by, intersect, merge_overlapping, overlaps, sort_intervals, subtract, subtract_all
from .models import AvailableInterval, CalendarPartition, TimeInterval

logger = logging.getLogger(__name__)


class BusyIntersector:
    """
    Subtracts busy intervals from a partition's AVAILABLE intervals.

    For each AVAILABLE interval and each busy interval:
    - no overlap: the interval stays AVAILABLE
    - busy covers it: it becomes UNAVAILABLE in full
    - busy covers one edge: it is truncated, the covered side is UNAVAILABLE
    - busy is interior: it splits in two, the interior is UNAVAILABLE
    """

    def subtract_busy(
        self,
        partition: CalendarPartition,
        busy_intervals: Sequence[TimeInterval]
    ) -> CalendarPartition:
        """Remove every busy interval from the AVAILABLE list."""
        for busy in busy_intervals:
            self._subtract_one(partition, busy)

        self._finish(partition)
        return partition

    def restrict_to(
        self,
        partition: CalendarPartition,
        allowed_intervals: Sequence[TimeInterval]
    ) -> CalendarPartition:
        """
        Keep only the AVAILABLE time covered by ``allowed_intervals``.

        The allowed intervals are first unioned; whatever they do not cover
        becomes UNAVAILABLE.
        """
        allowed = merge_overlapping(allowed_intervals)
        available: List[AvailableInterval] = []

        for interval in partition.available:
            for piece in covered_by(allowed, interval):
                available.append(interval.with_bounds(piece.start, piece.end))

            partition.unavailable.extend(subtract_all(interval, allowed))

        partition.available = available
        self._finish(partition)
        return partition

    def _subtract_one(self, partition: CalendarPartition, busy: TimeInterval) -> None:
        available: List[AvailableInterval] = []

        for interval in partition.available:
            if not overlaps(interval, busy):
                available.append(interval)
                continue

            covered = intersect(interval, busy)
            if covered is not None:
                partition.unavailable.append(covered)

            for remainder in subtract(interval, busy):
                available.append(interval.with_bounds(remainder.start, remainder.end))

        partition.available = available

    @staticmethod
    def _finish(partition: CalendarPartition) -> None:
        partition.available = sort_intervals(partition.available)
        partition.unavailable = merge_overlapping(partition.unavailable, join_touching=True)
        logger.debug(
            "Partition now has %d available / %d unavailable interval(s)",
            len(partition.available), len(partition.unavailable)
        )
