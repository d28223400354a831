"""
Initial AVAILABLE / UNAVAILABLE partition of a query range.
"""

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from pendulum import DateTime

from .interval_algebra import merge_overlapping, overlaps, sort_intervals
from .models import AvailableInterval, CalendarPartition, TimeInterval
from .timeutils import Clock, to_date, utc_now

logger = logging.getLogger(__name__)


class BaseCalendarBuilder:
    """
    Builds the starting partition from an event's open windows.

    The clock is injected so that "future-only" decisions are reproducible.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock

    def build(
        self,
        query_start: DateTime,
        query_end: DateTime,
        open_windows: Sequence[TimeInterval],
        allowed_dates: Optional[Iterable[date]] = None
    ) -> CalendarPartition:
        """
        Compute the base calendar for a query range.

        Every open window overlapping the range becomes one AVAILABLE
        interval, clipped on the start side only. With ``allowed_dates``,
        only intervals whose clipped start falls on one of those UTC days
        are kept. Overlapping windows are unioned.
        """
        partition = CalendarPartition(query_start=query_start, query_end=query_end)
        query_range = TimeInterval(start=query_start, end=query_end)
        only_dates = {to_date(value) for value in allowed_dates} if allowed_dates else set()

        for window in open_windows:
            if not overlaps(window, query_range):
                continue

            start = max(query_start, window.start)

            if only_dates and start.date() not in only_dates:
                continue

            partition.available.append(AvailableInterval(start=start, end=window.end))

        partition.available = [
            AvailableInterval(start=merged.start, end=merged.end)
            for merged in merge_overlapping(partition.available)
        ]

        logger.debug(
            "Base calendar %s - %s: %d available interval(s)",
            query_start, query_end, len(partition.available)
        )
        return partition

    def mark_all_unavailable(
        self,
        partition: CalendarPartition,
        open_windows: Sequence[TimeInterval]
    ) -> CalendarPartition:
        """Block the whole calendar: every future open window becomes UNAVAILABLE."""
        now = self._clock()

        partition.available = []
        partition.unavailable = sort_intervals(
            list(partition.unavailable)
            + [window.bounds() for window in open_windows if window.start >= now]
        )
        return partition
