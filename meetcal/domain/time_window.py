"""
Presentation filters: clock-time window and explicit date allow-list.
"""

from datetime import date, time
from typing import Iterable, List, Optional

from .interval_algebra import intersect, sort_intervals
from .models import AvailableInterval, CalendarPartition, TimeInterval
from .timeutils import minutes_of, start_of_day, to_date


def clip_to_clock_window(interval: AvailableInterval, from_time: time, to_time: time) -> List[AvailableInterval]:
    """
    Clip an interval, day by day, to the UTC clock window ``[from_time, to_time)``.

    A window whose end is before its start runs past midnight; equal
    bounds make an empty window.
    """
    from_minute = minutes_of(from_time)
    to_minute = minutes_of(to_time)
    if to_minute == from_minute:
        return []
    if to_minute < from_minute:
        to_minute += 24 * 60

    pieces: List[AvailableInterval] = []
    day = start_of_day(interval.start).subtract(days=1)

    while day < interval.end:
        window = TimeInterval(start=day.add(minutes=from_minute), end=day.add(minutes=to_minute))
        piece = intersect(interval, window)
        if piece is not None:
            pieces.append(interval.with_bounds(piece.start, piece.end))
        day = day.add(days=1)

    return pieces


def apply_time_window(
    partition: CalendarPartition,
    from_time: Optional[time] = None,
    to_time: Optional[time] = None,
    specific_dates: Optional[Iterable[date]] = None
) -> CalendarPartition:
    """
    Narrow the AVAILABLE intervals to what the requester wants to see.

    With both ``from_time`` and ``to_time``, intervals are clipped to that
    clock window. With ``specific_dates``, only intervals starting or
    ending on one of those days are kept. Clipped-away time is dropped,
    not reclassified.
    """
    if not partition.available:
        return partition

    available = partition.available

    if from_time is not None and to_time is not None:
        clipped: List[AvailableInterval] = []
        for interval in available:
            clipped.extend(clip_to_clock_window(interval, from_time, to_time))
        available = clipped

    if specific_dates:
        wanted = {to_date(value) for value in specific_dates}
        available = [
            interval for interval in available
            if interval.start.date() in wanted or interval.end.date() in wanted
        ]

    partition.available = sort_intervals(available)
    return partition
