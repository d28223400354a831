"""
Set operations on ``[start, end)`` intervals.

All functions are total over well-formed intervals, keep no state and
never mutate their arguments. Every returned sequence is ordered by
``(start, end)``.
"""

from typing import Iterable, List, Optional, Sequence, TypeVar

from .models import TimeInterval

IntervalT = TypeVar("IntervalT", bound=TimeInterval)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Check if two intervals share at least one instant."""
    return a.start < b.end and b.start < a.end


def intersect(a: TimeInterval, b: TimeInterval) -> Optional[TimeInterval]:
    """
    Calculate the intersection of two intervals.
    Returns None if the intersection is empty.
    """
    start = max(a.start, b.start)
    end = min(a.end, b.end)

    if start >= end:
        return None

    return TimeInterval(start=start, end=end)


def subtract(a: TimeInterval, b: TimeInterval) -> List[TimeInterval]:
    """
    Return the parts of ``a`` not covered by ``b``.

    Example:
    a: 09:00 - 17:00
    b: 10:00 - 11:00
    Result: [09:00-10:00, 11:00-17:00]
    """
    if not overlaps(a, b):
        return [a.bounds()]

    parts: List[TimeInterval] = []

    if a.start < b.start:
        parts.append(TimeInterval(start=a.start, end=b.start))

    if b.end < a.end:
        parts.append(TimeInterval(start=b.end, end=a.end))

    return parts


def subtract_all(a: TimeInterval, others: Iterable[TimeInterval]) -> List[TimeInterval]:
    """Remove every interval of ``others`` from ``a``."""
    remaining: List[TimeInterval] = [a.bounds()]

    for other in others:
        next_remaining: List[TimeInterval] = []
        for part in remaining:
            next_remaining.extend(subtract(part, other))
        remaining = next_remaining
        if not remaining:
            break

    return sort_intervals(remaining)


def sort_intervals(intervals: Iterable[IntervalT]) -> List[IntervalT]:
    """Sort ascending by start, ties broken by end."""
    return sorted(intervals, key=lambda interval: interval.sort_key())


def merge_overlapping(intervals: Sequence[TimeInterval], join_touching: bool = False) -> List[TimeInterval]:
    """
    Union of mutually overlapping intervals.

    Each interval is folded into the accumulator: an overlapping entry is
    widened to cover it, otherwise it is appended. Touching intervals
    (one ends where the next starts) stay separate unless ``join_touching``.

    Example: [09:00-11:00, 10:00-12:00, 12:00-13:00] -> [09:00-12:00, 12:00-13:00]
    """
    if not intervals:
        return []

    sorted_intervals = sort_intervals(intervals)
    merged: List[TimeInterval] = [sorted_intervals[0].bounds()]

    for current in sorted_intervals[1:]:
        last = merged[-1]

        if overlaps(last, current) or (join_touching and last.end == current.start):
            merged[-1] = TimeInterval(
                start=last.start,
                end=max(last.end, current.end)
            )
        else:
            merged.append(current.bounds())

    return merged


def covered_by(intervals: Sequence[TimeInterval], within: TimeInterval) -> List[TimeInterval]:
    """Return the pieces of ``intervals`` lying inside ``within``."""
    pieces = []
    for interval in intervals:
        piece = intersect(interval, within)
        if piece is not None:
            pieces.append(piece)
    return sort_intervals(pieces)
