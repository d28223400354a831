"""
Meeting-duration matching.

A duration is viable for an interval only when it tiles the interval
exactly: the interval is at least that long and its length is an exact
multiple of it.
"""

from typing import FrozenSet, Iterable, Optional, Protocol

DURATION_GRANULARITY = 15


class HasLength(Protocol):
    def duration_seconds(self) -> int:
        ...


def is_valid_duration(minutes: int) -> bool:
    """Durations are positive multiples of the 15 minute granularity."""
    return minutes > 0 and minutes % DURATION_GRANULARITY == 0


def viable_durations_for_length(
    length_seconds: int,
    candidates: Iterable[int],
    exact_match: Optional[int] = None
) -> FrozenSet[int]:
    """Durations (minutes) out of ``candidates`` that tile ``length_seconds`` exactly."""
    viable = set()

    for candidate in candidates:
        if candidate <= 0:
            continue
        candidate_seconds = candidate * 60
        if length_seconds >= candidate_seconds and length_seconds % candidate_seconds == 0:
            viable.add(candidate)

    if exact_match:
        viable &= {exact_match}

    return frozenset(viable)


def viable_durations(
    interval: HasLength,
    candidates: Iterable[int],
    exact_match: Optional[int] = None
) -> FrozenSet[int]:
    """
    Return the candidate durations that evenly tile ``interval``.

    Args:
        interval: Anything exposing ``duration_seconds()``
        candidates: Candidate durations in minutes
        exact_match: If given, only this duration may be returned

    Returns:
        Set of viable durations in minutes
    """
    return viable_durations_for_length(interval.duration_seconds(), candidates, exact_match)
