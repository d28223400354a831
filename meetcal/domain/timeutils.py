"""
Stateless helpers for instants and clock times.

Nothing here reads a process-wide timezone: every instant is normalised to
UTC and "now" is always passed in by the caller.
"""

from datetime import date, datetime, time
from typing import Callable, Union

import pendulum
from pendulum import DateTime

Clock = Callable[[], DateTime]

MINUTES_PER_DAY = 24 * 60
MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY

InstantLike = Union[str, datetime, DateTime]


def utc_now() -> DateTime:
    """Default clock."""
    return pendulum.now("UTC")


def to_utc(value: InstantLike) -> DateTime:
    """Coerce an ISO string or (aware or naive) datetime to a UTC DateTime."""
    if isinstance(value, str):
        parsed = pendulum.parse(value, tz="UTC")
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Not an instant: {value!r}")
        return parsed.in_timezone("UTC")

    if isinstance(value, DateTime):
        return value.in_timezone("UTC")

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return pendulum.instance(value, tz="UTC")
        return pendulum.instance(value).in_timezone("UTC")

    raise TypeError(f"Unsupported instant type: {type(value).__name__}")


def to_date(value: Union[str, date, datetime]) -> date:
    """Day-truncate a date-like value in UTC."""
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    return to_utc(value).date()


def start_of_day(value: DateTime) -> DateTime:
    return value.in_timezone("UTC").start_of("day")


def minutes_of(clock_time: time) -> int:
    """Minutes elapsed since midnight for a clock time."""
    return clock_time.hour * 60 + clock_time.minute


def parse_clock_time(value: Union[str, time]) -> time:
    """Parse ``HH:mm`` into a ``time``; a ``time`` passes through unchanged."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Clock time must use HH:mm, got {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Clock time out of range: {value!r}")
    return time(hour=hour, minute=minute)
