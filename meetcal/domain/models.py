"""
Domain models for interval and calendar calculations.
"""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Tuple

from pendulum import DateTime


@dataclass(frozen=True)
class TimeInterval:
    """
    Represents an immutable ``[start, end)`` interval between two UTC instants.

    Invariant: start must not be after end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        return int((self.end - self.start).total_seconds() // 60)

    def duration_seconds(self) -> int:
        return int((self.end - self.start).total_seconds())

    def sort_key(self) -> Tuple[DateTime, DateTime]:
        return self.start, self.end

    def bounds(self) -> "TimeInterval":
        """Return a plain interval with the same bounds."""
        return TimeInterval(start=self.start, end=self.end)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('YYYY-MM-DD HH:mm')}"


@dataclass(frozen=True)
class AvailableInterval(TimeInterval):
    """
    An AVAILABLE interval, optionally annotated with the meeting durations
    (minutes) that fit it and the tables that are free during it.
    """
    durations: FrozenSet[int] = frozenset()
    tables: Tuple[str, ...] = ()

    def with_bounds(self, start: DateTime, end: DateTime) -> "AvailableInterval":
        """Copy keeping the annotations but replacing the bounds."""
        return replace(self, start=start, end=end)


@dataclass
class CalendarPartition:
    """
    AVAILABLE / UNAVAILABLE decomposition of a query range.

    Each pipeline stage consumes the partition produced by the previous
    one. Once a stage returns, no two entries of the same kind overlap and
    no AVAILABLE entry overlaps an UNAVAILABLE one.
    """
    query_start: DateTime
    query_end: DateTime
    available: List[AvailableInterval] = field(default_factory=list)
    unavailable: List[TimeInterval] = field(default_factory=list)


@dataclass(frozen=True)
class OverlapCheckResult:
    """Outcome of validating a candidate meeting time against open windows."""
    status: bool
    message: str
