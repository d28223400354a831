"""
Effective date ranges and day-bucketed open windows.
"""

from typing import List, Sequence, Tuple

from pendulum import DateTime

from .exceptions import EventClosedError, InvalidRangeError, NoTimestampsError, OutOfBoundsError
from .interval_algebra import sort_intervals
from .models import OverlapCheckResult, TimeInterval
from .timeutils import Clock, start_of_day, utc_now


class EventTimestampResolver:
    """
    Resolves the absolute range a calendar is computed for.

    Args:
        clock: Source of "now" (UTC)
        grace_minutes: Push-forward applied when the range starts in the past
        min_range_days: Minimum length of the effective range
        hub_window_days: Number of day buckets produced for a page
        page_span_days: Days advanced per page
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        grace_minutes: int = 5,
        min_range_days: int = 10,
        hub_window_days: int = 8,
        page_span_days: int = 7,
    ):
        self._clock = clock
        self.grace_minutes = grace_minutes
        self.min_range_days = min_range_days
        self.hub_window_days = hub_window_days
        self.page_span_days = page_span_days

    def effective_range(self, windows: Sequence[TimeInterval]) -> Tuple[DateTime, DateTime]:
        """
        Calculate the start and end of the range to compute.

        Raises:
            NoTimestampsError: If there are no open windows
            EventClosedError: If the last window already ended
        """
        if not windows:
            raise NoTimestampsError()

        now = self._clock()
        soon = now.add(minutes=self.grace_minutes)
        windows = sort_intervals(windows)
        start = windows[0].start
        end = max(window.end for window in windows)

        if end < now:
            raise EventClosedError()

        if start < now:
            if windows[0].end > soon:
                start = soon
            else:
                for window in windows:
                    if window.start >= now:
                        start = window.start
                        break
                    if window.end > soon:
                        start = soon
                        break

        floor_end = start.add(days=self.min_range_days)
        if end < floor_end:
            end = floor_end

        return start, end

    @staticmethod
    def validate_user_range(start: DateTime, end: DateTime) -> TimeInterval:
        """Reject a user range whose start lies after its end."""
        if start > end:
            raise InvalidRangeError("User's provided Date Range is in valid")
        return TimeInterval(start=start, end=end)

    def clamp_user_range(
        self,
        start: DateTime,
        end: DateTime,
        event_range: Tuple[DateTime, DateTime]
    ) -> TimeInterval:
        """
        Fit a requester-declared range into the event's range.

        A past start moves to now and an end beyond the event end is
        clamped to it.

        Raises:
            InvalidRangeError: If start is after end
            OutOfBoundsError: If the range lies outside the event range
        """
        self.validate_user_range(start, end)
        event_start, event_end = event_range
        now = self._clock()

        if start < now:
            start = now

        if end > event_end:
            end = event_end

        if end < event_start:
            raise OutOfBoundsError(edge="end")

        if start > end:
            raise OutOfBoundsError(edge="start")

        return TimeInterval(start=start, end=end)

    def page_windows(self, page: int = 1) -> List[TimeInterval]:
        """
        Day buckets for a page of the meeting hub.

        Page 1 starts today; every further page moves ``page_span_days`` on.
        """
        page = max(page or 1, 1)
        first_day = start_of_day(self._clock()).add(days=self.page_span_days * (page - 1))

        return [
            TimeInterval(start=first_day.add(days=offset), end=first_day.add(days=offset + 1))
            for offset in range(self.hub_window_days)
        ]

    def user_range_windows(self, user_range: TimeInterval) -> List[TimeInterval]:
        """
        One open window per UTC day touched by ``user_range``.

        The first window starts at the range start and the last one ends at
        the range end; the days in between are whole.
        """
        windows: List[TimeInterval] = []
        day = start_of_day(user_range.start)

        while day < user_range.end or not windows:
            next_day = day.add(days=1)
            windows.append(
                TimeInterval(
                    start=max(day, user_range.start),
                    end=min(next_day, user_range.end),
                )
            )
            day = next_day

        return windows

    def validate_meeting_time(
        self,
        windows: Sequence[TimeInterval],
        start: DateTime,
        end: DateTime,
        past_meeting: bool = False
    ) -> OverlapCheckResult:
        """
        Check that a candidate meeting lies inside one open window.

        Malformed ranges raise; a closed event or a miss is reported as a
        failed result.
        """
        now = self._clock()

        if start > end:
            raise InvalidRangeError("Invalid date range, End date should be greater than start date")
        if start < now and not past_meeting:
            raise InvalidRangeError("Invalid start date, it should be greater than current time")
        if end < now and not past_meeting:
            raise InvalidRangeError("Invalid end date, it should be greater than current time")

        if not windows:
            raise NoTimestampsError()

        if max(window.end for window in windows) < now and not past_meeting:
            return OverlapCheckResult(status=False, message="This Event is closed")

        for window in windows:
            if window.start <= start <= window.end and window.start <= end <= window.end:
                return OverlapCheckResult(status=True, message="Timestamp is overlapped")

        return OverlapCheckResult(
            status=False,
            message="Meeting startTime and endTime are not overlapping to Event timestamps",
        )
