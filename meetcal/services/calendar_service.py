"""
Application service computing the availability calendar.

The service awaits the external collaborators at fixed points and hands
everything else to the pure domain stages. It keeps no state between
requests, so a request can be abandoned at any ``await`` without side
effects.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pendulum import DateTime

from ..config import EngineConfig
from ..domain.base_calendar import BaseCalendarBuilder
from ..domain.busy_intersect import BusyIntersector
from ..domain.event_timestamps import EventTimestampResolver
from ..domain.exceptions import (
    CalendarError,
    EventNotFoundError,
    MissingEventError,
    NoTimestampsError,
    Translator,
    identity_translator,
)
from ..domain.models import CalendarPartition, OverlapCheckResult, TimeInterval
from ..domain.partition_merger import PartitionMerger
from ..domain.recurring_slots import RecurringSlotEngine
from ..domain.time_window import apply_time_window
from ..domain.timeutils import Clock, to_utc, utc_now
from .collaborators import (
    EventSource,
    GroupDirectory,
    ProfileRepository,
    TableAvailability,
    UserRecordStore,
    call_collaborator,
)
from .group_intersect import GroupIntersect
from .query import CalendarQuery
from .unavailability_intersect import UnavailabilityIntersect
from .user_availability import UserAvailabilityService

logger = logging.getLogger(__name__)


class CalendarService:
    """
    Orchestrates the availability pipeline.

    Event hub:   event windows -> effective range -> base calendar
                 -> user range -> groups -> unavailability
    Meeting hub: day buckets -> effective range -> base calendar
                 -> declared availability -> unavailability
    Both then apply the clock-time window, the recurring slots and the
    table annotation.
    """

    def __init__(
        self,
        event_source: EventSource,
        group_directory: GroupDirectory,
        record_store: UserRecordStore,
        profile_repository: ProfileRepository,
        table_availability: Optional[TableAvailability] = None,
        *,
        engine_config: Optional[EngineConfig] = None,
        clock: Clock = utc_now,
        translator: Translator = identity_translator,
    ) -> None:
        config = engine_config or EngineConfig()
        intersector = BusyIntersector()

        self._event_source = event_source
        self._table_availability = table_availability
        self._translator = translator
        self._intersector = intersector
        self._resolver = EventTimestampResolver(
            clock=clock,
            grace_minutes=config.grace_minutes,
            min_range_days=config.min_range_days,
            hub_window_days=config.hub_window_days,
            page_span_days=config.page_span_days,
        )
        self._builder = BaseCalendarBuilder(clock=clock)
        self._group_intersect = GroupIntersect(group_directory, intersector)
        self._unavailability_intersect = UnavailabilityIntersect(record_store, intersector)
        self._user_availability = UserAvailabilityService(
            profile_repository,
            RecurringSlotEngine(default_durations=config.default_durations),
            PartitionMerger(),
        )

    async def get_availability(
        self,
        query: CalendarQuery,
        include_unavailable: bool = False,
        include_tables: bool = False,
    ) -> CalendarPartition:
        """Compute the calendar for ``query``, choosing the hub pipeline."""
        if query.meeting_hub_event:
            return await self.get_availability_meeting_hub(query, include_unavailable, include_tables)
        return await self.get_availability_event_hub(query, include_unavailable, include_tables)

    async def get_availability_event_hub(
        self,
        query: CalendarQuery,
        include_unavailable: bool = False,
        include_tables: bool = False,
    ) -> CalendarPartition:
        if not query.event_id:
            raise MissingEventError()

        windows = await self.get_event_windows(query.event_id)
        start, end = self._resolver.effective_range(windows)
        partition = self._builder.build(start, end, windows)

        if query.has_user_range():
            user_range = self._resolver.clamp_user_range(
                to_utc(query.user_start_date),
                to_utc(query.user_end_date),
                (start, end),
            )
            partition = self._intersector.restrict_to(partition, [user_range])

        if partition.available:
            if query.host_company_id or query.guest_company_id:
                partition = await self._group_intersect.intersection(query, partition, start, end)

            if query.has_participants():
                partition = await self._unavailability_intersect.intersection(query, partition, start, end)

        return await self._finish(query, partition, include_unavailable, include_tables)

    async def get_availability_meeting_hub(
        self,
        query: CalendarQuery,
        include_unavailable: bool = False,
        include_tables: bool = False,
    ) -> CalendarPartition:
        if query.has_user_range():
            user_range = self._resolver.validate_user_range(
                to_utc(query.user_start_date),
                to_utc(query.user_end_date),
            )
            windows = self._resolver.user_range_windows(user_range)
        else:
            windows = self._resolver.page_windows(query.page or 1)

        start, end = self._resolver.effective_range(windows)
        partition = self._builder.build(start, end, windows)

        if partition.available and query.has_participants():
            partition = await self._unavailability_intersect.availability_intersection(
                query, partition, start, end
            )
            partition = await self._unavailability_intersect.intersection(query, partition, start, end)

        return await self._finish(query, partition, include_unavailable, include_tables)

    async def validate_event_meeting_time(
        self,
        event_id: str,
        start: DateTime,
        end: DateTime,
        past_meeting: bool = False,
        language: Optional[str] = None,
    ) -> OverlapCheckResult:
        """
        Check a candidate meeting time against the event's open windows.

        Never raises for application errors; they come back as a failed
        result with a localized message.
        """
        try:
            windows = await self.get_event_windows(event_id)
            result = self._resolver.validate_meeting_time(
                windows, to_utc(start), to_utc(end), past_meeting=past_meeting
            )
        except CalendarError as exc:
            logger.debug("Meeting time rejected for event %s: %s", event_id, exc.message_key)
            return OverlapCheckResult(status=False, message=self.localize(exc, language))

        return OverlapCheckResult(
            status=result.status,
            message=self._translator(result.message, language),
        )

    async def get_event_windows(self, event_id: str) -> List[TimeInterval]:
        """Fetch an event's open windows, failing if there are none."""
        windows = await call_collaborator("event source", self._event_source.get_event_timestamps(event_id))

        if windows is None:
            raise EventNotFoundError()
        if not windows:
            raise NoTimestampsError()

        return windows

    def mark_all_unavailable(self, partition: CalendarPartition, windows: List[TimeInterval]) -> CalendarPartition:
        """Block the whole calendar (used when nothing may be booked)."""
        return self._builder.mark_all_unavailable(partition, windows)

    def localize(self, error: CalendarError, language: Optional[str] = None) -> str:
        return error.localized(self._translator, language)

    async def _finish(
        self,
        query: CalendarQuery,
        partition: CalendarPartition,
        include_unavailable: bool,
        include_tables: bool,
    ) -> CalendarPartition:
        if partition.available:
            partition = apply_time_window(partition, query.from_time, query.to_time, query.specific_dates)

        if partition.available:
            partition = await self._user_availability.intersect_user_availabilities(
                partition, query, include_unavailable
            )

        if query.hall_id and partition.available and self._table_availability is not None:
            partition.available = await call_collaborator(
                "table availability",
                self._table_availability.annotate(
                    partition.available, query.hall_id, include_tables, query.duration
                ),
            )

        logger.debug(
            "Calendar ready: %d available / %d unavailable interval(s)",
            len(partition.available), len(partition.unavailable)
        )
        return partition
