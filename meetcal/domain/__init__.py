"""
Domain layer - Pure business logic without external dependencies.
"""

from .base_calendar import BaseCalendarBuilder
from .busy_intersect import BusyIntersector
from .durations import viable_durations
from .event_timestamps import EventTimestampResolver
from .models import AvailableInterval, CalendarPartition, OverlapCheckResult, TimeInterval
from .partition_merger import PartitionMerger
from .profiles import AvailabilityDay, RecurringSlot, UserAvailabilityProfile
from .recurring_slots import RecurringSlotEngine, ResolvedSlot

__all__ = [
    "AvailabilityDay",
    "AvailableInterval",
    "BaseCalendarBuilder",
    "BusyIntersector",
    "CalendarPartition",
    "EventTimestampResolver",
    "OverlapCheckResult",
    "PartitionMerger",
    "RecurringSlot",
    "RecurringSlotEngine",
    "ResolvedSlot",
    "TimeInterval",
    "UserAvailabilityProfile",
    "viable_durations",
]
