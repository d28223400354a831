"""
Service layer helpers that orchestrate collaborators and domain logic.
"""

from .calendar_service import CalendarService
from .collaborators import (
    EventSource,
    GroupDirectory,
    ProfileRepository,
    RecordKind,
    TableAvailability,
    UserRecordStore,
)
from .query import CalendarQuery

__all__ = [
    "CalendarQuery",
    "CalendarService",
    "EventSource",
    "GroupDirectory",
    "ProfileRepository",
    "RecordKind",
    "TableAvailability",
    "UserRecordStore",
]
