"""
Protocols describing the external collaborators the calendar depends on.

The core never talks to a network or a database; it only awaits these
calls at the pipeline boundaries.
"""

from __future__ import annotations

from enum import Enum
from typing import Awaitable, List, Optional, Protocol, Sequence, TypeVar

from pendulum import DateTime

from ..domain.exceptions import CalendarError, CollaboratorError
from ..domain.models import AvailableInterval, TimeInterval
from ..domain.profiles import UserAvailabilityProfile

T = TypeVar("T")


class RecordKind(str, Enum):
    """Kind of a one-off per-user calendar record."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class EventSource(Protocol):
    """Protocol describing where event open windows come from."""

    async def get_event_timestamps(self, event_id: str) -> Optional[List[TimeInterval]]:
        """Return the event's open windows, or None if the event is unknown."""


class GroupDirectory(Protocol):
    """Protocol describing the company/group membership lookup."""

    async def get_groups_by_company(
        self,
        company_id: str,
        event_id: Optional[str],
        start: DateTime,
        end: DateTime,
    ) -> List[TimeInterval]:
        """Return the busy windows of the company's groups."""


class UserRecordStore(Protocol):
    """Protocol describing the per-user one-off busy/free records."""

    async def find_records(
        self,
        user_ids: Sequence[str],
        event_id: Optional[str],
        start: DateTime,
        end: DateTime,
        kind: RecordKind,
    ) -> List[TimeInterval]:
        """Return the users' records of ``kind`` relevant to the range."""


class ProfileRepository(Protocol):
    """Protocol describing the persisted recurring-availability profiles."""

    async def find_profiles(
        self,
        contact_ids: Sequence[str],
        event_id: Optional[str] = None,
        link: Optional[str] = None,
    ) -> List[UserAvailabilityProfile]:
        """Return the primary profiles of the contacts, or the profile behind a link."""


class TableAvailability(Protocol):
    """Protocol describing the meeting-room/table availability service."""

    async def annotate(
        self,
        available: List[AvailableInterval],
        hall_id: str,
        include_tables: bool,
        duration: Optional[int] = None,
    ) -> List[AvailableInterval]:
        """Return the intervals annotated with free table ids."""


async def call_collaborator(name: str, awaitable: Awaitable[T]) -> T:
    """
    Await a collaborator call.

    Application errors propagate unchanged; anything else is wrapped in
    ``CollaboratorError``.
    """
    try:
        return await awaitable
    except CalendarError:
        raise
    except Exception as exc:
        raise CollaboratorError(f"{name} failed: {exc}") from exc
