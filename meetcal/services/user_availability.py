"""
Applies participants' recurring weekly availability to a calendar.
"""

import logging

from ..domain.models import CalendarPartition
from ..domain.partition_merger import PartitionMerger
from ..domain.recurring_slots import RecurringSlotEngine
from .collaborators import ProfileRepository, call_collaborator
from .query import CalendarQuery

logger = logging.getLogger(__name__)


class UserAvailabilityService:
    """Fetches the relevant profiles, reduces them and merges the result."""

    def __init__(
        self,
        profile_repository: ProfileRepository,
        engine: RecurringSlotEngine,
        merger: PartitionMerger,
    ) -> None:
        self._profile_repository = profile_repository
        self._engine = engine
        self._merger = merger

    async def intersect_user_availabilities(
        self,
        partition: CalendarPartition,
        query: CalendarQuery,
        include_unavailable: bool,
    ) -> CalendarPartition:
        """
        Restrict AVAILABLE time to the participants' common recurring slots.

        A link selects the profile behind it; otherwise the primary
        profiles of the participants are used. Without profiles the
        partition is returned unchanged.
        """
        if not partition.available:
            return partition

        contact_ids = [] if query.link else query.profile_contact_ids()
        profiles = await call_collaborator(
            "profile repository",
            self._profile_repository.find_profiles(contact_ids, query.event_id, query.link),
        )
        if not profiles:
            return partition

        slots = self._engine.reduce(profiles)
        logger.debug("%d profile(s) share %d recurring slot(s)", len(profiles), len(slots))

        return self._merger.merge(
            partition,
            slots,
            include_unavailable=include_unavailable,
            want_durations=True,
            exact_duration=query.duration,
        )
