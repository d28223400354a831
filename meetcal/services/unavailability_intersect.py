"""
Applies per-user one-off records to a calendar.
"""

from pendulum import DateTime

from ..domain.busy_intersect import BusyIntersector
from ..domain.models import CalendarPartition
from .collaborators import RecordKind, UserRecordStore, call_collaborator
from .query import CalendarQuery


class UnavailabilityIntersect:
    """
    Reclassifies AVAILABLE time using the participants' own records.

    ``intersection`` subtracts UNAVAILABLE records; ``availability_intersection``
    restricts the calendar to the union of AVAILABLE records.
    """

    def __init__(self, record_store: UserRecordStore, intersector: BusyIntersector) -> None:
        self._record_store = record_store
        self._intersector = intersector

    async def intersection(
        self,
        query: CalendarQuery,
        partition: CalendarPartition,
        start: DateTime,
        end: DateTime,
    ) -> CalendarPartition:
        contact_ids = query.record_contact_ids()
        if not contact_ids or not partition.available:
            return partition

        busy = await call_collaborator(
            "user record store",
            self._record_store.find_records(contact_ids, query.event_id, start, end, RecordKind.UNAVAILABLE),
        )
        if busy:
            partition = self._intersector.subtract_busy(partition, busy)

        return partition

    async def availability_intersection(
        self,
        query: CalendarQuery,
        partition: CalendarPartition,
        start: DateTime,
        end: DateTime,
    ) -> CalendarPartition:
        user_ids = query.participant_ids()
        if not user_ids or not partition.available:
            return partition

        declared = await call_collaborator(
            "user record store",
            self._record_store.find_records(user_ids, query.event_id, start, end, RecordKind.AVAILABLE),
        )
        if declared:
            partition = self._intersector.restrict_to(partition, declared)

        return partition
