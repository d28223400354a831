"""
Removes company group blocks from a calendar.
"""

import logging

from pendulum import DateTime

from ..domain.busy_intersect import BusyIntersector
from ..domain.models import CalendarPartition
from .collaborators import GroupDirectory, call_collaborator
from .query import CalendarQuery

logger = logging.getLogger(__name__)


class GroupIntersect:
    """Subtracts the guest and host companies' group windows from a partition."""

    def __init__(self, group_directory: GroupDirectory, intersector: BusyIntersector) -> None:
        self._group_directory = group_directory
        self._intersector = intersector

    async def intersection(
        self,
        query: CalendarQuery,
        partition: CalendarPartition,
        start: DateTime,
        end: DateTime,
    ) -> CalendarPartition:
        """Apply the guest company's groups, then the host company's."""
        for company_id in (query.guest_company_id, query.host_company_id):
            if not company_id:
                continue

            groups = await call_collaborator(
                "group directory",
                self._group_directory.get_groups_by_company(company_id, query.event_id, start, end),
            )
            logger.debug("Company %s contributes %d group window(s)", company_id, len(groups))

            if groups:
                partition = self._intersector.subtract_busy(partition, groups)

        return partition
