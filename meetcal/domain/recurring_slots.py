"""
Expansion, UTC normalisation and multi-party reduction of recurring
weekly availability.

Resolved slots live on a weekly clock: a slot is anchored to the UTC
weekday on which it starts and may run past midnight into the next day.
Two slots intersect when their spans on that weekly clock overlap,
including across the Sunday/Monday wrap.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .durations import viable_durations_for_length
from .profiles import RecurringSlot, UserAvailabilityProfile
from .timeutils import MINUTES_PER_DAY, MINUTES_PER_WEEK, minutes_of

logger = logging.getLogger(__name__)

DEFAULT_DURATIONS: Tuple[int, ...] = (15,)


@dataclass(frozen=True)
class ResolvedSlot:
    """
    A recurring slot expressed in UTC for one concrete weekday.

    ``start_minute`` lies in ``[0, 1440)``; ``end_minute`` may exceed 1440
    when the slot crosses midnight.
    """
    day: int  # 0=Monday, 6=Sunday
    start_minute: int
    end_minute: int
    durations: FrozenSet[int] = frozenset()

    @classmethod
    def from_week_span(cls, start: int, end: int, durations: Iterable[int]) -> "ResolvedSlot":
        """Build a slot from minutes on the weekly clock (any offset)."""
        length = end - start
        start = start % MINUTES_PER_WEEK
        return cls(
            day=start // MINUTES_PER_DAY,
            start_minute=start % MINUTES_PER_DAY,
            end_minute=start % MINUTES_PER_DAY + length,
            durations=frozenset(durations),
        )

    @property
    def week_start(self) -> int:
        return self.day * MINUTES_PER_DAY + self.start_minute

    @property
    def week_end(self) -> int:
        return self.day * MINUTES_PER_DAY + self.end_minute

    def duration_seconds(self) -> int:
        return (self.end_minute - self.start_minute) * 60

    def sort_key(self) -> Tuple[int, int, int]:
        return self.day, self.start_minute, self.end_minute

    def overlap_with(self, other: "ResolvedSlot") -> Optional[Tuple[int, int]]:
        """Overlapping span on the weekly clock, or None."""
        for shift in (0, -MINUTES_PER_WEEK, MINUTES_PER_WEEK):
            start = max(self.week_start, other.week_start + shift)
            end = min(self.week_end, other.week_end + shift)
            if start < end:
                return start, end
        return None


def sort_slots(slots: Iterable[ResolvedSlot]) -> List[ResolvedSlot]:
    return sorted(slots, key=lambda slot: slot.sort_key())


class RecurringSlotEngine:
    """
    Turns users' weekly availability patterns into the slots where all of
    them are available.

    Algorithm:
    1. Expand synthetic day tokens into one slot per real weekday
    2. Shift every slot to UTC and attach the durations that tile it
    3. Intersect the participants' slots left to right, stopping as soon
       as nothing is left
    """

    def __init__(self, default_durations: Sequence[int] = DEFAULT_DURATIONS):
        self.default_durations = tuple(default_durations)

    def expand(self, slots: Sequence[RecurringSlot]) -> List[RecurringSlot]:
        """
        Replace EVERY_DAY / WEEK_DAYS / WEEK_ENDS with concrete weekday slots.

        Only concrete-day slots remain afterwards.
        """
        expanded: List[RecurringSlot] = []

        for slot in slots:
            for day in slot.day.expand():
                expanded.append(slot.model_copy(update={"day": day}))

        return expanded

    def normalize(self, profile: UserAvailabilityProfile) -> List[ResolvedSlot]:
        """
        Convert a profile's slots to UTC resolved slots.

        Eastward offsets are subtracted, westward offsets added. Slots no
        configured duration can tile are dropped.
        """
        resolved: List[ResolvedSlot] = []

        for slot in self.expand(profile.slots):
            candidates = self._durations_for(profile, slot)
            start = slot.day.weekday * MINUTES_PER_DAY + minutes_of(slot.start_time) - profile.time_zone_offset
            end = slot.day.weekday * MINUTES_PER_DAY + minutes_of(slot.end_time) - profile.time_zone_offset

            durations = viable_durations_for_length((end - start) * 60, candidates)
            if not durations:
                logger.debug(
                    "Dropping %s slot %s-%s of %s: no duration out of %s fits",
                    slot.day.value, slot.start_time, slot.end_time, profile.contact_id, candidates
                )
                continue

            resolved.append(ResolvedSlot.from_week_span(start, end, durations))

        return sort_slots(resolved)

    def reduce(self, profiles: Sequence[UserAvailabilityProfile]) -> List[ResolvedSlot]:
        """
        Calculate the slots shared by every profile.

        Zero profiles yield nothing; a single profile yields its own
        normalised slots.
        """
        if not profiles:
            return []

        result = self.normalize(profiles[0])

        for profile in profiles[1:]:
            if not result:
                break
            result = self.intersect(result, self.normalize(profile))

        if not result:
            logger.debug("No common recurring slot across %d profile(s)", len(profiles))
            return []

        logger.debug("Reduced %d profile(s) to %d recurring slot(s)", len(profiles), len(result))
        return sort_slots(result)

    def intersect(
        self,
        old_slots: Sequence[ResolvedSlot],
        new_slots: Sequence[ResolvedSlot]
    ) -> List[ResolvedSlot]:
        """
        Intersect two lists of resolved slots.

        A span is kept only if both sides have a duration that tiles it.
        The kept durations are the larger of the two sides' smallest
        durations plus every duration both sides agree on.
        """
        intersections: List[ResolvedSlot] = []

        for new_slot in new_slots:
            for old_slot in old_slots:
                span = new_slot.overlap_with(old_slot)
                if span is None:
                    continue

                length_seconds = (span[1] - span[0]) * 60
                new_durations = viable_durations_for_length(length_seconds, new_slot.durations)
                old_durations = viable_durations_for_length(length_seconds, old_slot.durations)

                if not new_durations or not old_durations:
                    continue

                best_duration = max(min(new_durations), min(old_durations))
                intersections.append(
                    ResolvedSlot.from_week_span(
                        span[0],
                        span[1],
                        {best_duration} | (new_durations & old_durations),
                    )
                )

        return sort_slots(intersections)

    def _durations_for(self, profile: UserAvailabilityProfile, slot: RecurringSlot) -> Tuple[int, ...]:
        if slot.durations:
            return tuple(slot.durations)
        if profile.durations:
            return tuple(profile.durations)
        logger.debug("No durations declared by %s, using %s", profile.contact_id, self.default_durations)
        return self.default_durations

