"""
Per-user recurring availability as handed over by the persistence layer.

Profiles are read-only input to the engine. They are validated on
construction so that the engine can rely on well-formed slots.
"""

from datetime import time
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from .durations import is_valid_duration
from .timeutils import parse_clock_time


class AvailabilityDay(str, Enum):
    """Day token of a recurring slot: a real weekday or a synthetic day group."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    EVERY_DAY = "every_day"
    WEEK_DAYS = "week_days"
    WEEK_ENDS = "week_ends"

    @property
    def is_synthetic(self) -> bool:
        return self in _SYNTHETIC_DAYS

    @property
    def weekday(self) -> int:
        """Weekday number, 0=Monday ... 6=Sunday. Only defined for real days."""
        if self.is_synthetic:
            raise ValueError(f"{self.value} does not name a single weekday")
        return _REAL_DAYS.index(self)

    def expand(self) -> Tuple["AvailabilityDay", ...]:
        """The real days this token stands for."""
        return _SYNTHETIC_DAYS.get(self, (self,))

    @classmethod
    def from_weekday(cls, weekday: int) -> "AvailabilityDay":
        return _REAL_DAYS[weekday]


_REAL_DAYS = (
    AvailabilityDay.MONDAY,
    AvailabilityDay.TUESDAY,
    AvailabilityDay.WEDNESDAY,
    AvailabilityDay.THURSDAY,
    AvailabilityDay.FRIDAY,
    AvailabilityDay.SATURDAY,
    AvailabilityDay.SUNDAY,
)

_SYNTHETIC_DAYS = {
    AvailabilityDay.EVERY_DAY: _REAL_DAYS,
    AvailabilityDay.WEEK_DAYS: _REAL_DAYS[:5],
    AvailabilityDay.WEEK_ENDS: _REAL_DAYS[5:],
}


class RecurringSlot(BaseModel):
    """Weekly availability pattern: a day token and a clock-time window."""
    day: AvailabilityDay
    start_time: time
    end_time: time
    durations: List[int] = Field(default_factory=list)  # Overrides the profile durations

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_clock_time(cls, value):
        """Accept HH:mm strings; YAML 1.1 reads an unquoted 12:00 as the sexagesimal int 720."""
        if isinstance(value, int) and not isinstance(value, bool):
            if not 0 <= value < 24 * 60:
                raise ValueError(f"Clock time out of range: {value}")
            return time(hour=value // 60, minute=value % 60)
        if isinstance(value, str):
            return parse_clock_time(value)
        return value

    @field_validator("durations")
    @classmethod
    def validate_durations(cls, value: List[int]) -> List[int]:
        """Ensure every duration is a multiple of 15."""
        invalid = [d for d in value if not is_valid_duration(d)]
        if invalid:
            raise ValueError(f"Duration must be a multiple of 15, got {invalid}")
        return value


def validate_time_slots(slots: Sequence[RecurringSlot]) -> bool:
    """
    Check that a slot list is consistent.

    A slot must not start after it ends, and two slots with the same day
    token must neither overlap nor touch (shared start, shared end, or one
    ending where the other begins).
    """
    for index, slot in enumerate(slots):
        if slot.start_time > slot.end_time:
            return False

        for other in slots[index + 1:]:
            if other.day != slot.day:
                continue
            if slot.start_time <= other.end_time and other.start_time <= slot.end_time:
                return False

    return True


class UserAvailabilityProfile(BaseModel):
    """A user's declared weekly availability (owned by the persistence layer)."""
    contact_id: str
    event_id: Optional[str] = None
    link: Optional[str] = None
    durations: List[int] = Field(default_factory=list)
    time_zone_offset: int = Field(default=0, ge=-1440, le=1440)  # Minutes east of UTC
    time_zone_name: Optional[str] = None
    slots: List[RecurringSlot] = Field(default_factory=list)
    primary: bool = False

    @field_validator("durations")
    @classmethod
    def validate_durations(cls, value: List[int]) -> List[int]:
        """Ensure every duration is a multiple of 15."""
        invalid = [d for d in value if not is_valid_duration(d)]
        if invalid:
            raise ValueError(f"Duration must be a multiple of 15, got {invalid}")
        return value

    @model_validator(mode="after")
    def validate_slots(self) -> "UserAvailabilityProfile":
        """Reject overlapping or inverted slots."""
        if not validate_time_slots(self.slots):
            raise ValueError(f"Invalid availability time slots for contact {self.contact_id}")
        return self
