"""
Calendar request parameters as handed over by the transport layer.
"""

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..domain.durations import is_valid_duration


class CalendarQuery(BaseModel):
    """Parameters of an availability request."""
    page: Optional[int] = None
    event_id: Optional[str] = None
    contact_id: Optional[str] = None
    host_ids: List[str] = Field(default_factory=list)
    guest_ids: List[str] = Field(default_factory=list)
    host_company_id: Optional[str] = None
    guest_company_id: Optional[str] = None
    user_start_date: Optional[datetime] = None
    user_end_date: Optional[datetime] = None
    meeting_hub_event: bool = False
    link: Optional[str] = None
    hall_id: Optional[str] = None
    from_time: Optional[time] = None
    to_time: Optional[time] = None
    duration: Optional[int] = None
    specific_dates: List[date] = Field(default_factory=list)
    language: Optional[str] = None

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: Optional[int]) -> Optional[int]:
        """Ensure the requested duration is a multiple of 15."""
        if value is not None and not is_valid_duration(value):
            raise ValueError(f"duration must be a positive multiple of 15, got {value}")
        return value

    @field_validator("page")
    @classmethod
    def validate_page(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError("page must be 1 or greater")
        return value

    def has_user_range(self) -> bool:
        return self.user_start_date is not None and self.user_end_date is not None

    def has_participants(self) -> bool:
        return bool(self.contact_id or self.host_ids or self.guest_ids)

    def record_contact_ids(self) -> List[str]:
        """
        Contacts whose one-off records apply, deduplicated in order.

        The requester only counts outside the meeting hub.
        """
        ids: List[str] = []
        if not self.meeting_hub_event and self.contact_id:
            ids.append(self.contact_id)
        ids.extend(self.host_ids)
        ids.extend(self.guest_ids)
        return list(dict.fromkeys(contact_id for contact_id in ids if contact_id))

    def profile_contact_ids(self) -> List[str]:
        """Contacts whose recurring profiles apply: guests, then hosts or the requester."""
        ids: List[str] = list(self.guest_ids)
        if self.host_ids:
            ids.extend(self.host_ids)
        elif self.contact_id:
            ids.append(self.contact_id)
        return list(dict.fromkeys(contact_id for contact_id in ids if contact_id))

    def participant_ids(self) -> List[str]:
        """Host and guest ids, deduplicated in order."""
        ids = [contact_id for contact_id in self.host_ids + self.guest_ids if contact_id]
        return list(dict.fromkeys(ids))
