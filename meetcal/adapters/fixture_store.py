"""
File-backed collaborators for running the calendar without external services.
"""

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from pendulum import DateTime
from pydantic import BaseModel, Field

from ..domain.interval_algebra import sort_intervals, subtract_all
from ..domain.models import AvailableInterval, TimeInterval
from ..domain.profiles import UserAvailabilityProfile
from ..domain.timeutils import to_utc
from ..services.collaborators import RecordKind


class WindowData(BaseModel):
    start: datetime
    end: datetime

    def to_interval(self) -> TimeInterval:
        return TimeInterval(start=to_utc(self.start), end=to_utc(self.end))


class GroupData(WindowData):
    event_id: Optional[str] = None


class RecordData(WindowData):
    user_id: str
    event_id: Optional[str] = None
    kind: RecordKind = RecordKind.UNAVAILABLE


class TableData(BaseModel):
    id: str
    busy: List[WindowData] = Field(default_factory=list)


class FixtureData(BaseModel):
    """Root of a fixture file."""
    events: Dict[str, List[WindowData]] = Field(default_factory=dict)
    groups: Dict[str, List[GroupData]] = Field(default_factory=dict)
    records: List[RecordData] = Field(default_factory=list)
    profiles: List[UserAvailabilityProfile] = Field(default_factory=list)
    tables: Dict[str, List[TableData]] = Field(default_factory=dict)


class FixtureStore:
    """
    Implements every collaborator protocol from one YAML or JSON file.

    Useful for the CLI and for trying out scenarios; the lookups mimic the
    queries the real services run.
    """

    def __init__(self, data: FixtureData):
        self.data = data

    @classmethod
    def load(cls, path: Path) -> "FixtureStore":
        """
        Load fixture data from a YAML/JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the content is not a mapping
        """
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw: Any = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ValueError("Data file must contain a mapping at the root level.")

        return cls(FixtureData(**raw))

    async def get_event_timestamps(self, event_id: str) -> Optional[List[TimeInterval]]:
        windows = self.data.events.get(event_id)
        if windows is None:
            return None
        return sort_intervals(window.to_interval() for window in windows)

    async def get_groups_by_company(
        self,
        company_id: str,
        event_id: Optional[str],
        start: DateTime,
        end: DateTime,
    ) -> List[TimeInterval]:
        groups = []
        for group in self.data.groups.get(company_id, []):
            if event_id and group.event_id and group.event_id != event_id:
                continue
            interval = group.to_interval()
            if interval.start < end and interval.end > start:
                groups.append(interval)
        return sort_intervals(groups)

    async def find_records(
        self,
        user_ids: Sequence[str],
        event_id: Optional[str],
        start: DateTime,
        end: DateTime,
        kind: RecordKind,
    ) -> List[TimeInterval]:
        """
        UNAVAILABLE records match when they overlap ``[start, end)``; AVAILABLE records must lie fully inside the range.
        """
        matched = []

        for record in self.data.records:
            if record.kind != kind or record.user_id not in user_ids:
                continue
            if event_id and record.event_id and record.event_id != event_id:
                continue

            interval = record.to_interval()
            if kind == RecordKind.UNAVAILABLE:
                if interval.start < end and interval.end > start:
                    matched.append(interval)
            elif interval.start >= start and interval.end <= end:
                matched.append(interval)

        return sort_intervals(matched)

    async def find_profiles(
        self,
        contact_ids: Sequence[str],
        event_id: Optional[str] = None,
        link: Optional[str] = None,
    ) -> List[UserAvailabilityProfile]:
        if link:
            return [profile for profile in self.data.profiles if profile.link == link]

        profiles = []
        for contact_id in contact_ids:
            for profile in self.data.profiles:
                if profile.contact_id != contact_id or not profile.primary:
                    continue
                if event_id and profile.event_id and profile.event_id != event_id:
                    continue
                profiles.append(profile)
        return profiles

    async def annotate(
        self,
        available: List[AvailableInterval],
        hall_id: str,
        include_tables: bool,
        duration: Optional[int] = None,
    ) -> List[AvailableInterval]:
        """
        Keep intervals during which at least one table of the hall is free.

        A table counts as free when it has a gap of ``duration`` minutes in
        the interval, or the whole interval when no duration is given.
        """
        tables = self.data.tables.get(hall_id, [])
        annotated = []

        for interval in available:
            needed = duration * 60 if duration else interval.duration_seconds()
            free_ids = []

            for table in tables:
                gaps = subtract_all(interval, [busy.to_interval() for busy in table.busy])
                if any(gap.duration_seconds() >= needed for gap in gaps):
                    free_ids.append(table.id)

            if not free_ids:
                continue

            annotated.append(replace(interval, tables=tuple(free_ids)) if include_tables else interval)

        return annotated
