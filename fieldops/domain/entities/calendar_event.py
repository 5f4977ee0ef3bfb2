"""Calendar events — external read-only events and the derived display events."""

from dataclasses import dataclass
from datetime import date, datetime

from fieldops.domain.value_objects.enums import EventSource


@dataclass(frozen=True)
class EventTime:
    """Either a timestamp or a date-only ("all-day") value."""

    timestamp: datetime | None = None
    day: date | None = None

    def value(self) -> datetime | date | None:
        return self.timestamp if self.timestamp is not None else self.day


@dataclass
class CalendarEvent:
    """An event owned by the external calendar service."""

    id: str | None
    summary: str | None
    start: EventTime
    end: EventTime
    html_link: str | None = None
    description: str | None = None
    location: str | None = None


@dataclass
class DisplayEvent:
    """One entry of the merged maintenance timeline. Never persisted."""

    title: str
    start: datetime | date | None
    end: datetime | date | None
    all_day: bool
    source: EventSource
    ref_id: str | None
    link: str | None = None
