"""Port interface for the external calendar service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from fieldops.domain.entities.calendar_event import CalendarEvent


@dataclass(frozen=True)
class NewCalendarEvent:
    """All-day event mirrored from a scheduled ticket."""

    title: str
    description: str
    day: date
    location: str = ""


class CalendarPort(ABC):
    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def list_upcoming_events(self) -> list[CalendarEvent]:
        """Events from the first day of the previous month on, ordered by start.

        Raises:
            CalendarNotConnectedError: without a valid session.
            CalendarAuthError: when the token is rejected (session is cleared).
            CalendarError: for any other API failure.
        """
        ...

    @abstractmethod
    async def create_event(self, event: NewCalendarEvent) -> CalendarEvent:
        ...

    @abstractmethod
    async def mark_event_done(self, title: str, day: date) -> bool:
        """Flag the event mirrored for ``title`` on ``day`` as done.

        Returns False when no matching event exists.
        """
        ...

    @abstractmethod
    async def get_user_profile(self) -> dict | None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the session and revoke its token."""
        ...
