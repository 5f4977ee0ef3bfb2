"""Maintenance calendar — merged timeline of visits and external events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fieldops.application.errors import CalendarAuthError
from fieldops.application.ports.calendar_port import CalendarPort
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.entities.calendar_event import CalendarEvent, DisplayEvent
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.policies.event_merge import merge_events
from fieldops.domain.value_objects.enums import TicketStatus

logger = logging.getLogger(__name__)


@dataclass
class CalendarView:
    events: list[DisplayEvent]
    calendar_connected: bool
    warning: str | None = None
    tickets: list[Ticket] = field(default_factory=list)


class BuildCalendarUseCase:
    """Fetch tickets and external events, then merge them.

    External calendar failures never fail the view: the ticket events are
    still returned and ``warning`` carries the reason.
    """

    def __init__(self, ticket_repo: TicketRepository, calendar: CalendarPort):
        self._tickets = ticket_repo
        self._calendar = calendar

    async def execute(self) -> CalendarView:
        tickets = await self._tickets.get_all()

        external: list[CalendarEvent] = []
        warning = None
        connected = self._calendar.is_connected()
        if connected:
            try:
                external = await self._calendar.list_upcoming_events()
            except CalendarAuthError:
                logger.warning("Calendar token expired while fetching events")
                connected = False
                warning = "Calendar session expired, reconnect the account"
            except Exception:
                logger.exception("Calendar sync error")
                warning = "Calendar sync failed"

        events = merge_events(tickets, external)
        logger.debug(
            "Calendar view: %d events (%d external)", len(events), len(external)
        )
        return CalendarView(
            events=events,
            calendar_connected=connected,
            warning=warning,
            tickets=tickets,
        )


class ListPendingTicketsUseCase:
    """Tickets still waiting for a visit (New or InProgress)."""

    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self) -> list[Ticket]:
        return await self._tickets.get_by_status(TicketStatus.NEW, TicketStatus.IN_PROGRESS)
