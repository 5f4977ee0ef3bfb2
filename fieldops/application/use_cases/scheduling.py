"""ScheduleTicketUseCase — date a ticket and mirror it to the external calendar."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.ports.calendar_port import CalendarPort, NewCalendarEvent
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.policies.route_links import location_search_link
from fieldops.domain.value_objects.enums import TicketStatus

logger = logging.getLogger(__name__)


@dataclass
class ScheduleResult:
    """Outcome of scheduling one ticket.

    The local update always succeeds when a result is returned; the calendar
    mirror may not, in which case ``calendar_error`` says why.
    """

    ticket: Ticket
    calendar_synced: bool
    calendar_error: str | None = None


def build_calendar_event(ticket: Ticket, day: date) -> NewCalendarEvent:
    """Describe the all-day calendar entry for a scheduled visit."""
    if ticket.location is not None:
        location = location_search_link(ticket.location)
    else:
        location = ticket.address or ""

    description = (
        f"Client: {ticket.client_name}\n"
        f"Module: {ticket.module_serial}\n"
        f"Description: {ticket.description}"
    )
    return NewCalendarEvent(
        title=ticket.calendar_title(),
        description=description,
        day=day,
        location=location,
    )


class ScheduleTicketUseCase:
    """Sets status Scheduled + date, then best-effort calendar sync."""

    def __init__(self, ticket_repo: TicketRepository, calendar: CalendarPort):
        self._tickets = ticket_repo
        self._calendar = calendar

    async def execute(
        self, ticket_id: int, day: date, sync_calendar: bool = True
    ) -> ScheduleResult:
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise EntityNotFoundError("Ticket", ticket_id)

        ticket.status = TicketStatus.SCHEDULED
        ticket.scheduled_date = day
        await self._tickets.update(ticket)
        logger.info("Ticket %d scheduled for %s", ticket_id, day.isoformat())

        if not sync_calendar:
            return ScheduleResult(ticket=ticket, calendar_synced=False)

        if not self._calendar.is_connected():
            logger.info("Ticket %d: calendar not connected, skipping sync", ticket_id)
            return ScheduleResult(
                ticket=ticket,
                calendar_synced=False,
                calendar_error="Calendar account is not connected",
            )

        # The two stores may diverge here: the schedule is kept even if the mirror fails
        try:
            await self._calendar.create_event(build_calendar_event(ticket, day))
        except Exception as e:
            logger.exception("Ticket %d: calendar sync failed", ticket_id)
            return ScheduleResult(ticket=ticket, calendar_synced=False, calendar_error=str(e))

        return ScheduleResult(ticket=ticket, calendar_synced=True)
