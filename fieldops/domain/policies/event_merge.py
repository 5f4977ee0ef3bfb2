"""EventMergePolicy — one timeline out of scheduled tickets and external events."""

from __future__ import annotations

from collections.abc import Iterable

from fieldops.domain.entities.calendar_event import CalendarEvent, DisplayEvent
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.value_objects.enums import EventSource, TicketStatus

# Title shown for external events that carry no summary
BUSY_TITLE = "Busy"

_CALENDAR_STATUSES = (TicketStatus.SCHEDULED, TicketStatus.CLOSED)


def is_calendar_ticket(ticket: Ticket) -> bool:
    """A ticket is shown on the calendar when it is Scheduled or Closed and dated."""
    return ticket.status in _CALENDAR_STATUSES and ticket.scheduled_date is not None


def ticket_to_event(ticket: Ticket) -> DisplayEvent:
    # Tickets are not time-sliced: the whole scheduled day is the event
    return DisplayEvent(
        title=ticket.calendar_title(),
        start=ticket.scheduled_date,
        end=ticket.scheduled_date,
        all_day=True,
        source=EventSource.TICKET,
        ref_id=str(ticket.id),
    )


def external_to_event(event: CalendarEvent) -> DisplayEvent:
    return DisplayEvent(
        title=event.summary or BUSY_TITLE,
        start=event.start.value(),
        end=event.end.value(),
        all_day=event.start.timestamp is None,
        source=EventSource.EXTERNAL,
        ref_id=event.id,
        link=event.html_link,
    )


def merge_events(
    tickets: Iterable[Ticket],
    external_events: Iterable[CalendarEvent],
) -> list[DisplayEvent]:
    """Pure function: build the displayable timeline.

    Every qualifying ticket and every external event yields exactly one
    DisplayEvent; nothing is deduplicated or dropped. External events are
    passed through unvalidated, so a missing date field gives ``None``.
    Output order is ticket events first, then external events.
    """
    merged = [ticket_to_event(t) for t in tickets if is_calendar_ticket(t)]
    merged.extend(external_to_event(e) for e in external_events)
    return merged
