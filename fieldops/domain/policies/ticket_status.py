"""TicketStatusPolicy — field changes implied by a status transition."""

from __future__ import annotations

from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.value_objects.enums import TicketStatus


def apply_status_change(ticket: Ticket, status: TicketStatus) -> Ticket:
    """Generic status transition.

    Any transition freely allowed; moving to a status other than Scheduled
    clears the scheduled date, Closed included. The closure workflow does
    not go through here and keeps the date.
    """
    ticket.status = status
    if status != TicketStatus.SCHEDULED:
        ticket.scheduled_date = None
    return ticket


def apply_closure(
    ticket: Ticket,
    description: str,
    photos: list[str],
    audio_url: str | None,
) -> Ticket:
    if not description or not description.strip():
        raise ValueError("A closure description is required to close a ticket")
    ticket.status = TicketStatus.CLOSED
    ticket.closure_description = description.strip()
    ticket.closure_photos = list(photos)
    ticket.closure_audio_url = audio_url
    return ticket
