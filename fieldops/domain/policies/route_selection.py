"""RouteSelectionPolicy — which tickets belong on a given day's route."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from fieldops.domain.entities.ticket import Ticket

# A route needs an origin and a destination
MIN_ROUTE_STOPS = 2


def _as_day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_route_stop(ticket: Ticket, day: date) -> bool:
    """Dated for ``day`` and geolocated. Ticket status is not considered."""
    if ticket.scheduled_date is None or ticket.location is None:
        return False
    return _as_day(ticket.scheduled_date) == _as_day(day)


def select_route_stops(tickets: Iterable[Ticket], day: date | datetime) -> list[Ticket]:
    """Filter tickets eligible for the route of ``day``.

    Keeps the order the ticket store returned them in; no distance or
    priority sorting is applied.
    """
    return [t for t in tickets if is_route_stop(t, day)]


def can_open_route(stops: list[Ticket]) -> bool:
    return len(stops) >= MIN_ROUTE_STOPS
