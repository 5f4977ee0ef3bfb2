"""PlanRouteUseCase — the ordered visits of one day and their map links."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from fieldops.application.errors import RouteUnavailableError
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.policies.route_links import RouteLinks, build_route_links, location_link
from fieldops.domain.policies.route_selection import can_open_route, select_route_stops

logger = logging.getLogger(__name__)


@dataclass
class RouteStop:
    ticket: Ticket
    location_url: str


@dataclass
class RoutePlan:
    day: date
    stops: list[RouteStop]
    links: RouteLinks


class PlanRouteUseCase:
    def __init__(self, ticket_repo: TicketRepository, maps_api_key: str):
        self._tickets = ticket_repo
        self._api_key = maps_api_key

    async def execute(self, day: date | None = None) -> RoutePlan:
        """Build the route for ``day`` (defaults to today's local date).

        Raises:
            RouteUnavailableError: if fewer than 2 geolocated tickets are
                scheduled for that day.
        """
        day = day or date.today()
        tickets = await self._tickets.get_all()
        selected = select_route_stops(tickets, day)

        if not can_open_route(selected):
            logger.info("Route for %s refused: %d stop(s)", day.isoformat(), len(selected))
            raise RouteUnavailableError(day, len(selected))

        links = build_route_links([t.location for t in selected], self._api_key)
        logger.info("Route for %s: %d stops", day.isoformat(), len(selected))
        return RoutePlan(
            day=day,
            stops=[RouteStop(ticket=t, location_url=location_link(t.location)) for t in selected],
            links=links,
        )
