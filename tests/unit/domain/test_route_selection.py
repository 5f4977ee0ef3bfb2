"""Tests for route stop selection."""

from datetime import date, datetime

from fieldops.domain.policies.route_selection import (
    can_open_route,
    is_route_stop,
    select_route_stops,
)
from fieldops.domain.value_objects.enums import TicketStatus
from fieldops.domain.value_objects.geo_point import GeoPoint
from tests.fakes import make_ticket

TODAY = date(2026, 3, 10)
SITE = GeoPoint(latitude=-32.89, longitude=-68.84)


def test_selects_only_dated_geolocated_tickets_in_order():
    """5 tickets, 2 eligible → exactly those 2, original order kept."""
    tickets = [
        make_ticket(id=1, scheduled_date=TODAY, location=None),
        make_ticket(id=2, scheduled_date=TODAY, location=SITE, status=TicketStatus.SCHEDULED),
        make_ticket(id=3, scheduled_date=date(2026, 3, 11), location=SITE),
        make_ticket(id=4, scheduled_date=None, location=SITE),
        make_ticket(id=5, scheduled_date=TODAY, location=GeoPoint(-33.0, -68.9), status=TicketStatus.CLOSED),
    ]
    stops = select_route_stops(tickets, TODAY)
    assert [t.id for t in stops] == [2, 5]


def test_status_is_ignored():
    for status in TicketStatus:
        assert is_route_stop(make_ticket(status=status, scheduled_date=TODAY, location=SITE), TODAY)


def test_datetime_day_matches_on_calendar_date():
    ticket = make_ticket(scheduled_date=TODAY, location=SITE)
    assert is_route_stop(ticket, datetime(2026, 3, 10, 18, 30))


def test_no_reordering_by_position():
    far = make_ticket(id=1, scheduled_date=TODAY, location=GeoPoint(10.0, 10.0))
    near = make_ticket(id=2, scheduled_date=TODAY, location=GeoPoint(0.0, 0.0))
    assert [t.id for t in select_route_stops([far, near], TODAY)] == [1, 2]


def test_route_needs_two_stops():
    one = [make_ticket(id=1, scheduled_date=TODAY, location=SITE)]
    assert not can_open_route([])
    assert not can_open_route(one)
    assert can_open_route(one * 2)
