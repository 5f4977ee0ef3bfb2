"""Tests for the maintenance calendar view and pending tickets."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from fieldops.application.errors import CalendarAuthError, CalendarError
from fieldops.application.use_cases.maintenance_calendar import (
    BuildCalendarUseCase,
    ListPendingTicketsUseCase,
)
from fieldops.domain.entities.calendar_event import CalendarEvent, EventTime
from fieldops.domain.value_objects.enums import EventSource, TicketStatus
from tests.fakes import FakeCalendar, FakeTicketRepo, make_ticket


def _tickets():
    return FakeTicketRepo(
        [
            make_ticket(1, status=TicketStatus.SCHEDULED, scheduled_date=date(2026, 3, 10)),
            make_ticket(2, status=TicketStatus.CLOSED, scheduled_date=date(2026, 3, 2)),
            make_ticket(3, status=TicketStatus.NEW),
            make_ticket(4, status=TicketStatus.IN_PROGRESS),
        ]
    )


EXTERNAL = CalendarEvent(
    id="ext1",
    summary="Team meeting",
    start=EventTime(timestamp=datetime(2026, 3, 9, 14, 0)),
    end=EventTime(timestamp=datetime(2026, 3, 9, 15, 0)),
)


@pytest.mark.asyncio
async def test_view_merges_tickets_and_external_events():
    view = await BuildCalendarUseCase(_tickets(), FakeCalendar(events=[EXTERNAL])).execute()

    assert view.calendar_connected
    assert view.warning is None
    assert [(e.source, e.ref_id) for e in view.events] == [
        (EventSource.TICKET, "1"),
        (EventSource.TICKET, "2"),
        (EventSource.EXTERNAL, "ext1"),
    ]


@pytest.mark.asyncio
async def test_disconnected_calendar_shows_tickets_only():
    view = await BuildCalendarUseCase(_tickets(), FakeCalendar(connected=False)).execute()

    assert not view.calendar_connected
    assert view.warning is None
    assert len(view.events) == 2


@pytest.mark.asyncio
async def test_expired_token_disconnects_with_warning():
    calendar = FakeCalendar(error=CalendarAuthError())
    view = await BuildCalendarUseCase(_tickets(), calendar).execute()

    assert not view.calendar_connected
    assert "expired" in view.warning
    assert len(view.events) == 2


@pytest.mark.asyncio
async def test_calendar_failure_is_not_fatal():
    calendar = FakeCalendar(error=CalendarError("backend error"))
    view = await BuildCalendarUseCase(_tickets(), calendar).execute()

    assert view.calendar_connected
    assert view.warning == "Calendar sync failed"
    assert len(view.events) == 2


@pytest.mark.asyncio
async def test_pending_tickets():
    pending = await ListPendingTicketsUseCase(_tickets()).execute()
    assert sorted(t.id for t in pending) == [3, 4]
