"""Tests for GoogleCalendarAdapter against a mocked Google API (no network)."""

from __future__ import annotations

import json
from datetime import date, datetime

import httpx
import pytest

from fieldops.adapters.calendar.google_calendar_adapter import (
    DONE_COLOR_ID,
    GoogleCalendarAdapter,
    fetch_window_start,
    parse_event,
)
from fieldops.application.calendar_session import CalendarSession
from fieldops.application.errors import (
    CalendarAuthError,
    CalendarError,
    CalendarNotConnectedError,
)
from fieldops.application.ports.calendar_port import NewCalendarEvent
from fieldops.application.use_cases.maintenance_calendar import BuildCalendarUseCase
from fieldops.domain.value_objects.enums import TicketStatus
from tests.fakes import FakeTicketRepo, make_ticket

EVENTS_PATH = "/calendar/v3/calendars/primary/events"


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response):
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)


def _adapter(handler, logged_in=True, today=date(2026, 3, 15)):
    session = CalendarSession()
    if logged_in:
        session.login("tok-123")
    adapter = GoogleCalendarAdapter(
        session,
        calendar_id="primary",
        transport=httpx.MockTransport(handler),
        today=lambda: today,
    )
    return adapter, session


# ─── Parsing ─────────────────────────────────────────────────────────


def test_parse_timed_and_all_day_events():
    timed = parse_event(
        {
            "id": "a",
            "summary": "Meeting",
            "start": {"dateTime": "2026-03-10T09:00:00-03:00"},
            "end": {"dateTime": "2026-03-10T10:00:00-03:00"},
            "htmlLink": "https://calendar.google.com/event?eid=a",
        }
    )
    assert isinstance(timed.start.timestamp, datetime)
    assert timed.start.day is None
    assert timed.html_link.endswith("eid=a")

    all_day = parse_event({"id": "b", "start": {"date": "2026-03-11"}, "end": {"date": "2026-03-12"}})
    assert all_day.summary is None
    assert all_day.start.timestamp is None
    assert all_day.start.day == date(2026, 3, 11)


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2026, 3, 15), date(2026, 2, 1)),
        (date(2026, 1, 1), date(2025, 12, 1)),
        (date(2026, 3, 31), date(2026, 2, 1)),
    ],
)
def test_fetch_window_starts_previous_month(today, expected):
    assert fetch_window_start(today) == expected


# ─── Listing ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_upcoming_events_query():
    handler = Recorder(
        httpx.Response(
            200,
            json={"items": [{"id": "a", "summary": "x", "start": {"date": "2026-03-01"}, "end": {}}]},
        )
    )
    adapter, _ = _adapter(handler)

    events = await adapter.list_upcoming_events()

    assert [e.id for e in events] == ["a"]
    request = handler.requests[0]
    assert request.url.path == EVENTS_PATH
    assert request.headers["Authorization"] == "Bearer tok-123"
    params = request.url.params
    assert params["timeMin"].startswith("2026-02-01T00:00:00")
    assert params["singleEvents"] == "true"
    assert params["orderBy"] == "startTime"
    assert params["showDeleted"] == "false"
    assert params["maxResults"] == "250"


MALFORMED_ITEMS = [
    {"id": "ok", "summary": "Dentist", "start": {"date": "2026-03-02"}, "end": {"date": "2026-03-03"}},
    {"id": "bad", "summary": "Broken", "start": {"dateTime": "not-a-date"}, "end": {"date": "31/03"}},
    {"summary": "No id", "start": {"dateTime": "2026-03-04T10:00:00Z"}, "end": {}},
]


def test_parse_malformed_items_keeps_them():
    bad = parse_event(MALFORMED_ITEMS[1])
    assert bad.id == "bad"
    assert bad.start.value() is None
    assert bad.end.value() is None

    no_id = parse_event(MALFORMED_ITEMS[2])
    assert no_id.id is None
    assert no_id.start.timestamp == datetime.fromisoformat("2026-03-04T10:00:00+00:00")


@pytest.mark.asyncio
async def test_malformed_items_do_not_drop_the_others():
    adapter, _ = _adapter(Recorder(httpx.Response(200, json={"items": MALFORMED_ITEMS})))

    events = await adapter.list_upcoming_events()

    assert [e.id for e in events] == ["ok", "bad", None]
    assert events[0].start.day == date(2026, 3, 2)


@pytest.mark.asyncio
async def test_calendar_view_counts_every_external_event():
    adapter, _ = _adapter(Recorder(httpx.Response(200, json={"items": MALFORMED_ITEMS})))
    tickets = FakeTicketRepo(
        [make_ticket(1, status=TicketStatus.SCHEDULED, scheduled_date=date(2026, 3, 10))]
    )

    view = await BuildCalendarUseCase(tickets, adapter).execute()

    assert view.warning is None
    assert len(view.events) == 1 + len(MALFORMED_ITEMS)
    assert [e.title for e in view.events[1:]] == ["Dentist", "Broken", "No id"]
    assert view.events[2].start is None


@pytest.mark.asyncio
async def test_mark_done_skips_items_without_id():
    handler = Recorder(
        httpx.Response(200, json={"items": [{"summary": "Leak - Acme"}]}),
    )
    adapter, _ = _adapter(handler)

    assert await adapter.mark_event_done("Leak - Acme", date(2026, 3, 10)) is False
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_list_without_session_raises():
    adapter, _ = _adapter(Recorder(), logged_in=False)
    with pytest.raises(CalendarNotConnectedError):
        await adapter.list_upcoming_events()


@pytest.mark.asyncio
async def test_unauthorized_expires_session():
    adapter, session = _adapter(Recorder(httpx.Response(401, json={"error": {"message": "bad"}})))

    with pytest.raises(CalendarAuthError):
        await adapter.list_upcoming_events()
    assert not session.is_valid()
    assert not adapter.is_connected()


@pytest.mark.asyncio
async def test_api_error_message_is_surfaced():
    adapter, session = _adapter(
        Recorder(httpx.Response(403, json={"error": {"message": "Insufficient Permission"}}))
    )
    with pytest.raises(CalendarError, match="Insufficient Permission"):
        await adapter.list_upcoming_events()
    assert session.is_valid()


# ─── Writing ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_all_day_event_with_reminders():
    handler = Recorder(
        httpx.Response(
            200,
            json={"id": "new1", "summary": "🛠️ Leak - Acme",
                  "start": {"date": "2026-03-10"}, "end": {"date": "2026-03-11"}},
        )
    )
    adapter, _ = _adapter(handler)

    created = await adapter.create_event(
        NewCalendarEvent(title="Leak - Acme", description="d", day=date(2026, 3, 10), location="loc")
    )

    assert created.id == "new1"
    body = json.loads(handler.requests[0].content)
    assert body["summary"] == "🛠️ Leak - Acme"
    assert body["start"] == {"date": "2026-03-10"}
    assert body["end"] == {"date": "2026-03-11"}
    assert body["location"] == "loc"
    assert body["reminders"]["useDefault"] is False
    assert {o["method"]: o["minutes"] for o in body["reminders"]["overrides"]} == {
        "email": 1440,
        "popup": 30,
    }


@pytest.mark.asyncio
async def test_mark_event_done_patches_matching_event():
    handler = Recorder(
        httpx.Response(
            200,
            json={"items": [
                {"id": "old", "summary": "✅ Leak - Acme"},
                {"id": "e1", "summary": "🛠️ Leak - Acme"},
            ]},
        ),
        httpx.Response(200, json={"id": "e1"}),
    )
    adapter, _ = _adapter(handler)

    assert await adapter.mark_event_done("Leak - Acme", date(2026, 3, 10))

    search, patch = handler.requests
    assert search.url.params["q"] == "Leak - Acme"
    assert patch.method == "PATCH"
    assert patch.url.path == f"{EVENTS_PATH}/e1"
    assert json.loads(patch.content) == {"summary": "✅ Leak - Acme", "colorId": DONE_COLOR_ID}


@pytest.mark.asyncio
async def test_mark_event_done_without_match():
    handler = Recorder(httpx.Response(200, json={"items": []}))
    adapter, _ = _adapter(handler)
    assert not await adapter.mark_event_done("Leak - Acme", date(2026, 3, 10))
    assert len(handler.requests) == 1


# ─── Account ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_user_profile():
    adapter, _ = _adapter(Recorder(httpx.Response(200, json={"email": "tech@example.com"})))
    assert await adapter.get_user_profile() == {"email": "tech@example.com"}


@pytest.mark.asyncio
async def test_user_profile_unauthorized():
    adapter, session = _adapter(Recorder(httpx.Response(401)))
    assert await adapter.get_user_profile() is None
    assert not session.is_valid()


@pytest.mark.asyncio
async def test_disconnect_revokes_token():
    handler = Recorder(httpx.Response(200))
    adapter, session = _adapter(handler)

    await adapter.disconnect()

    assert not session.is_valid()
    assert handler.requests[0].url.params["token"] == "tok-123"


@pytest.mark.asyncio
async def test_disconnect_survives_revoke_failure():
    def failing(request):
        raise httpx.ConnectError("offline", request=request)

    adapter, session = _adapter(failing)
    await adapter.disconnect()
    assert not session.is_valid()
