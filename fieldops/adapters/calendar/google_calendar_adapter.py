"""Google Calendar adapter — implements CalendarPort over the REST API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta

import httpx

from fieldops.application.calendar_session import CalendarSession
from fieldops.application.errors import (
    CalendarAuthError,
    CalendarError,
    CalendarNotConnectedError,
)
from fieldops.application.ports.calendar_port import CalendarPort, NewCalendarEvent
from fieldops.config import settings
from fieldops.domain.entities.calendar_event import CalendarEvent, EventTime

logger = logging.getLogger(__name__)

EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events"
USERINFO_URL = "https://www.googleapis.com/oauth2/v1/userinfo"
REVOKE_URL = "https://oauth2.googleapis.com/revoke"

SCHEDULED_PREFIX = "🛠️ "
DONE_PREFIX = "✅ "
DONE_COLOR_ID = "10"  # basil green
MAX_RESULTS = 250


def _parse_value(raw, parse, event_id):
    if not raw:
        return None
    try:
        return parse(raw)
    except (TypeError, ValueError):
        # Malformed values read like missing ones
        logger.warning("Calendar event %s: unparseable date %r", event_id, raw)
        return None


def _parse_time(raw: dict | None, event_id: str | None = None) -> EventTime:
    raw = raw or {}
    return EventTime(
        timestamp=_parse_value(raw.get("dateTime"), datetime.fromisoformat, event_id),
        day=_parse_value(raw.get("date"), date.fromisoformat, event_id),
    )


def parse_event(item: dict) -> CalendarEvent:
    """Map one Google Calendar ``events`` resource to a CalendarEvent.

    Items are not validated: a missing id stays ``None`` and a date that
    cannot be parsed becomes ``None``, the same as a missing one.
    """
    event_id = item.get("id")
    return CalendarEvent(
        id=event_id,
        summary=item.get("summary"),
        start=_parse_time(item.get("start"), event_id),
        end=_parse_time(item.get("end"), event_id),
        html_link=item.get("htmlLink"),
        description=item.get("description"),
        location=item.get("location"),
    )


def fetch_window_start(today: date) -> date:
    """First day of the previous month."""
    first = today.replace(day=1)
    return (first - timedelta(days=1)).replace(day=1)


def _rfc3339(day: date) -> str:
    return datetime.combine(day, time.min).astimezone().isoformat()


class GoogleCalendarAdapter(CalendarPort):
    """Google Calendar implementation of CalendarPort.

    Uses the token held by the injected CalendarSession; a 401 from the API
    expires the session so callers see "not connected" from then on.
    """

    def __init__(
        self,
        session: CalendarSession,
        calendar_id: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._session = session
        self._events_url = EVENTS_URL.format(calendar_id=calendar_id or settings.google_calendar_id)
        self._timeout = timeout or settings.calendar_timeout
        self._transport = transport
        self._today = today

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    def _auth_headers(self) -> dict[str, str]:
        token = self._session.access_token
        if token is None:
            raise CalendarNotConnectedError()
        return {"Authorization": f"Bearer {token}"}

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code == 401:
            self._session.expire()
            raise CalendarAuthError()
        if response.is_error:
            try:
                message = response.json().get("error", {}).get("message")
            except ValueError:
                message = None
            message = message or response.reason_phrase
            if response.status_code == 403:
                logger.error("Calendar permission denied, the account must be reconnected")
            logger.error("Google Calendar API error %d: %s", response.status_code, message)
            raise CalendarError(f"Google Calendar API error: {message}")

    def is_connected(self) -> bool:
        return self._session.is_valid()

    async def list_upcoming_events(self) -> list[CalendarEvent]:
        headers = self._auth_headers()
        params = {
            "timeMin": _rfc3339(fetch_window_start(self._today())),
            "showDeleted": "false",
            "singleEvents": "true",
            "maxResults": MAX_RESULTS,
            "orderBy": "startTime",
        }
        async with self._client() as client:
            response = await client.get(self._events_url, params=params, headers=headers)
        self._raise_for_status(response)

        items = response.json().get("items") or []
        logger.info("Fetched %d calendar events", len(items))
        return [parse_event(item) for item in items]

    async def create_event(self, event: NewCalendarEvent) -> CalendarEvent:
        headers = self._auth_headers()
        body = {
            "summary": f"{SCHEDULED_PREFIX}{event.title}",
            "description": event.description,
            "location": event.location,
            "start": {"date": event.day.isoformat()},
            "end": {"date": (event.day + timedelta(days=1)).isoformat()},
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 30},
                ],
            },
        }
        async with self._client() as client:
            response = await client.post(self._events_url, json=body, headers=headers)
        self._raise_for_status(response)

        created = parse_event(response.json())
        logger.info("Calendar event %s created for %s", created.id, event.day.isoformat())
        return created

    async def mark_event_done(self, title: str, day: date) -> bool:
        headers = self._auth_headers()
        params = {
            "timeMin": _rfc3339(day),
            "timeMax": _rfc3339(day + timedelta(days=1)),
            "q": title,
            "singleEvents": "true",
        }
        async with self._client() as client:
            response = await client.get(self._events_url, params=params, headers=headers)
            self._raise_for_status(response)

            match = next(
                (
                    item for item in response.json().get("items") or []
                    if item.get("id")
                    and title in (item.get("summary") or "")
                    and not (item.get("summary") or "").startswith(DONE_PREFIX)
                ),
                None,
            )
            if match is None:
                return False

            patch = await client.patch(
                f"{self._events_url}/{match['id']}",
                json={"summary": f"{DONE_PREFIX}{title}", "colorId": DONE_COLOR_ID},
                headers=headers,
            )
            self._raise_for_status(patch)

        logger.info("Calendar event %s marked as done", match["id"])
        return True

    async def get_user_profile(self) -> dict | None:
        if not self._session.is_valid():
            return None
        try:
            async with self._client() as client:
                response = await client.get(
                    USERINFO_URL, params={"alt": "json"}, headers=self._auth_headers()
                )
            if response.status_code == 401:
                self._session.expire()
                return None
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError:
            logger.exception("Could not fetch the calendar account profile")
            return None

    async def disconnect(self) -> None:
        token = self._session.logout()
        if not token:
            return
        try:
            async with self._client() as client:
                await client.post(REVOKE_URL, params={"token": token})
            logger.info("Calendar access token revoked")
        except httpx.HTTPError:
            logger.exception("Calendar token revocation failed")
