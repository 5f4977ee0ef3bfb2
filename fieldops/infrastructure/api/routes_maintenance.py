"""Maintenance endpoints — merged calendar, daily route, calendar account."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.database import get_session
from fieldops.application.calendar_session import CalendarSession
from fieldops.application.ports.calendar_port import CalendarPort
from fieldops.application.use_cases.maintenance_calendar import BuildCalendarUseCase
from fieldops.application.use_cases.plan_route import PlanRouteUseCase
from fieldops.application.use_cases.ticket_lifecycle import CompleteRouteStopUseCase
from fieldops.config import settings
from fieldops.infrastructure.api.dependencies import (
    get_build_calendar_uc,
    get_calendar,
    get_calendar_session,
    get_complete_stop_uc,
    get_plan_route_uc,
)
from fieldops.infrastructure.api.serializers import (
    serialize_display_event,
    serialize_route_links,
    serialize_ticket,
)

router = APIRouter(tags=["maintenance"])


class CalendarLogin(BaseModel):
    access_token: str = Field(min_length=1)
    expires_in: int | None = Field(default=None, gt=0)


# ─── Calendar & route ────────────────────────────────────────────────


@router.get("/maintenance/calendar")
async def maintenance_calendar(uc: BuildCalendarUseCase = Depends(get_build_calendar_uc)):
    """Scheduled/closed visits merged with the connected calendar's events."""
    view = await uc.execute()
    return {
        "calendar_connected": view.calendar_connected,
        "warning": view.warning,
        "total": len(view.events),
        "events": [serialize_display_event(e) for e in view.events],
    }


@router.get("/maintenance/route")
async def maintenance_route(
    day: date | None = Query(None, description="Route day (YYYY-MM-DD), defaults to today"),
    uc: PlanRouteUseCase = Depends(get_plan_route_uc),
):
    """Ordered stops of one day with embed and navigation links.

    Answers 409 when fewer than two geolocated visits are scheduled.
    """
    plan = await uc.execute(day)
    return {
        "day": plan.day.isoformat(),
        "stops": [
            {**serialize_ticket(s.ticket), "location_url": s.location_url} for s in plan.stops
        ],
        "links": serialize_route_links(plan.links),
    }


@router.post("/maintenance/route/stops/{ticket_id}/complete")
async def complete_route_stop(
    ticket_id: int,
    uc: CompleteRouteStopUseCase = Depends(get_complete_stop_uc),
    session: AsyncSession = Depends(get_session),
):
    ticket = await uc.execute(ticket_id)
    await session.commit()
    return serialize_ticket(ticket)


# ─── Calendar account ────────────────────────────────────────────────


@router.get("/calendar/session")
async def calendar_session_status(
    calendar_session: CalendarSession = Depends(get_calendar_session),
    calendar: CalendarPort = Depends(get_calendar),
):
    connected = calendar_session.is_valid()
    return {
        "connected": connected,
        "expires_at": calendar_session.expires_at if connected else None,
        "client_id": settings.google_client_id,
        "profile": await calendar.get_user_profile() if connected else None,
    }


@router.post("/calendar/session")
async def calendar_login(
    body: CalendarLogin,
    calendar_session: CalendarSession = Depends(get_calendar_session),
):
    """Hand over the access token obtained by the browser OAuth flow."""
    calendar_session.login(body.access_token, body.expires_in)
    return {"connected": True, "expires_at": calendar_session.expires_at}


@router.delete("/calendar/session")
async def calendar_logout(calendar: CalendarPort = Depends(get_calendar)):
    await calendar.disconnect()
    return {"connected": False}
