"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.database import get_session
from fieldops.application.calendar_session import CalendarSession
from fieldops.infrastructure.api.dependencies import get_calendar_session

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    session: AsyncSession = Depends(get_session),
    calendar_session: CalendarSession = Depends(get_calendar_session),
):
    """Check API and database connectivity."""
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {e}"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "calendar": "connected" if calendar_session.is_valid() else "disconnected",
        "service": "FieldOps - field service maintenance backend",
    }
