"""Global exception handlers — application errors to HTTP status codes."""

import logging

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from fieldops.application.errors import (
    CalendarAuthError,
    CalendarError,
    CalendarNotConnectedError,
    EntityNotFoundError,
    RouteUnavailableError,
    StorageError,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "detail": message})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError):
        return _error(404, "not_found", str(exc))

    @app.exception_handler(RouteUnavailableError)
    async def route_unavailable_handler(request: Request, exc: RouteUnavailableError):
        return _error(409, "route_unavailable", str(exc))

    @app.exception_handler(CalendarNotConnectedError)
    async def calendar_not_connected_handler(request: Request, exc: CalendarNotConnectedError):
        return _error(409, "calendar_not_connected", str(exc))

    @app.exception_handler(CalendarAuthError)
    async def calendar_auth_handler(request: Request, exc: CalendarAuthError):
        return _error(401, "calendar_token_expired", str(exc))

    @app.exception_handler(CalendarError)
    async def calendar_error_handler(request: Request, exc: CalendarError):
        return _error(502, "calendar_error", str(exc))

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage error: %s", exc)
        return _error(502, "storage_error", str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(400, "invalid_request", str(exc))
