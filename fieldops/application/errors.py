"""Application-level exceptions, translated to HTTP errors by the API layer."""


class FieldOpsError(Exception):
    """Base class for errors raised by use cases and adapters."""


class EntityNotFoundError(FieldOpsError):
    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class RouteUnavailableError(FieldOpsError):
    """Fewer than two geolocated stops are scheduled for the requested day."""

    def __init__(self, day, stop_count: int):
        super().__init__(
            f"No route for {day.isoformat()}: {stop_count} geolocated stop(s) scheduled, "
            "at least 2 required"
        )
        self.day = day
        self.stop_count = stop_count


class CalendarError(FieldOpsError):
    """The external calendar service rejected or failed a request."""


class CalendarNotConnectedError(CalendarError):
    def __init__(self) -> None:
        super().__init__("Calendar account is not connected")


class CalendarAuthError(CalendarError):
    """The access token was rejected; the session has been cleared."""

    def __init__(self) -> None:
        super().__init__("TOKEN_EXPIRED")


class StorageError(FieldOpsError):
    """Upload to the object store failed."""
