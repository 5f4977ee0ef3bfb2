"""Ticket entity — a unit of requested or performed field service work."""

from dataclasses import dataclass, field
from datetime import date, datetime

from fieldops.domain.value_objects.enums import Priority, TicketStatus
from fieldops.domain.value_objects.geo_point import GeoPoint


@dataclass
class Ticket:
    id: int | None
    client_id: int
    module_id: int
    title: str
    description: str
    status: TicketStatus = TicketStatus.NEW
    priority: Priority = Priority.MEDIUM
    affected_part: str | None = None
    created_at: datetime | None = None
    scheduled_date: date | None = None
    photos: list[str] = field(default_factory=list)
    audio_url: str | None = None
    closure_description: str | None = None
    closure_photos: list[str] = field(default_factory=list)
    closure_audio_url: str | None = None
    invoices: list[str] = field(default_factory=list)

    # Read-side enrichment filled in by the ticket store
    client_name: str | None = None
    module_serial: str | None = None
    location: GeoPoint | None = None
    address: str | None = None
    warranty_expiration: date | None = None

    def is_pending(self) -> bool:
        return self.status in (TicketStatus.NEW, TicketStatus.IN_PROGRESS)

    def is_closed(self) -> bool:
        return self.status == TicketStatus.CLOSED

    def is_out_of_warranty(self) -> bool:
        """True when the ticket was opened after the module's warranty ended."""
        if self.warranty_expiration is None or self.created_at is None:
            return False
        return self.created_at.date() > self.warranty_expiration

    def calendar_title(self) -> str:
        return f"{self.title} - {self.client_name}"
