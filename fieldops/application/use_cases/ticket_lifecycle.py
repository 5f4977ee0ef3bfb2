"""Ticket lifecycle use cases — create, edit, status change, closure, invoices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.ports.calendar_port import CalendarPort
from fieldops.application.ports.file_storage_port import FileStoragePort, FileUpload
from fieldops.application.ports.module_repo import ModuleRepository
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.policies.file_names import timestamped_path
from fieldops.domain.policies.ticket_status import apply_closure, apply_status_change
from fieldops.domain.value_objects.enums import Priority, TicketStatus

logger = logging.getLogger(__name__)

PHOTOS_PREFIX = "tickets"
AUDIO_PREFIX = "tickets/audio"
CLOSURE_PREFIX = "tickets/closure"
INVOICES_PREFIX = "tickets/invoices"


async def _get_ticket(repo: TicketRepository, ticket_id: int) -> Ticket:
    ticket = await repo.get_by_id(ticket_id)
    if ticket is None:
        raise EntityNotFoundError("Ticket", ticket_id)
    return ticket


async def _upload_all(
    storage: FileStoragePort, prefix: str, files: list[FileUpload]
) -> list[str]:
    urls = []
    for f in files:
        urls.append(await storage.upload(timestamped_path(prefix, f.name), f.data, f.content_type))
    return urls


async def mark_done_in_calendar(calendar: CalendarPort, ticket: Ticket) -> bool:
    """Best-effort: flag the mirrored calendar event of a finished visit."""
    if ticket.scheduled_date is None or not calendar.is_connected():
        return False
    try:
        found = await calendar.mark_event_done(ticket.calendar_title(), ticket.scheduled_date)
    except Exception:
        logger.exception("Ticket %s: could not mark calendar event as done", ticket.id)
        return False
    if not found:
        logger.info("Ticket %s: no calendar event to mark as done", ticket.id)
    return found


class CreateTicketUseCase:
    def __init__(
        self,
        ticket_repo: TicketRepository,
        module_repo: ModuleRepository,
        storage: FileStoragePort,
    ):
        self._tickets = ticket_repo
        self._modules = module_repo
        self._storage = storage

    async def execute(
        self,
        client_id: int,
        module_id: int,
        title: str,
        description: str,
        priority: Priority = Priority.MEDIUM,
        affected_part: str | None = None,
        photos: list[FileUpload] | None = None,
        audio: FileUpload | None = None,
    ) -> Ticket:
        module = await self._modules.get_by_id(module_id)
        if module is None:
            raise EntityNotFoundError("Module", module_id)
        if module.client_id != client_id:
            raise ValueError(f"Module {module_id} does not belong to client {client_id}")

        photo_urls = await _upload_all(self._storage, PHOTOS_PREFIX, photos or [])
        audio_url = None
        if audio is not None:
            audio_url = await self._storage.upload(
                timestamped_path(AUDIO_PREFIX, "voice.webm"), audio.data, audio.content_type
            )

        ticket = Ticket(
            id=None,
            client_id=client_id,
            module_id=module_id,
            title=title,
            description=description,
            status=TicketStatus.NEW,
            priority=priority,
            affected_part=affected_part,
            created_at=datetime.now(),
            photos=photo_urls,
            audio_url=audio_url,
        )
        ticket = await self._tickets.save(ticket)
        logger.info("Ticket %d created for module %d", ticket.id, module_id)
        return ticket


class ChangeTicketStatusUseCase:
    """Generic status transition (clears the date when leaving Scheduled)."""

    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self, ticket_id: int, status: TicketStatus) -> Ticket:
        ticket = await _get_ticket(self._tickets, ticket_id)
        previous = ticket.status
        apply_status_change(ticket, status)
        await self._tickets.update(ticket)
        logger.info("Ticket %d: %s → %s", ticket_id, previous.value, status.value)
        return ticket


class CloseTicketUseCase:
    """Closure workflow: upload evidence, record the work done, close.

    Unlike the generic status change, the scheduled date is kept so the
    visit stays on the calendar.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        storage: FileStoragePort,
        calendar: CalendarPort,
    ):
        self._tickets = ticket_repo
        self._storage = storage
        self._calendar = calendar

    async def execute(
        self,
        ticket_id: int,
        description: str,
        photos: list[FileUpload] | None = None,
        audio: FileUpload | None = None,
    ) -> Ticket:
        ticket = await _get_ticket(self._tickets, ticket_id)
        if not description or not description.strip():
            raise ValueError("A closure description is required to close a ticket")

        photo_urls = await _upload_all(self._storage, CLOSURE_PREFIX, photos or [])
        audio_url = None
        if audio is not None:
            audio_url = await self._storage.upload(
                timestamped_path(AUDIO_PREFIX, "closure_voice.webm"),
                audio.data,
                audio.content_type,
            )

        apply_closure(ticket, description, photo_urls, audio_url)
        await self._tickets.update(ticket)
        logger.info("Ticket %d closed (%d photos)", ticket_id, len(photo_urls))

        await mark_done_in_calendar(self._calendar, ticket)
        return ticket


class CompleteRouteStopUseCase:
    """Close a visited stop straight from the route plan."""

    def __init__(self, ticket_repo: TicketRepository, calendar: CalendarPort):
        self._tickets = ticket_repo
        self._calendar = calendar

    async def execute(self, ticket_id: int) -> Ticket:
        ticket = await _get_ticket(self._tickets, ticket_id)
        if ticket.is_closed():
            return ticket

        ticket.status = TicketStatus.CLOSED
        await self._tickets.update(ticket)
        logger.info("Ticket %d completed from route", ticket_id)

        await mark_done_in_calendar(self._calendar, ticket)
        return ticket


class TicketInvoicesUseCase:
    """Attach and detach invoice files on a ticket."""

    def __init__(self, ticket_repo: TicketRepository, storage: FileStoragePort):
        self._tickets = ticket_repo
        self._storage = storage

    async def add(self, ticket_id: int, files: list[FileUpload]) -> Ticket:
        ticket = await _get_ticket(self._tickets, ticket_id)
        urls = await _upload_all(self._storage, INVOICES_PREFIX, files)
        ticket.invoices = [*ticket.invoices, *urls]
        await self._tickets.update(ticket)
        return ticket

    async def remove(self, ticket_id: int, index: int) -> Ticket:
        ticket = await _get_ticket(self._tickets, ticket_id)
        if not 0 <= index < len(ticket.invoices):
            raise ValueError(f"Ticket {ticket_id} has no invoice at index {index}")
        # The blob itself stays in storage
        ticket.invoices = [url for i, url in enumerate(ticket.invoices) if i != index]
        await self._tickets.update(ticket)
        return ticket


@dataclass
class TicketChanges:
    """Edits made after creation. ``None`` leaves a field untouched.

    Photo lists can only shrink here: they name the URLs to keep. New
    photos go through ``EditTicketUseCase.add_photos``.
    """

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    affected_part: str | None = None
    closure_description: str | None = None
    photos: list[str] | None = None
    closure_photos: list[str] | None = None
    remove_closure_audio: bool = False


def _keep_only(current: list[str], kept: list[str], label: str) -> list[str]:
    unknown = [url for url in kept if url not in current]
    if unknown:
        raise ValueError(f"Unknown {label}: {', '.join(unknown)}")
    return [url for url in current if url in kept]


class EditTicketUseCase:
    """Edit ticket details and evidence, including those of a closed ticket."""

    def __init__(self, ticket_repo: TicketRepository, storage: FileStoragePort):
        self._tickets = ticket_repo
        self._storage = storage

    async def execute(self, ticket_id: int, changes: TicketChanges) -> Ticket:
        ticket = await _get_ticket(self._tickets, ticket_id)

        for name in ("title", "description", "priority", "affected_part"):
            value = getattr(changes, name)
            if value is not None:
                setattr(ticket, name, value)

        if changes.closure_description is not None:
            if ticket.is_closed() and not changes.closure_description.strip():
                raise ValueError("A closed ticket needs a closure description")
            ticket.closure_description = changes.closure_description.strip() or None

        if changes.photos is not None:
            ticket.photos = _keep_only(ticket.photos, changes.photos, "photo")
        if changes.closure_photos is not None:
            ticket.closure_photos = _keep_only(
                ticket.closure_photos, changes.closure_photos, "closure photo"
            )
        if changes.remove_closure_audio:
            ticket.closure_audio_url = None

        await self._tickets.update(ticket)
        logger.info("Ticket %d edited", ticket_id)
        return ticket

    async def add_photos(self, ticket_id: int, files: list[FileUpload]) -> Ticket:
        ticket = await _get_ticket(self._tickets, ticket_id)
        urls = await _upload_all(self._storage, PHOTOS_PREFIX, files)
        ticket.photos = [*ticket.photos, *urls]
        await self._tickets.update(ticket)
        logger.info("Ticket %d: %d photo(s) added", ticket_id, len(urls))
        return ticket
