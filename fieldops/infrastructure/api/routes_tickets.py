"""Ticket endpoints — CRUD, scheduling, closure and invoices."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.database import get_session
from fieldops.adapters.persistence.repositories import SqlTicketRepository
from fieldops.application.errors import EntityNotFoundError
from fieldops.application.use_cases.maintenance_calendar import ListPendingTicketsUseCase
from fieldops.application.use_cases.scheduling import ScheduleTicketUseCase
from fieldops.application.use_cases.ticket_lifecycle import (
    ChangeTicketStatusUseCase,
    CloseTicketUseCase,
    CreateTicketUseCase,
    EditTicketUseCase,
    TicketChanges,
    TicketInvoicesUseCase,
)
from fieldops.domain.value_objects.enums import Priority, TicketStatus
from fieldops.infrastructure.api.dependencies import (
    get_change_status_uc,
    get_close_ticket_uc,
    get_create_ticket_uc,
    get_edit_ticket_uc,
    get_invoices_uc,
    get_pending_tickets_uc,
    get_schedule_ticket_uc,
    get_ticket_repo,
)
from fieldops.infrastructure.api.serializers import serialize_ticket
from fieldops.infrastructure.api.uploads import to_file_upload, to_file_uploads

router = APIRouter(prefix="/tickets", tags=["tickets"])


class TicketUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    affected_part: str | None = None
    closure_description: str | None = None
    # URLs to keep; anything left out is removed from the ticket
    photos: list[str] | None = None
    closure_photos: list[str] | None = None
    remove_closure_audio: bool = False


class StatusChange(BaseModel):
    status: TicketStatus


class ScheduleRequest(BaseModel):
    day: date = Field(validation_alias="date")
    sync_calendar: bool = True


@router.get("")
async def list_tickets(repo: SqlTicketRepository = Depends(get_ticket_repo)):
    """List all tickets, newest first, with client and module info."""
    tickets = await repo.get_all()
    return {"total": len(tickets), "tickets": [serialize_ticket(t) for t in tickets]}


@router.get("/pending")
async def list_pending_tickets(uc: ListPendingTicketsUseCase = Depends(get_pending_tickets_uc)):
    """Tickets still waiting for a visit."""
    tickets = await uc.execute()
    return {"total": len(tickets), "tickets": [serialize_ticket(t) for t in tickets]}


@router.post("", status_code=201)
async def create_ticket(
    client_id: int = Form(...),
    module_id: int = Form(...),
    title: str = Form(...),
    description: str = Form(...),
    priority: Priority = Form(Priority.MEDIUM),
    affected_part: str | None = Form(None),
    photos: list[UploadFile] | None = File(None),
    audio: UploadFile | None = File(None),
    uc: CreateTicketUseCase = Depends(get_create_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    """Open a ticket with optional photos and a voice note."""
    ticket = await uc.execute(
        client_id=client_id,
        module_id=module_id,
        title=title,
        description=description,
        priority=priority,
        affected_part=affected_part or None,
        photos=await to_file_uploads(photos),
        audio=await to_file_upload(audio) if audio is not None and audio.filename else None,
    )
    await session.commit()
    return serialize_ticket(ticket)


@router.get("/{ticket_id}")
async def get_ticket(ticket_id: int, repo: SqlTicketRepository = Depends(get_ticket_repo)):
    ticket = await repo.get_by_id(ticket_id)
    if ticket is None:
        raise EntityNotFoundError("Ticket", ticket_id)
    return serialize_ticket(ticket)


@router.patch("/{ticket_id}")
async def update_ticket(
    ticket_id: int,
    body: TicketUpdate,
    uc: EditTicketUseCase = Depends(get_edit_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    """Edit details, the closure description, or drop photos and the closure audio."""
    ticket = await uc.execute(ticket_id, TicketChanges(**body.model_dump()))
    await session.commit()
    return serialize_ticket(ticket)


@router.post("/{ticket_id}/photos")
async def add_ticket_photos(
    ticket_id: int,
    photos: list[UploadFile] = File(...),
    uc: EditTicketUseCase = Depends(get_edit_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    ticket = await uc.add_photos(ticket_id, await to_file_uploads(photos))
    await session.commit()
    return serialize_ticket(ticket)


@router.put("/{ticket_id}/status")
async def change_status(
    ticket_id: int,
    body: StatusChange,
    uc: ChangeTicketStatusUseCase = Depends(get_change_status_uc),
    session: AsyncSession = Depends(get_session),
):
    """Generic status change; leaving Scheduled clears the date."""
    ticket = await uc.execute(ticket_id, body.status)
    await session.commit()
    return serialize_ticket(ticket)


@router.post("/{ticket_id}/schedule")
async def schedule_ticket(
    ticket_id: int,
    body: ScheduleRequest,
    uc: ScheduleTicketUseCase = Depends(get_schedule_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    """Schedule a visit and mirror it to the connected calendar.

    A calendar failure does not fail the request: the schedule is saved and
    ``calendar_synced`` is false with the reason in ``calendar_error``.
    """
    result = await uc.execute(ticket_id, body.day, sync_calendar=body.sync_calendar)
    await session.commit()
    return {
        "ticket": serialize_ticket(result.ticket),
        "calendar_synced": result.calendar_synced,
        "calendar_error": result.calendar_error,
    }


@router.post("/{ticket_id}/close")
async def close_ticket(
    ticket_id: int,
    description: str = Form(...),
    photos: list[UploadFile] | None = File(None),
    audio: UploadFile | None = File(None),
    uc: CloseTicketUseCase = Depends(get_close_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    """Record the work done and close the ticket."""
    ticket = await uc.execute(
        ticket_id,
        description,
        photos=await to_file_uploads(photos),
        audio=await to_file_upload(audio) if audio is not None and audio.filename else None,
    )
    await session.commit()
    return serialize_ticket(ticket)


@router.post("/{ticket_id}/invoices")
async def add_invoices(
    ticket_id: int,
    files: list[UploadFile] = File(...),
    uc: TicketInvoicesUseCase = Depends(get_invoices_uc),
    session: AsyncSession = Depends(get_session),
):
    ticket = await uc.add(ticket_id, await to_file_uploads(files))
    await session.commit()
    return serialize_ticket(ticket)


@router.delete("/{ticket_id}/invoices/{index}")
async def remove_invoice(
    ticket_id: int,
    index: int,
    uc: TicketInvoicesUseCase = Depends(get_invoices_uc),
    session: AsyncSession = Depends(get_session),
):
    ticket = await uc.remove(ticket_id, index)
    await session.commit()
    return serialize_ticket(ticket)


@router.delete("/{ticket_id}", status_code=204)
async def delete_ticket(
    ticket_id: int,
    repo: SqlTicketRepository = Depends(get_ticket_repo),
    session: AsyncSession = Depends(get_session),
):
    if not await repo.delete(ticket_id):
        raise EntityNotFoundError("Ticket", ticket_id)
    await session.commit()
