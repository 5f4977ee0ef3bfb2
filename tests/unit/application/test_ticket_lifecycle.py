"""Tests for ticket creation, edits, status changes, closure and invoices."""

from __future__ import annotations

from datetime import date

import pytest

from fieldops.application.errors import CalendarError, EntityNotFoundError, StorageError
from fieldops.application.ports.file_storage_port import FileUpload
from fieldops.application.use_cases.ticket_lifecycle import (
    ChangeTicketStatusUseCase,
    CloseTicketUseCase,
    CompleteRouteStopUseCase,
    CreateTicketUseCase,
    EditTicketUseCase,
    TicketChanges,
    TicketInvoicesUseCase,
)
from fieldops.domain.value_objects.enums import Priority, TicketStatus
from tests.fakes import (
    FakeCalendar,
    FakeModuleRepo,
    FakeStorage,
    FakeTicketRepo,
    make_module,
    make_ticket,
)

DAY = date(2026, 3, 10)
PHOTO = FileUpload(name="fuga agua.jpg", data=b"jpeg", content_type="image/jpeg")
AUDIO = FileUpload(name="blob", data=b"webm", content_type="audio/webm")


def _scheduled_repo():
    return FakeTicketRepo([make_ticket(1, status=TicketStatus.SCHEDULED, scheduled_date=DAY)])


# ─── Create ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_ticket_uploads_evidence():
    tickets, storage = FakeTicketRepo(), FakeStorage()
    uc = CreateTicketUseCase(tickets, FakeModuleRepo([make_module(5, client_id=1)]), storage)

    ticket = await uc.execute(
        client_id=1, module_id=5, title="Leak", description="Sink",
        priority=Priority.HIGH, photos=[PHOTO], audio=AUDIO,
    )

    assert ticket.id == 1
    assert ticket.status == TicketStatus.NEW
    assert ticket.priority == Priority.HIGH
    assert len(ticket.photos) == 1
    assert ticket.photos[0].endswith("_fuga_agua.jpg")
    assert ticket.audio_url.endswith("_voice.webm")
    paths = sorted(storage.files)
    assert paths[0].startswith("tickets/")
    assert any(p.startswith("tickets/audio/") for p in paths)


@pytest.mark.asyncio
async def test_create_ticket_rejects_foreign_module():
    uc = CreateTicketUseCase(
        FakeTicketRepo(), FakeModuleRepo([make_module(5, client_id=2)]), FakeStorage()
    )
    with pytest.raises(ValueError):
        await uc.execute(client_id=1, module_id=5, title="x", description="y")


@pytest.mark.asyncio
async def test_create_ticket_unknown_module():
    uc = CreateTicketUseCase(FakeTicketRepo(), FakeModuleRepo(), FakeStorage())
    with pytest.raises(EntityNotFoundError):
        await uc.execute(client_id=1, module_id=5, title="x", description="y")


@pytest.mark.asyncio
async def test_storage_failure_saves_nothing():
    tickets = FakeTicketRepo()
    uc = CreateTicketUseCase(tickets, FakeModuleRepo([make_module(5)]), FakeStorage(fail=True))
    with pytest.raises(StorageError):
        await uc.execute(client_id=1, module_id=5, title="x", description="y", photos=[PHOTO])
    assert tickets.items == {}


# ─── Status change ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_status_change_clears_date():
    repo = _scheduled_repo()
    ticket = await ChangeTicketStatusUseCase(repo).execute(1, TicketStatus.IN_PROGRESS)
    assert ticket.status == TicketStatus.IN_PROGRESS
    assert ticket.scheduled_date is None


# ─── Closure ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_close_ticket_keeps_date_and_marks_calendar(sample_closure_description):
    repo, storage, calendar = _scheduled_repo(), FakeStorage(), FakeCalendar()

    ticket = await CloseTicketUseCase(repo, storage, calendar).execute(
        1, sample_closure_description, photos=[PHOTO], audio=AUDIO
    )

    assert ticket.status == TicketStatus.CLOSED
    assert ticket.scheduled_date == DAY
    assert ticket.closure_description == sample_closure_description
    assert ticket.closure_photos[0].startswith("https://files.test/tickets/closure/")
    assert ticket.closure_audio_url.endswith("_closure_voice.webm")
    assert calendar.done == [("Leak - Acme", DAY)]


@pytest.mark.asyncio
async def test_close_requires_description_before_upload():
    repo, storage = _scheduled_repo(), FakeStorage()
    with pytest.raises(ValueError):
        await CloseTicketUseCase(repo, storage, FakeCalendar()).execute(1, "", photos=[PHOTO])
    assert storage.files == {}
    assert repo.items[1].status == TicketStatus.SCHEDULED


@pytest.mark.asyncio
async def test_close_survives_calendar_failure():
    repo = _scheduled_repo()
    calendar = FakeCalendar(error=CalendarError("boom"))
    ticket = await CloseTicketUseCase(repo, FakeStorage(), calendar).execute(1, "Done")
    assert ticket.status == TicketStatus.CLOSED


@pytest.mark.asyncio
async def test_close_without_calendar_connection():
    calendar = FakeCalendar(connected=False)
    await CloseTicketUseCase(_scheduled_repo(), FakeStorage(), calendar).execute(1, "Done")
    assert calendar.done == []


# ─── Complete from route ─────────────────────────────────────────────


@pytest.mark.asyncio
async def test_complete_route_stop():
    repo, calendar = _scheduled_repo(), FakeCalendar()
    ticket = await CompleteRouteStopUseCase(repo, calendar).execute(1)
    assert ticket.status == TicketStatus.CLOSED
    assert ticket.scheduled_date == DAY
    assert calendar.done == [("Leak - Acme", DAY)]


@pytest.mark.asyncio
async def test_complete_already_closed_is_noop():
    repo = FakeTicketRepo([make_ticket(1, status=TicketStatus.CLOSED, scheduled_date=DAY)])
    calendar = FakeCalendar()
    await CompleteRouteStopUseCase(repo, calendar).execute(1)
    assert repo.updates == 0
    assert calendar.done == []


# ─── Invoices ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_invoices_add_and_remove():
    repo = FakeTicketRepo([make_ticket(1)])
    uc = TicketInvoicesUseCase(repo, FakeStorage())
    invoice = FileUpload(name="factura 001.pdf", data=b"%PDF")

    ticket = await uc.add(1, [invoice, invoice])
    assert len(ticket.invoices) == 2
    assert all("tickets/invoices/" in url for url in ticket.invoices)

    first, second = ticket.invoices
    ticket = await uc.remove(1, 0)
    assert ticket.invoices == [second]

    with pytest.raises(ValueError):
        await uc.remove(1, 5)


# ─── Edit ────────────────────────────────────────────────────────────


def _closed_ticket():
    ticket = make_ticket(1, status=TicketStatus.CLOSED, scheduled_date=DAY)
    ticket.photos = ["https://files.test/a.jpg", "https://files.test/b.jpg"]
    ticket.closure_description = "Seal replaced"
    ticket.closure_photos = ["https://files.test/c.jpg", "https://files.test/d.jpg"]
    ticket.closure_audio_url = "https://files.test/closure.webm"
    return ticket


@pytest.mark.asyncio
async def test_edit_details_leaves_the_rest():
    repo = FakeTicketRepo([_closed_ticket()])

    ticket = await EditTicketUseCase(repo, FakeStorage()).execute(
        1, TicketChanges(title="Leak fixed", priority=Priority.HIGH)
    )

    assert (ticket.title, ticket.priority) == ("Leak fixed", Priority.HIGH)
    assert ticket.description == "Water under the sink"
    assert len(ticket.photos) == 2
    assert ticket.closure_audio_url is not None
    assert ticket.scheduled_date == DAY
    assert repo.updates == 1


@pytest.mark.asyncio
async def test_edit_closed_ticket_evidence():
    repo = FakeTicketRepo([_closed_ticket()])

    ticket = await EditTicketUseCase(repo, FakeStorage()).execute(
        1,
        TicketChanges(
            closure_description="  Seal and valve replaced ",
            photos=["https://files.test/b.jpg"],
            closure_photos=[],
            remove_closure_audio=True,
        ),
    )

    assert ticket.closure_description == "Seal and valve replaced"
    assert ticket.photos == ["https://files.test/b.jpg"]
    assert ticket.closure_photos == []
    assert ticket.closure_audio_url is None
    assert ticket.status == TicketStatus.CLOSED


@pytest.mark.asyncio
async def test_edit_rejects_unknown_photo_and_blank_closure():
    repo = FakeTicketRepo([_closed_ticket()])
    uc = EditTicketUseCase(repo, FakeStorage())

    with pytest.raises(ValueError):
        await uc.execute(1, TicketChanges(photos=["https://elsewhere.test/x.jpg"]))
    with pytest.raises(ValueError):
        await uc.execute(1, TicketChanges(closure_description="   "))
    assert repo.updates == 0


@pytest.mark.asyncio
async def test_edit_unknown_ticket():
    with pytest.raises(EntityNotFoundError):
        await EditTicketUseCase(FakeTicketRepo(), FakeStorage()).execute(9, TicketChanges())


@pytest.mark.asyncio
async def test_add_photos_appends_uploads():
    repo = FakeTicketRepo([_closed_ticket()])
    storage = FakeStorage()

    ticket = await EditTicketUseCase(repo, storage).add_photos(1, [PHOTO])

    assert ticket.photos[:2] == ["https://files.test/a.jpg", "https://files.test/b.jpg"]
    assert len(ticket.photos) == 3
    assert ticket.photos[2].startswith("https://files.test/tickets/")
    assert ticket.photos[2].endswith("_fuga_agua.jpg")
    assert len(storage.files) == 1
