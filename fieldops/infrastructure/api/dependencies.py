"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.calendar.google_calendar_adapter import GoogleCalendarAdapter
from fieldops.adapters.persistence.database import get_session
from fieldops.adapters.persistence.repositories import (
    SqlClientRepository,
    SqlDocumentRepository,
    SqlModuleRepository,
    SqlModuleTypeRepository,
    SqlTicketRepository,
)
from fieldops.adapters.storage.http_storage_adapter import HttpObjectStorageAdapter
from fieldops.adapters.storage.local_storage_adapter import LocalFileStorageAdapter
from fieldops.application.calendar_session import CalendarSession
from fieldops.application.ports.calendar_port import CalendarPort
from fieldops.application.ports.file_storage_port import FileStoragePort
from fieldops.application.use_cases.cascade_delete import DeleteClientUseCase, DeleteModuleUseCase
from fieldops.application.use_cases.clients import (
    GetClientDossierUseCase,
    ListClientSummariesUseCase,
)
from fieldops.application.use_cases.dashboard import DashboardUseCase
from fieldops.application.use_cases.documents import LinkDocumentsUseCase, UploadDocumentUseCase
from fieldops.application.use_cases.maintenance_calendar import (
    BuildCalendarUseCase,
    ListPendingTicketsUseCase,
)
from fieldops.application.use_cases.modules import CreateModuleTypeUseCase, RegisterModuleUseCase
from fieldops.application.use_cases.plan_route import PlanRouteUseCase
from fieldops.application.use_cases.scheduling import ScheduleTicketUseCase
from fieldops.application.use_cases.ticket_lifecycle import (
    ChangeTicketStatusUseCase,
    CloseTicketUseCase,
    CompleteRouteStopUseCase,
    CreateTicketUseCase,
    EditTicketUseCase,
    TicketInvoicesUseCase,
)
from fieldops.config import settings

logger = logging.getLogger(__name__)

# Re-export session dependency
get_db_session = get_session

# Process-wide singletons: one calendar token per process, shared by reference
_calendar_session = CalendarSession()
_calendar_adapter = GoogleCalendarAdapter(_calendar_session)

if settings.storage_backend == "http":
    _storage_adapter: FileStoragePort = HttpObjectStorageAdapter()
    logger.info("Using HTTP object storage (bucket '%s')", settings.storage_bucket)
else:
    _storage_adapter = LocalFileStorageAdapter()


def get_calendar_session() -> CalendarSession:
    return _calendar_session


def get_calendar() -> CalendarPort:
    return _calendar_adapter


def get_storage() -> FileStoragePort:
    return _storage_adapter


# ─── Repositories ────────────────────────────────────────────────────


def get_client_repo(session: AsyncSession = Depends(get_session)) -> SqlClientRepository:
    return SqlClientRepository(session)


def get_module_repo(session: AsyncSession = Depends(get_session)) -> SqlModuleRepository:
    return SqlModuleRepository(session)


def get_module_type_repo(session: AsyncSession = Depends(get_session)) -> SqlModuleTypeRepository:
    return SqlModuleTypeRepository(session)


def get_ticket_repo(session: AsyncSession = Depends(get_session)) -> SqlTicketRepository:
    return SqlTicketRepository(session)


def get_document_repo(session: AsyncSession = Depends(get_session)) -> SqlDocumentRepository:
    return SqlDocumentRepository(session)


# ─── Use cases ───────────────────────────────────────────────────────


def get_schedule_ticket_uc(
    session: AsyncSession = Depends(get_session),
    calendar: CalendarPort = Depends(get_calendar),
) -> ScheduleTicketUseCase:
    return ScheduleTicketUseCase(ticket_repo=SqlTicketRepository(session), calendar=calendar)


def get_build_calendar_uc(
    session: AsyncSession = Depends(get_session),
    calendar: CalendarPort = Depends(get_calendar),
) -> BuildCalendarUseCase:
    return BuildCalendarUseCase(ticket_repo=SqlTicketRepository(session), calendar=calendar)


def get_pending_tickets_uc(
    session: AsyncSession = Depends(get_session),
) -> ListPendingTicketsUseCase:
    return ListPendingTicketsUseCase(ticket_repo=SqlTicketRepository(session))


def get_plan_route_uc(session: AsyncSession = Depends(get_session)) -> PlanRouteUseCase:
    return PlanRouteUseCase(
        ticket_repo=SqlTicketRepository(session),
        maps_api_key=settings.google_maps_api_key,
    )


def get_create_ticket_uc(
    session: AsyncSession = Depends(get_session),
    storage: FileStoragePort = Depends(get_storage),
) -> CreateTicketUseCase:
    return CreateTicketUseCase(
        ticket_repo=SqlTicketRepository(session),
        module_repo=SqlModuleRepository(session),
        storage=storage,
    )


def get_change_status_uc(
    session: AsyncSession = Depends(get_session),
) -> ChangeTicketStatusUseCase:
    return ChangeTicketStatusUseCase(ticket_repo=SqlTicketRepository(session))


def get_close_ticket_uc(
    session: AsyncSession = Depends(get_session),
    storage: FileStoragePort = Depends(get_storage),
    calendar: CalendarPort = Depends(get_calendar),
) -> CloseTicketUseCase:
    return CloseTicketUseCase(
        ticket_repo=SqlTicketRepository(session), storage=storage, calendar=calendar
    )


def get_complete_stop_uc(
    session: AsyncSession = Depends(get_session),
    calendar: CalendarPort = Depends(get_calendar),
) -> CompleteRouteStopUseCase:
    return CompleteRouteStopUseCase(ticket_repo=SqlTicketRepository(session), calendar=calendar)


def get_invoices_uc(
    session: AsyncSession = Depends(get_session),
    storage: FileStoragePort = Depends(get_storage),
) -> TicketInvoicesUseCase:
    return TicketInvoicesUseCase(ticket_repo=SqlTicketRepository(session), storage=storage)


def get_edit_ticket_uc(
    session: AsyncSession = Depends(get_session),
    storage: FileStoragePort = Depends(get_storage),
) -> EditTicketUseCase:
    return EditTicketUseCase(ticket_repo=SqlTicketRepository(session), storage=storage)


def get_delete_client_uc(session: AsyncSession = Depends(get_session)) -> DeleteClientUseCase:
    return DeleteClientUseCase(
        client_repo=SqlClientRepository(session),
        module_repo=SqlModuleRepository(session),
        ticket_repo=SqlTicketRepository(session),
        document_repo=SqlDocumentRepository(session),
    )


def get_delete_module_uc(session: AsyncSession = Depends(get_session)) -> DeleteModuleUseCase:
    return DeleteModuleUseCase(
        module_repo=SqlModuleRepository(session),
        ticket_repo=SqlTicketRepository(session),
        document_repo=SqlDocumentRepository(session),
    )


def get_client_summaries_uc(
    session: AsyncSession = Depends(get_session),
) -> ListClientSummariesUseCase:
    return ListClientSummariesUseCase(
        client_repo=SqlClientRepository(session),
        module_repo=SqlModuleRepository(session),
        ticket_repo=SqlTicketRepository(session),
    )


def get_client_dossier_uc(
    session: AsyncSession = Depends(get_session),
) -> GetClientDossierUseCase:
    return GetClientDossierUseCase(
        client_repo=SqlClientRepository(session),
        module_repo=SqlModuleRepository(session),
        ticket_repo=SqlTicketRepository(session),
        document_repo=SqlDocumentRepository(session),
    )


def get_register_module_uc(
    session: AsyncSession = Depends(get_session),
) -> RegisterModuleUseCase:
    return RegisterModuleUseCase(
        module_repo=SqlModuleRepository(session),
        module_type_repo=SqlModuleTypeRepository(session),
        client_repo=SqlClientRepository(session),
        warranty_months=settings.default_warranty_months,
    )


def get_create_module_type_uc(
    session: AsyncSession = Depends(get_session),
    storage: FileStoragePort = Depends(get_storage),
) -> CreateModuleTypeUseCase:
    return CreateModuleTypeUseCase(module_type_repo=SqlModuleTypeRepository(session), storage=storage)


def get_upload_document_uc(
    session: AsyncSession = Depends(get_session),
    storage: FileStoragePort = Depends(get_storage),
) -> UploadDocumentUseCase:
    return UploadDocumentUseCase(
        document_repo=SqlDocumentRepository(session),
        storage=storage,
        client_repo=SqlClientRepository(session),
        module_repo=SqlModuleRepository(session),
        module_type_repo=SqlModuleTypeRepository(session),
    )


def get_link_documents_uc(session: AsyncSession = Depends(get_session)) -> LinkDocumentsUseCase:
    return LinkDocumentsUseCase(
        document_repo=SqlDocumentRepository(session),
        client_repo=SqlClientRepository(session),
        module_repo=SqlModuleRepository(session),
    )


def get_dashboard_uc(session: AsyncSession = Depends(get_session)) -> DashboardUseCase:
    return DashboardUseCase(
        ticket_repo=SqlTicketRepository(session),
        client_repo=SqlClientRepository(session),
        module_repo=SqlModuleRepository(session),
    )
