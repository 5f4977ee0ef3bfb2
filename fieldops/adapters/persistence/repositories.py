"""SQLAlchemy repository implementations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.models import (
    ClientModel,
    DocumentModel,
    ModuleModel,
    ModuleTypeModel,
    TicketModel,
)
from fieldops.application.ports.client_repo import ClientRepository
from fieldops.application.ports.document_repo import DocumentRepository
from fieldops.application.ports.module_repo import ModuleRepository, ModuleTypeRepository
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.entities.client import Client
from fieldops.domain.entities.document import Document
from fieldops.domain.entities.module import Module, ModuleType
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.value_objects.enums import DocumentType, Priority, TicketStatus
from fieldops.domain.value_objects.geo_point import GeoPoint

NOT_AVAILABLE = "N/A"
GLOBAL_CLIENT_NAME = "Global"

# ─── Mappers ─────────────────────────────────────────────────────────

_CLIENT_FIELDS = (
    "name", "fantasy_name", "email", "phone", "secondary_phone", "website",
    "address", "country", "province", "city", "zip_code", "tax_id",
    "tax_condition", "notes",
)


def _client_to_domain(m: ClientModel) -> Client:
    return Client(
        id=m.id,
        created_at=m.created_at,
        **{f: getattr(m, f) for f in _CLIENT_FIELDS},
    )


def _module_type_to_domain(m: ModuleTypeModel) -> ModuleType:
    return ModuleType(
        id=m.id,
        name=m.name,
        description=m.description,
        image_url=m.image_url,
        created_at=m.created_at,
    )


def _module_to_domain(m: ModuleModel, client_name: str | None = None) -> Module:
    return Module(
        id=m.id,
        client_id=m.client_id,
        module_type_id=m.module_type_id,
        model_name=m.model_name,
        serial_number=m.serial_number,
        installation_date=m.installation_date,
        delivery_date=m.delivery_date,
        warranty_expiration=m.warranty_expiration,
        location=GeoPoint.from_optional(m.latitude, m.longitude),
        address=m.address,
        client_name=client_name,
    )


def _ticket_to_domain(
    m: TicketModel, client_name: str | None, module: ModuleModel | None
) -> Ticket:
    return Ticket(
        id=m.id,
        client_id=m.client_id,
        module_id=m.module_id,
        title=m.title,
        description=m.description,
        status=TicketStatus(m.status),
        priority=Priority(m.priority),
        affected_part=m.affected_part,
        created_at=m.created_at,
        scheduled_date=m.scheduled_date,
        photos=list(m.photos or []),
        audio_url=m.audio_url,
        closure_description=m.closure_description,
        closure_photos=list(m.closure_photos or []),
        closure_audio_url=m.closure_audio_url,
        invoices=list(m.invoices or []),
        client_name=client_name or NOT_AVAILABLE,
        module_serial=module.serial_number if module else NOT_AVAILABLE,
        # Visits happen where the module is installed
        location=GeoPoint.from_optional(module.latitude, module.longitude) if module else None,
        address=module.address if module else None,
        warranty_expiration=module.warranty_expiration if module else None,
    )


def _document_to_domain(
    m: DocumentModel, module_serial: str | None = None, client_name: str | None = None
) -> Document:
    is_type_level = m.module_type_id is not None
    return Document(
        id=m.id,
        name=m.name,
        type=DocumentType(m.type),
        url=m.url,
        version=m.version,
        uploaded_at=m.uploaded_at,
        module_id=m.module_id,
        module_type_id=m.module_type_id,
        client_id=m.client_id,
        module_serial=module_serial or (f"{NOT_AVAILABLE} (model)" if is_type_level else NOT_AVAILABLE),
        client_name=client_name or (GLOBAL_CLIENT_NAME if is_type_level else NOT_AVAILABLE),
    )


def _ticket_values(ticket: Ticket) -> dict:
    return {
        "client_id": ticket.client_id,
        "module_id": ticket.module_id,
        "title": ticket.title,
        "description": ticket.description,
        "status": ticket.status.value,
        "priority": ticket.priority.value,
        "affected_part": ticket.affected_part,
        "scheduled_date": ticket.scheduled_date,
        "photos": list(ticket.photos),
        "audio_url": ticket.audio_url,
        "closure_description": ticket.closure_description,
        "closure_photos": list(ticket.closure_photos),
        "closure_audio_url": ticket.closure_audio_url,
        "invoices": list(ticket.invoices),
    }


# ─── Repositories ────────────────────────────────────────────────────


class SqlClientRepository(ClientRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, client: Client) -> Client:
        client.created_at = client.created_at or datetime.now()
        m = ClientModel(
            created_at=client.created_at,
            **{f: getattr(client, f) for f in _CLIENT_FIELDS},
        )
        self._s.add(m)
        await self._s.flush()
        client.id = m.id
        return client

    async def get_by_id(self, client_id: int) -> Client | None:
        m = await self._s.get(ClientModel, client_id)
        return _client_to_domain(m) if m else None

    async def get_all(self) -> list[Client]:
        result = await self._s.execute(
            select(ClientModel).order_by(ClientModel.created_at.desc(), ClientModel.id.desc())
        )
        return [_client_to_domain(m) for m in result.scalars()]

    async def update(self, client: Client) -> Client:
        await self._s.execute(
            update(ClientModel)
            .where(ClientModel.id == client.id)
            .values(**{f: getattr(client, f) for f in _CLIENT_FIELDS})
        )
        await self._s.flush()
        return client

    async def delete(self, client_id: int) -> bool:
        result = await self._s.execute(delete(ClientModel).where(ClientModel.id == client_id))
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self._s.execute(select(func.count()).select_from(ClientModel))
        return result.scalar_one()


class SqlModuleTypeRepository(ModuleTypeRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, module_type: ModuleType) -> ModuleType:
        module_type.created_at = module_type.created_at or datetime.now()
        m = ModuleTypeModel(
            name=module_type.name,
            description=module_type.description,
            image_url=module_type.image_url,
            created_at=module_type.created_at,
        )
        self._s.add(m)
        await self._s.flush()
        module_type.id = m.id
        return module_type

    async def get_by_id(self, module_type_id: int) -> ModuleType | None:
        m = await self._s.get(ModuleTypeModel, module_type_id)
        return _module_type_to_domain(m) if m else None

    async def get_all(self) -> list[ModuleType]:
        result = await self._s.execute(select(ModuleTypeModel).order_by(ModuleTypeModel.name))
        return [_module_type_to_domain(m) for m in result.scalars()]

    async def delete(self, module_type_id: int) -> bool:
        result = await self._s.execute(
            delete(ModuleTypeModel).where(ModuleTypeModel.id == module_type_id)
        )
        return result.rowcount > 0


class SqlModuleRepository(ModuleRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    def _populated(self):
        return select(ModuleModel, ClientModel.name).outerjoin(
            ClientModel, ClientModel.id == ModuleModel.client_id
        )

    async def save(self, module: Module) -> Module:
        m = ModuleModel(
            client_id=module.client_id,
            module_type_id=module.module_type_id,
            model_name=module.model_name,
            serial_number=module.serial_number,
            installation_date=module.installation_date,
            delivery_date=module.delivery_date,
            warranty_expiration=module.warranty_expiration,
            latitude=module.location.latitude if module.location else None,
            longitude=module.location.longitude if module.location else None,
            address=module.address,
        )
        self._s.add(m)
        await self._s.flush()
        module.id = m.id
        return module

    async def get_by_id(self, module_id: int) -> Module | None:
        result = await self._s.execute(self._populated().where(ModuleModel.id == module_id))
        row = result.one_or_none()
        return _module_to_domain(*row) if row else None

    async def get_all(self) -> list[Module]:
        result = await self._s.execute(self._populated().order_by(ModuleModel.id))
        return [_module_to_domain(m, name) for m, name in result.all()]

    async def get_by_client(self, client_id: int) -> list[Module]:
        result = await self._s.execute(
            self._populated().where(ModuleModel.client_id == client_id).order_by(ModuleModel.id)
        )
        return [_module_to_domain(m, name) for m, name in result.all()]

    async def delete(self, module_id: int) -> bool:
        async with self._s.begin_nested():
            result = await self._s.execute(delete(ModuleModel).where(ModuleModel.id == module_id))
        return result.rowcount > 0

    async def count(self, *, client_id: int | None = None) -> int:
        query = select(func.count()).select_from(ModuleModel)
        if client_id is not None:
            query = query.where(ModuleModel.client_id == client_id)
        result = await self._s.execute(query)
        return result.scalar_one()


class SqlTicketRepository(TicketRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    def _populated(self):
        return (
            select(TicketModel, ClientModel.name, ModuleModel)
            .outerjoin(ClientModel, ClientModel.id == TicketModel.client_id)
            .outerjoin(ModuleModel, ModuleModel.id == TicketModel.module_id)
        )

    async def _fetch(self, query) -> list[Ticket]:
        result = await self._s.execute(
            query.order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
        )
        return [_ticket_to_domain(m, name, module) for m, name, module in result.all()]

    async def save(self, ticket: Ticket) -> Ticket:
        ticket.created_at = ticket.created_at or datetime.now()
        m = TicketModel(created_at=ticket.created_at, **_ticket_values(ticket))
        self._s.add(m)
        await self._s.flush()
        ticket.id = m.id
        return ticket

    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        result = await self._s.execute(self._populated().where(TicketModel.id == ticket_id))
        row = result.one_or_none()
        return _ticket_to_domain(*row) if row else None

    async def get_all(self) -> list[Ticket]:
        return await self._fetch(self._populated())

    async def get_by_client(self, client_id: int) -> list[Ticket]:
        return await self._fetch(self._populated().where(TicketModel.client_id == client_id))

    async def get_by_status(self, *statuses: TicketStatus) -> list[Ticket]:
        return await self._fetch(
            self._populated().where(TicketModel.status.in_([s.value for s in statuses]))
        )

    async def update(self, ticket: Ticket) -> Ticket:
        await self._s.execute(
            update(TicketModel).where(TicketModel.id == ticket.id).values(**_ticket_values(ticket))
        )
        await self._s.flush()
        return ticket

    async def delete(self, ticket_id: int) -> bool:
        result = await self._s.execute(delete(TicketModel).where(TicketModel.id == ticket_id))
        return result.rowcount > 0

    async def _delete_where(self, condition) -> int:
        # SAVEPOINT: a failing cascade step must not poison the request transaction
        async with self._s.begin_nested():
            result = await self._s.execute(delete(TicketModel).where(condition))
        return result.rowcount

    async def delete_by_client(self, client_id: int) -> int:
        return await self._delete_where(TicketModel.client_id == client_id)

    async def delete_by_module(self, module_id: int) -> int:
        return await self._delete_where(TicketModel.module_id == module_id)

    async def count(
        self,
        *,
        client_id: int | None = None,
        module_id: int | None = None,
        statuses: tuple[TicketStatus, ...] | None = None,
    ) -> int:
        query = select(func.count()).select_from(TicketModel)
        if client_id is not None:
            query = query.where(TicketModel.client_id == client_id)
        if module_id is not None:
            query = query.where(TicketModel.module_id == module_id)
        if statuses:
            query = query.where(TicketModel.status.in_([s.value for s in statuses]))
        result = await self._s.execute(query)
        return result.scalar_one()


class SqlDocumentRepository(DocumentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    def _populated(self):
        # Module documents inherit the client of their module
        owner_id = func.coalesce(DocumentModel.client_id, ModuleModel.client_id)
        return (
            select(DocumentModel, ModuleModel.serial_number, ClientModel.name)
            .outerjoin(ModuleModel, ModuleModel.id == DocumentModel.module_id)
            .outerjoin(ClientModel, ClientModel.id == owner_id)
        )

    async def _fetch(self, query) -> list[Document]:
        result = await self._s.execute(
            query.order_by(DocumentModel.uploaded_at.desc(), DocumentModel.id.desc())
        )
        return [_document_to_domain(m, serial, name) for m, serial, name in result.all()]

    async def save(self, document: Document) -> Document:
        document.uploaded_at = document.uploaded_at or datetime.now()
        m = DocumentModel(
            name=document.name,
            type=document.type.value,
            version=document.version,
            url=document.url,
            module_id=document.module_id,
            module_type_id=document.module_type_id,
            client_id=document.client_id,
            uploaded_at=document.uploaded_at,
        )
        self._s.add(m)
        await self._s.flush()
        document.id = m.id
        return document

    async def get_by_id(self, document_id: int) -> Document | None:
        result = await self._s.execute(self._populated().where(DocumentModel.id == document_id))
        row = result.one_or_none()
        return _document_to_domain(*row) if row else None

    async def get_all(self) -> list[Document]:
        return await self._fetch(self._populated())

    async def get_by_module_type(self, module_type_id: int) -> list[Document]:
        return await self._fetch(
            self._populated().where(DocumentModel.module_type_id == module_type_id)
        )

    async def get_related_to_client(
        self, client_id: int, module_ids: list[int], module_type_ids: list[int]
    ) -> list[Document]:
        return await self._fetch(
            self._populated().where(
                or_(
                    DocumentModel.client_id == client_id,
                    DocumentModel.module_id.in_(module_ids),
                    DocumentModel.module_type_id.in_(module_type_ids),
                )
            )
        )

    async def delete(self, document_id: int) -> bool:
        result = await self._s.execute(delete(DocumentModel).where(DocumentModel.id == document_id))
        return result.rowcount > 0

    async def _delete_where(self, condition) -> int:
        async with self._s.begin_nested():
            result = await self._s.execute(delete(DocumentModel).where(condition))
        return result.rowcount

    async def delete_by_client(self, client_id: int) -> int:
        return await self._delete_where(DocumentModel.client_id == client_id)

    async def delete_by_module(self, module_id: int) -> int:
        return await self._delete_where(DocumentModel.module_id == module_id)

    async def count(
        self, *, client_id: int | None = None, module_id: int | None = None
    ) -> int:
        query = select(func.count()).select_from(DocumentModel)
        if client_id is not None:
            query = query.where(DocumentModel.client_id == client_id)
        if module_id is not None:
            query = query.where(DocumentModel.module_id == module_id)
        result = await self._s.execute(query)
        return result.scalar_one()
