"""Client endpoints — list summary, dossier, create/update, cascade delete."""

from __future__ import annotations

from dataclasses import replace

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.database import get_session
from fieldops.adapters.persistence.repositories import SqlClientRepository
from fieldops.application.errors import EntityNotFoundError
from fieldops.application.use_cases.cascade_delete import DeleteClientUseCase
from fieldops.application.use_cases.clients import (
    GetClientDossierUseCase,
    ListClientSummariesUseCase,
)
from fieldops.domain.entities.client import Client
from fieldops.infrastructure.api.dependencies import (
    get_client_dossier_uc,
    get_client_repo,
    get_client_summaries_uc,
    get_delete_client_uc,
)
from fieldops.infrastructure.api.serializers import (
    serialize_client,
    serialize_deletion,
    serialize_document,
    serialize_module,
    serialize_ticket,
)

router = APIRouter(prefix="/clients", tags=["clients"])


class ClientFields(BaseModel):
    fantasy_name: str | None = None
    secondary_phone: str | None = None
    website: str | None = None
    address: str | None = None
    country: str | None = None
    province: str | None = None
    city: str | None = None
    zip_code: str | None = None
    tax_id: str | None = None
    tax_condition: str | None = None
    notes: str | None = None


class ClientCreate(ClientFields):
    name: str
    email: str
    phone: str


class ClientUpdate(ClientFields):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


@router.get("")
async def list_clients(uc: ListClientSummariesUseCase = Depends(get_client_summaries_uc)):
    """List clients with their module count and open tickets."""
    summaries = await uc.execute()
    return {
        "total": len(summaries),
        "clients": [
            {
                **serialize_client(s.client),
                "module_count": s.module_count,
                "active_tickets": s.active_tickets,
            }
            for s in summaries
        ],
    }


@router.post("", status_code=201)
async def create_client(
    body: ClientCreate,
    repo: SqlClientRepository = Depends(get_client_repo),
    session: AsyncSession = Depends(get_session),
):
    client = await repo.save(Client(id=None, **body.model_dump()))
    await session.commit()
    return serialize_client(client)


@router.get("/{client_id}")
async def get_client(
    client_id: int, uc: GetClientDossierUseCase = Depends(get_client_dossier_uc)
):
    """Client with its modules, tickets and related documents."""
    dossier = await uc.execute(client_id)
    return {
        **serialize_client(dossier.client),
        "modules": [serialize_module(m) for m in dossier.modules],
        "tickets": [serialize_ticket(t) for t in dossier.tickets],
        "documents": [serialize_document(d) for d in dossier.documents],
    }


@router.patch("/{client_id}")
async def update_client(
    client_id: int,
    body: ClientUpdate,
    repo: SqlClientRepository = Depends(get_client_repo),
    session: AsyncSession = Depends(get_session),
):
    client = await repo.get_by_id(client_id)
    if client is None:
        raise EntityNotFoundError("Client", client_id)
    client = replace(client, **body.model_dump(exclude_unset=True))
    await repo.update(client)
    await session.commit()
    return serialize_client(client)


@router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    uc: DeleteClientUseCase = Depends(get_delete_client_uc),
    session: AsyncSession = Depends(get_session),
):
    """Delete the client with its modules, tickets and documents.

    Steps that fail are reported with ``status: partially_deleted``; the
    steps that succeeded are committed.
    """
    result = await uc.execute(client_id)
    await session.commit()
    return serialize_deletion(result)
