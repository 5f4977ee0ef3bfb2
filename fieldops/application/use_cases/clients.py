"""Client read models — list summary and the full client dossier."""

from __future__ import annotations

from dataclasses import dataclass

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.ports.client_repo import ClientRepository
from fieldops.application.ports.document_repo import DocumentRepository
from fieldops.application.ports.module_repo import ModuleRepository
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.entities.client import Client
from fieldops.domain.entities.document import Document
from fieldops.domain.entities.module import Module
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.value_objects.enums import TicketStatus

_OPEN_STATUSES = (TicketStatus.NEW, TicketStatus.IN_PROGRESS, TicketStatus.SCHEDULED)


@dataclass
class ClientSummary:
    client: Client
    module_count: int
    active_tickets: int


@dataclass
class ClientDossier:
    client: Client
    modules: list[Module]
    tickets: list[Ticket]
    documents: list[Document]


class ListClientSummariesUseCase:
    def __init__(
        self,
        client_repo: ClientRepository,
        module_repo: ModuleRepository,
        ticket_repo: TicketRepository,
    ):
        self._clients = client_repo
        self._modules = module_repo
        self._tickets = ticket_repo

    async def execute(self) -> list[ClientSummary]:
        summaries = []
        for client in await self._clients.get_all():
            summaries.append(
                ClientSummary(
                    client=client,
                    module_count=await self._modules.count(client_id=client.id),
                    active_tickets=await self._tickets.count(
                        client_id=client.id, statuses=_OPEN_STATUSES
                    ),
                )
            )
        return summaries


class GetClientDossierUseCase:
    def __init__(
        self,
        client_repo: ClientRepository,
        module_repo: ModuleRepository,
        ticket_repo: TicketRepository,
        document_repo: DocumentRepository,
    ):
        self._clients = client_repo
        self._modules = module_repo
        self._tickets = ticket_repo
        self._documents = document_repo

    async def execute(self, client_id: int) -> ClientDossier:
        client = await self._clients.get_by_id(client_id)
        if client is None:
            raise EntityNotFoundError("Client", client_id)

        modules = await self._modules.get_by_client(client_id)
        tickets = await self._tickets.get_by_client(client_id)
        owned_type_ids = sorted({m.module_type_id for m in modules})
        documents = await self._documents.get_related_to_client(
            client_id, [m.id for m in modules], owned_type_ids
        )
        return ClientDossier(client=client, modules=modules, tickets=tickets, documents=documents)
