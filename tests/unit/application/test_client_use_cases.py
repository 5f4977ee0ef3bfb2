"""Tests for client summaries and the client dossier."""

from __future__ import annotations

import pytest

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.use_cases.clients import (
    GetClientDossierUseCase,
    ListClientSummariesUseCase,
)
from fieldops.domain.value_objects.enums import TicketStatus
from tests.fakes import (
    FakeClientRepo,
    FakeDocumentRepo,
    FakeModuleRepo,
    FakeTicketRepo,
    make_client,
    make_document,
    make_module,
    make_ticket,
)


@pytest.fixture
def repos():
    clients = FakeClientRepo([make_client(1), make_client(2, "Beta")])
    modules = FakeModuleRepo(
        [make_module(10, client_id=1, module_type_id=5), make_module(11, client_id=1, module_type_id=6)]
    )
    tickets = FakeTicketRepo(
        [
            make_ticket(1, client_id=1, module_id=10, status=TicketStatus.NEW),
            make_ticket(2, client_id=1, module_id=10, status=TicketStatus.SCHEDULED),
            make_ticket(3, client_id=1, module_id=11, status=TicketStatus.CLOSED),
        ]
    )
    documents = FakeDocumentRepo(
        [
            make_document(1, client_id=1),
            make_document(2, module_id=11),
            make_document(3, module_type_id=5),
            make_document(4, module_type_id=9),
            make_document(5, client_id=2),
        ]
    )
    return clients, modules, tickets, documents


@pytest.mark.asyncio
async def test_summaries_count_modules_and_open_tickets(repos):
    clients, modules, tickets, _ = repos
    summaries = await ListClientSummariesUseCase(clients, modules, tickets).execute()
    by_id = {s.client.id: s for s in summaries}
    assert (by_id[1].module_count, by_id[1].active_tickets) == (2, 2)
    assert (by_id[2].module_count, by_id[2].active_tickets) == (0, 0)


@pytest.mark.asyncio
async def test_dossier_collects_related_documents(repos):
    dossier = await GetClientDossierUseCase(*repos).execute(1)
    assert [m.id for m in dossier.modules] == [10, 11]
    assert len(dossier.tickets) == 3
    # Client, module and owned-model documents; not other models or clients
    assert sorted(d.id for d in dossier.documents) == [1, 2, 3]


@pytest.mark.asyncio
async def test_dossier_unknown_client(repos):
    with pytest.raises(EntityNotFoundError):
        await GetClientDossierUseCase(*repos).execute(99)
