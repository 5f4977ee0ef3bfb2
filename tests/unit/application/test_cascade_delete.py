"""Tests for cascade deletion of clients and modules."""

from __future__ import annotations

import pytest

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.use_cases.cascade_delete import DeleteClientUseCase, DeleteModuleUseCase
from fieldops.domain.value_objects.enums import DeletionStatus
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

# ─── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def repos():
    """Client 1 with modules 10 and 11, one ticket + one document each, plus a
    client document. Client 2 owns unrelated data."""
    clients = FakeClientRepo([make_client(1), make_client(2, "Other")])
    modules = FakeModuleRepo(
        [make_module(10, client_id=1), make_module(11, client_id=1), make_module(20, client_id=2)]
    )
    tickets = FakeTicketRepo(
        [
            make_ticket(100, client_id=1, module_id=10),
            make_ticket(101, client_id=1, module_id=11),
            make_ticket(200, client_id=2, module_id=20),
        ]
    )
    documents = FakeDocumentRepo(
        [
            make_document(1000, module_id=10),
            make_document(1001, module_id=11),
            make_document(1002, client_id=1),
            make_document(1003, module_type_id=1),
            make_document(2000, module_id=20),
        ]
    )
    return clients, modules, tickets, documents


def _delete_client_uc(repos) -> DeleteClientUseCase:
    clients, modules, tickets, documents = repos
    return DeleteClientUseCase(clients, modules, tickets, documents)


async def _leftovers(repos, client_id=1, module_ids=(10, 11)) -> dict[str, int]:
    clients, modules, tickets, documents = repos
    docs = await documents.count(client_id=client_id)
    for mid in module_ids:
        docs += await documents.count(module_id=mid)
    return {
        "clients": int(await clients.get_by_id(client_id) is not None),
        "modules": await modules.count(client_id=client_id),
        "tickets": await tickets.count(client_id=client_id),
        "documents": docs,
    }


# ─── Client cascade ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_client_cascade_removes_everything(repos):
    result = await _delete_client_uc(repos).execute(1)

    assert result.status == DeletionStatus.DELETED
    assert result.fully_deleted
    assert result.failed_steps == []
    assert result.remaining == {}
    assert await _leftovers(repos) == {"clients": 0, "modules": 0, "tickets": 0, "documents": 0}


@pytest.mark.asyncio
async def test_client_cascade_leaves_other_data(repos):
    clients, modules, tickets, documents = repos
    await _delete_client_uc(repos).execute(1)

    assert await clients.get_by_id(2) is not None
    assert set(modules.items) == {20}
    assert set(tickets.items) == {200}
    # Catalog documents are shared, never cascaded from a client
    assert set(documents.items) == {1003, 2000}


@pytest.mark.asyncio
async def test_client_cascade_continues_after_failing_step(repos):
    """A failing client-level ticket delete is recorded; per-module steps still
    remove those tickets and the client is gone."""
    _, _, tickets, _ = repos
    tickets.fail_on.add("delete_by_client")

    result = await _delete_client_uc(repos).execute(1)

    assert result.failed_steps == ["tickets of client 1"]
    assert await _leftovers(repos) == {"clients": 0, "modules": 0, "tickets": 0, "documents": 0}
    assert result.status == DeletionStatus.DELETED


@pytest.mark.asyncio
async def test_client_cascade_reports_survivors(repos):
    _, _, _, documents = repos
    documents.fail_on.add("delete_by_client")

    result = await _delete_client_uc(repos).execute(1)

    assert result.status == DeletionStatus.PARTIALLY_DELETED
    assert not result.fully_deleted
    assert result.failed_steps == ["documents of client 1"]
    assert result.remaining == {"documents": 1}
    assert 1002 in documents.items


@pytest.mark.asyncio
async def test_missing_client_raises(repos):
    with pytest.raises(EntityNotFoundError):
        await _delete_client_uc(repos).execute(99)


# ─── Module cascade ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_module_cascade(repos):
    clients, modules, tickets, documents = repos
    result = await DeleteModuleUseCase(modules, tickets, documents).execute(10)

    assert result.fully_deleted
    assert result.entity == "Module"
    assert 10 not in modules.items
    assert await tickets.count(module_id=10) == 0
    assert await documents.count(module_id=10) == 0
    # Sibling module untouched
    assert await tickets.count(module_id=11) == 1


@pytest.mark.asyncio
async def test_module_cascade_partial(repos):
    _, modules, tickets, documents = repos
    documents.fail_on.add("delete_by_module")

    result = await DeleteModuleUseCase(modules, tickets, documents).execute(11)

    assert result.status == DeletionStatus.PARTIALLY_DELETED
    assert result.failed_steps == ["documents of module 11"]
    assert result.remaining == {"documents": 1}
    assert 11 not in modules.items


@pytest.mark.asyncio
async def test_missing_module_raises(repos):
    _, modules, tickets, documents = repos
    with pytest.raises(EntityNotFoundError):
        await DeleteModuleUseCase(modules, tickets, documents).execute(99)
