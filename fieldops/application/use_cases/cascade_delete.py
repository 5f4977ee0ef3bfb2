"""Cascade deletion — remove a client or module together with what references it."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.ports.client_repo import ClientRepository
from fieldops.application.ports.document_repo import DocumentRepository
from fieldops.application.ports.module_repo import ModuleRepository
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.value_objects.enums import DeletionStatus

logger = logging.getLogger(__name__)


@dataclass
class DeletionResult:
    """What a cascade achieved.

    ``remaining`` maps a collection name to the number of records that
    still reference the deleted parent after all steps ran.
    """

    entity: str
    entity_id: int
    status: DeletionStatus
    failed_steps: list[str] = field(default_factory=list)
    remaining: dict[str, int] = field(default_factory=dict)

    @property
    def fully_deleted(self) -> bool:
        return self.status == DeletionStatus.DELETED


class _Cascade:
    """Runs dependent steps one after another without aborting on failure."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        self.failed_steps: list[str] = []

    async def step(self, name: str, action: Callable[[], Awaitable[int | bool]]) -> None:
        try:
            removed = await action()
            logger.debug("%s %d: %s → %s", self.entity, self.entity_id, name, removed)
        except Exception:
            logger.exception("%s %d: cascade step '%s' failed", self.entity, self.entity_id, name)
            self.failed_steps.append(name)

    def result(self, remaining: dict[str, int]) -> DeletionResult:
        remaining = {k: v for k, v in remaining.items() if v}
        status = DeletionStatus.PARTIALLY_DELETED if remaining else DeletionStatus.DELETED
        if self.failed_steps:
            logger.warning(
                "%s %d: %d cascade step(s) failed, remaining=%s",
                self.entity, self.entity_id, len(self.failed_steps), remaining,
            )
        return DeletionResult(
            entity=self.entity,
            entity_id=self.entity_id,
            status=status,
            failed_steps=list(self.failed_steps),
            remaining=remaining,
        )


class DeleteModuleUseCase:
    """Tickets of the module → its documents → the module itself."""

    def __init__(
        self,
        module_repo: ModuleRepository,
        ticket_repo: TicketRepository,
        document_repo: DocumentRepository,
    ):
        self._modules = module_repo
        self._tickets = ticket_repo
        self._documents = document_repo

    async def cascade(self, cascade: _Cascade, module_id: int) -> None:
        await cascade.step(
            f"tickets of module {module_id}",
            lambda: self._tickets.delete_by_module(module_id),
        )
        await cascade.step(
            f"documents of module {module_id}",
            lambda: self._documents.delete_by_module(module_id),
        )

    async def remaining(self, module_id: int) -> dict[str, int]:
        return {
            "tickets": await self._tickets.count(module_id=module_id),
            "documents": await self._documents.count(module_id=module_id),
        }

    async def execute(self, module_id: int) -> DeletionResult:
        if await self._modules.get_by_id(module_id) is None:
            raise EntityNotFoundError("Module", module_id)

        cascade = _Cascade("Module", module_id)
        await self.cascade(cascade, module_id)
        await self._modules.delete(module_id)
        logger.info("Module %d deleted", module_id)

        return cascade.result(await self.remaining(module_id))


class DeleteClientUseCase:
    """Client tickets → client documents → every module (cascaded) → the client."""

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
        self._module_cascade = DeleteModuleUseCase(module_repo, ticket_repo, document_repo)

    async def execute(self, client_id: int) -> DeletionResult:
        if await self._clients.get_by_id(client_id) is None:
            raise EntityNotFoundError("Client", client_id)

        cascade = _Cascade("Client", client_id)
        await cascade.step(
            f"tickets of client {client_id}",
            lambda: self._tickets.delete_by_client(client_id),
        )
        await cascade.step(
            f"documents of client {client_id}",
            lambda: self._documents.delete_by_client(client_id),
        )

        modules = await self._modules.get_by_client(client_id)
        for module in modules:
            await self._module_cascade.cascade(cascade, module.id)
            await cascade.step(
                f"module {module.id}",
                lambda module_id=module.id: self._modules.delete(module_id),
            )

        await self._clients.delete(client_id)
        logger.info("Client %d deleted (%d modules)", client_id, len(modules))

        remaining = {
            "tickets": await self._tickets.count(client_id=client_id),
            "documents": await self._documents.count(client_id=client_id),
            "modules": await self._modules.count(client_id=client_id),
        }
        # Module documents carry no client id; tickets always do
        for module in modules:
            remaining["documents"] += await self._documents.count(module_id=module.id)
        return cascade.result(remaining)
