"""Port interface for ticket persistence."""

from abc import ABC, abstractmethod

from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.value_objects.enums import TicketStatus


class TicketRepository(ABC):
    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Ticket]:
        """Return every ticket, newest first, enriched with client/module data."""
        ...

    @abstractmethod
    async def get_by_client(self, client_id: int) -> list[Ticket]:
        ...

    @abstractmethod
    async def get_by_status(self, *statuses: TicketStatus) -> list[Ticket]:
        ...

    @abstractmethod
    async def update(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def delete(self, ticket_id: int) -> bool:
        ...

    @abstractmethod
    async def delete_by_client(self, client_id: int) -> int:
        """Delete all tickets of a client and return how many were removed."""
        ...

    @abstractmethod
    async def delete_by_module(self, module_id: int) -> int:
        ...

    @abstractmethod
    async def count(
        self,
        *,
        client_id: int | None = None,
        module_id: int | None = None,
        statuses: tuple[TicketStatus, ...] | None = None,
    ) -> int:
        ...
