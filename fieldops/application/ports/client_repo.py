"""Port interface for client persistence."""

from abc import ABC, abstractmethod

from fieldops.domain.entities.client import Client


class ClientRepository(ABC):
    @abstractmethod
    async def save(self, client: Client) -> Client:
        ...

    @abstractmethod
    async def get_by_id(self, client_id: int) -> Client | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Client]:
        """Return every client, newest first."""
        ...

    @abstractmethod
    async def update(self, client: Client) -> Client:
        ...

    @abstractmethod
    async def delete(self, client_id: int) -> bool:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...
