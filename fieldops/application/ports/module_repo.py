"""Port interfaces for installed modules and the module catalog."""

from abc import ABC, abstractmethod

from fieldops.domain.entities.module import Module, ModuleType


class ModuleRepository(ABC):
    @abstractmethod
    async def save(self, module: Module) -> Module:
        ...

    @abstractmethod
    async def get_by_id(self, module_id: int) -> Module | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Module]:
        """Return every module with its client name populated."""
        ...

    @abstractmethod
    async def get_by_client(self, client_id: int) -> list[Module]:
        ...

    @abstractmethod
    async def delete(self, module_id: int) -> bool:
        ...

    @abstractmethod
    async def count(self, *, client_id: int | None = None) -> int:
        ...


class ModuleTypeRepository(ABC):
    @abstractmethod
    async def save(self, module_type: ModuleType) -> ModuleType:
        ...

    @abstractmethod
    async def get_by_id(self, module_type_id: int) -> ModuleType | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[ModuleType]:
        ...

    @abstractmethod
    async def delete(self, module_type_id: int) -> bool:
        """Remove a catalog entry; installed modules keep their model name."""
        ...
