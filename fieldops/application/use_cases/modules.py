"""Module use cases — install units at client sites, maintain the catalog."""

from __future__ import annotations

import logging
from datetime import date, datetime

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.ports.client_repo import ClientRepository
from fieldops.application.ports.file_storage_port import FileStoragePort, FileUpload
from fieldops.application.ports.module_repo import ModuleRepository, ModuleTypeRepository
from fieldops.domain.entities.module import UNKNOWN_MODEL_NAME, Module, ModuleType
from fieldops.domain.policies.file_names import timestamped_path
from fieldops.domain.policies.warranty import warranty_expiration
from fieldops.domain.value_objects.geo_point import GeoPoint

logger = logging.getLogger(__name__)


class RegisterModuleUseCase:
    """Install a catalog module at a client site."""

    def __init__(
        self,
        module_repo: ModuleRepository,
        module_type_repo: ModuleTypeRepository,
        client_repo: ClientRepository,
        warranty_months: int,
    ):
        self._modules = module_repo
        self._types = module_type_repo
        self._clients = client_repo
        self._warranty_months = warranty_months

    async def execute(
        self,
        client_id: int,
        module_type_id: int,
        serial_number: str,
        installation_date: date,
        delivery_date: date | None = None,
        location: GeoPoint | None = None,
        address: str | None = None,
    ) -> Module:
        if await self._clients.get_by_id(client_id) is None:
            raise EntityNotFoundError("Client", client_id)

        # model name is denormalised so the module survives catalog edits
        module_type = await self._types.get_by_id(module_type_id)
        model_name = module_type.name if module_type else UNKNOWN_MODEL_NAME
        if module_type is None:
            logger.warning("Module type %d not found, using '%s'", module_type_id, model_name)

        module = Module(
            id=None,
            client_id=client_id,
            module_type_id=module_type_id,
            model_name=model_name,
            serial_number=serial_number,
            installation_date=installation_date,
            delivery_date=delivery_date,
            warranty_expiration=warranty_expiration(
                installation_date, delivery_date, self._warranty_months
            ),
            location=location,
            address=address,
        )
        module = await self._modules.save(module)
        logger.info(
            "Module %d (%s) installed for client %d, warranty until %s",
            module.id, serial_number, client_id, module.warranty_expiration,
        )
        return module


class CreateModuleTypeUseCase:
    def __init__(self, module_type_repo: ModuleTypeRepository, storage: FileStoragePort):
        self._types = module_type_repo
        self._storage = storage

    async def execute(
        self, name: str, description: str, image: FileUpload | None = None
    ) -> ModuleType:
        image_url = None
        if image is not None:
            image_url = await self._storage.upload(
                timestamped_path("module_types", image.name), image.data, image.content_type
            )
        module_type = ModuleType(
            id=None,
            name=name,
            description=description,
            image_url=image_url,
            created_at=datetime.now(),
        )
        return await self._types.save(module_type)
