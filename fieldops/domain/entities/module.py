"""Module entities — catalog types and the units installed at client sites."""

from dataclasses import dataclass
from datetime import date, datetime

from fieldops.domain.value_objects.geo_point import GeoPoint

UNKNOWN_MODEL_NAME = "Unknown"


@dataclass
class ModuleType:
    """Catalog entry describing a product model."""

    id: int | None
    name: str
    description: str
    image_url: str | None = None
    created_at: datetime | None = None


@dataclass
class Module:
    """An installed physical unit, instantiated from a ModuleType."""

    id: int | None
    client_id: int
    module_type_id: int
    model_name: str
    serial_number: str
    installation_date: date
    delivery_date: date | None = None
    warranty_expiration: date | None = None
    location: GeoPoint | None = None
    address: str | None = None
    client_name: str | None = None

    def is_under_warranty(self, on: date) -> bool:
        if self.warranty_expiration is None:
            return False
        return on <= self.warranty_expiration
