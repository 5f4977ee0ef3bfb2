"""Client entity — a customer site owning installed modules."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Client:
    id: int | None
    name: str
    email: str
    phone: str
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
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.fantasy_name or self.name
