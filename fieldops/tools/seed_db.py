"""Seed the database with a small demo data set.

Usage:
    python -m fieldops.tools.seed_db
    python -m fieldops.tools.seed_db --drop         # drop existing data first
    python -m fieldops.tools.seed_db --verify-only  # only print counts
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date, timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.database import async_session_factory
from fieldops.adapters.persistence.models import (
    ClientModel,
    DocumentModel,
    ModuleModel,
    ModuleTypeModel,
    TicketModel,
)
from fieldops.adapters.persistence.repositories import (
    SqlClientRepository,
    SqlModuleRepository,
    SqlModuleTypeRepository,
    SqlTicketRepository,
)
from fieldops.application.use_cases.modules import RegisterModuleUseCase
from fieldops.config import settings
from fieldops.domain.entities.client import Client
from fieldops.domain.entities.module import ModuleType
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.value_objects.enums import Priority, TicketStatus
from fieldops.domain.value_objects.geo_point import GeoPoint

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

MODULE_TYPES = [
    ("Compact 20", "20 ft modular unit with electrical and plumbing kit"),
    ("Office 40", "40 ft office module, split AC, two rooms"),
    ("Sanitary 10", "10 ft sanitary module, water heater included"),
]

CLIENTS = [
    {
        "name": "Andes Mining S.A.",
        "fantasy_name": "Andes Mining",
        "email": "ops@andesmining.example",
        "phone": "+54 261 400 1000",
        "city": "Mendoza",
        "country": "Argentina",
    },
    {
        "name": "Patagonia Builders SRL",
        "email": "contacto@patbuilders.example",
        "phone": "+54 299 440 2200",
        "city": "Neuquén",
        "country": "Argentina",
    },
]

# (client index, type index, serial, site, address)
MODULES = [
    (0, 0, "CMP20-0001", GeoPoint(-32.8895, -68.8458), "Av. San Martín 1200, Mendoza"),
    (0, 1, "OFF40-0107", GeoPoint(-32.9270, -68.8460), "Ruta 40 km 3210, Luján de Cuyo"),
    (1, 2, "SAN10-0033", GeoPoint(-38.9516, -68.0591), "Parque Industrial, Neuquén"),
    (1, 1, "OFF40-0112", None, "Obra Plottier, lote 14"),
]

# (module index, title, description, status, priority, days from today)
TICKETS = [
    (0, "AC not cooling", "Split unit blows warm air", TicketStatus.SCHEDULED, Priority.HIGH, 0),
    (1, "Door hinge loose", "Main door does not close", TicketStatus.SCHEDULED, Priority.MEDIUM, 0),
    (2, "Water leak", "Leak under the sink", TicketStatus.SCHEDULED, Priority.HIGH, 0),
    (3, "Window seal", "Seal damaged in transport", TicketStatus.NEW, Priority.LOW, None),
    (0, "Annual check", "Preventive maintenance", TicketStatus.CLOSED, Priority.LOW, -20),
]


async def _drop_data(session: AsyncSession) -> None:
    """Delete all rows (children first)."""
    for model in (DocumentModel, TicketModel, ModuleModel, ModuleTypeModel, ClientModel):
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def seed(drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"module_types": 0, "clients": 0, "modules": 0, "tickets": 0}
    today = date.today()

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        clients = SqlClientRepository(session)
        module_types = SqlModuleTypeRepository(session)
        modules = SqlModuleRepository(session)
        tickets = SqlTicketRepository(session)
        register = RegisterModuleUseCase(
            modules, module_types, clients, settings.default_warranty_months
        )

        # 1. Catalog
        saved_types = []
        for name, description in MODULE_TYPES:
            saved_types.append(
                await module_types.save(ModuleType(id=None, name=name, description=description))
            )
            counts["module_types"] += 1

        # 2. Clients
        saved_clients = []
        for data in CLIENTS:
            saved_clients.append(await clients.save(Client(id=None, **data)))
            counts["clients"] += 1

        # 3. Installed modules, warranty computed from the installation date
        saved_modules = []
        for client_idx, type_idx, serial, site, address in MODULES:
            module = await register.execute(
                client_id=saved_clients[client_idx].id,
                module_type_id=saved_types[type_idx].id,
                serial_number=serial,
                installation_date=today - timedelta(days=200 * (len(saved_modules) + 1)),
                location=site,
                address=address,
            )
            saved_modules.append(module)
            counts["modules"] += 1

        # 4. Tickets
        for module_idx, title, description, status, priority, offset in TICKETS:
            module = saved_modules[module_idx]
            await tickets.save(
                Ticket(
                    id=None,
                    client_id=module.client_id,
                    module_id=module.id,
                    title=title,
                    description=description,
                    status=status,
                    priority=priority,
                    scheduled_date=today + timedelta(days=offset) if offset is not None else None,
                )
            )
            counts["tickets"] += 1

        await session.commit()

    logger.info("Seeding complete: %s", counts)
    return counts


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        for label, model in (
            ("Clients", ClientModel),
            ("Module types", ModuleTypeModel),
            ("Modules", ModuleModel),
            ("Tickets", TicketModel),
            ("Documents", DocumentModel),
        ):
            total = (await session.execute(select(func.count()).select_from(model))).scalar_one()
            print(f"{label + ':':14}{total}")

        today_stops = (
            await session.execute(
                select(func.count())
                .select_from(TicketModel)
                .where(TicketModel.scheduled_date == date.today())
            )
        ).scalar_one()
        print(f"Visits scheduled today: {today_stops}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed FieldOps database with demo data")
    parser.add_argument(
        "--drop", action="store_true", help="Drop existing data before seeding"
    )
    parser.add_argument(
        "--verify-only", action="store_true", help="Only print current counts"
    )
    args = parser.parse_args()

    if args.verify_only:
        asyncio.run(_verify_data())
        return

    async def run_all():
        await seed(drop=args.drop)
        await _verify_data()

    try:
        asyncio.run(run_all())
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
