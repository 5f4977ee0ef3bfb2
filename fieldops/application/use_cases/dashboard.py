"""DashboardUseCase — headline counters and the most recent tickets."""

from __future__ import annotations

from dataclasses import dataclass

from fieldops.application.ports.client_repo import ClientRepository
from fieldops.application.ports.module_repo import ModuleRepository
from fieldops.application.ports.ticket_repo import TicketRepository
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.value_objects.enums import TicketStatus

RECENT_TICKETS_LIMIT = 5


@dataclass
class DashboardStats:
    new_tickets: int
    pending_maintenance: int
    total_clients: int
    total_modules: int


@dataclass
class Dashboard:
    stats: DashboardStats
    recent_tickets: list[Ticket]


class DashboardUseCase:
    def __init__(
        self,
        ticket_repo: TicketRepository,
        client_repo: ClientRepository,
        module_repo: ModuleRepository,
    ):
        self._tickets = ticket_repo
        self._clients = client_repo
        self._modules = module_repo

    async def execute(self, limit: int = RECENT_TICKETS_LIMIT) -> Dashboard:
        stats = DashboardStats(
            new_tickets=await self._tickets.count(statuses=(TicketStatus.NEW,)),
            pending_maintenance=await self._tickets.count(
                statuses=(TicketStatus.NEW, TicketStatus.IN_PROGRESS)
            ),
            total_clients=await self._clients.count(),
            total_modules=await self._modules.count(),
        )
        recent = (await self._tickets.get_all())[:limit]
        return Dashboard(stats=stats, recent_tickets=recent)
