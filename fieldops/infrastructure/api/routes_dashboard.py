"""Dashboard endpoint."""

from fastapi import APIRouter, Depends

from fieldops.application.use_cases.dashboard import DashboardUseCase
from fieldops.infrastructure.api.dependencies import get_dashboard_uc
from fieldops.infrastructure.api.serializers import serialize_ticket

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
async def dashboard(uc: DashboardUseCase = Depends(get_dashboard_uc)):
    data = await uc.execute()
    return {
        "new_tickets": data.stats.new_tickets,
        "pending_maintenance": data.stats.pending_maintenance,
        "total_clients": data.stats.total_clients,
        "total_modules": data.stats.total_modules,
        "recent_tickets": [serialize_ticket(t) for t in data.recent_tickets],
    }
