"""
Router FastAPI per la Dashboard
Progetto: Sales Manager (Gestione Vendite)
"""

from fastapi import APIRouter, Depends

from sales_manager.core.deps import get_dashboard_service
from sales_manager.schemas.dashboard import DashboardKPIs, DashboardSnapshot
from sales_manager.services.dashboard_service import DashboardService

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get(
    "/",
    name="dashboard",
    summary="Snapshot dashboard",
    description="Ultimo snapshot calcolato (KPI, serie mensile, distribuzione stati).",
    response_model=DashboardSnapshot,
)
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardSnapshot:
    return service.snapshot


@router.get("/kpis", name="dashboard_kpi", summary="KPI", response_model=DashboardKPIs)
async def get_kpis(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardKPIs:
    return service.snapshot.kpis


@router.post(
    "/refresh",
    name="dashboard_aggiorna",
    summary="Ricalcola dashboard",
    response_model=DashboardSnapshot,
)
async def refresh_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardSnapshot:
    return service.refresh()
