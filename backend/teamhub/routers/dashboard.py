from fastapi import APIRouter

from teamhub.routers.deps import CurrentRequester, Store
from teamhub.schemas.dashboard import DashboardStats
from teamhub.services import dashboard

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(requester: CurrentRequester, store: Store):
    return await dashboard.get_dashboard_stats(store, requester)
