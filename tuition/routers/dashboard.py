from dataclasses import asdict

from fastapi import APIRouter, Depends

from tuition.dependencies import ensure_ok, get_store, get_time_provider
from tuition.route_logging import EndpointNameRoute
from tuition.services.dashboard_service import DashboardView
from tuition.store.client import StoreClient


router = APIRouter(prefix='/dashboard', tags=['Dashboard'], route_class=EndpointNameRoute)


@router.get('')
async def dashboard(store: StoreClient = Depends(get_store), time_provider=Depends(get_time_provider)):
    view = DashboardView(store, time_provider=time_provider)
    result = ensure_ok(await view.load())
    return asdict(result.data)
