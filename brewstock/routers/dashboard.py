from fastapi import APIRouter, Depends

from brewstock.core.api_docs import error_responses
from brewstock.core.deps import get_store
from brewstock.schemas.dashboard import (
    CategorySummaryListOut,
    DashboardOut,
    LocationHealthListOut,
)
from brewstock.services.aggregation_service import category_summaries, location_health
from brewstock.services.dashboard_service import get_dashboard
from brewstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardOut,
    summary="Inventory overview",
    responses=error_responses(500),
)
def dashboard_overview(store: InventoryStore = Depends(get_store)):
    return get_dashboard(store.snapshot())


@router.get(
    "/location-health",
    response_model=LocationHealthListOut,
    summary="Health score per location",
    responses=error_responses(500),
)
def dashboard_location_health(store: InventoryStore = Depends(get_store)):
    return LocationHealthListOut(items=location_health(store.snapshot()))


@router.get(
    "/categories",
    response_model=CategorySummaryListOut,
    summary="Stock summary per category",
    responses=error_responses(500),
)
def dashboard_categories(store: InventoryStore = Depends(get_store)):
    return CategorySummaryListOut(items=category_summaries(store.snapshot()))
