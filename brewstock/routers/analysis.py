from fastapi import APIRouter, Depends, HTTPException, Query, Response

from brewstock.core.api_docs import CSV_RESPONSE, error_responses
from brewstock.core.config import settings
from brewstock.core.deps import get_store
from brewstock.schemas.analytics import StockAnalysisOut
from brewstock.services.export_service import CSV_CONTENT_TYPE, analysis_to_csv, export_filename
from brewstock.services.inventory_store import InventoryStore
from brewstock.services.trend_service import analyze_stock_trends

router = APIRouter(prefix="/analysis", tags=["analysis"])


def _run_analysis(
    store: InventoryStore,
    *,
    period: str,
    item_id: str | None,
    location_id: str | None,
) -> StockAnalysisOut:
    normalized_period = period.strip().lower()
    try:
        return analyze_stock_trends(
            store.snapshot().transactions,
            period=normalized_period,
            item_id=item_id,
            location_id=location_id,
            top_n=settings.analysis_top_n,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get(
    "",
    response_model=StockAnalysisOut,
    summary="Restock and consumption trends",
    responses=error_responses(400, 422, 500),
)
def stock_analysis(
    period: str = Query(default="week"),
    item_id: str | None = Query(default=None),
    location_id: str | None = Query(default=None),
    store: InventoryStore = Depends(get_store),
):
    return _run_analysis(store, period=period, item_id=item_id, location_id=location_id)


@router.get(
    "/export",
    response_class=Response,
    summary="Export trend analysis as CSV",
    responses={**CSV_RESPONSE, **error_responses(400, 422, 500)},
)
def export_stock_analysis(
    period: str = Query(default="week"),
    item_id: str | None = Query(default=None),
    location_id: str | None = Query(default=None),
    store: InventoryStore = Depends(get_store),
):
    analysis = _run_analysis(store, period=period, item_id=item_id, location_id=location_id)
    filename = export_filename("stock-analysis", period=analysis.period)
    return Response(
        content=analysis_to_csv(analysis),
        media_type=CSV_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
