from fastapi import APIRouter, Depends, Response

from brewstock.core.api_docs import CSV_RESPONSE, error_responses
from brewstock.core.deps import get_store
from brewstock.schemas.alert import AlertListOut
from brewstock.services.alert_service import generate_alerts, split_alerts
from brewstock.services.export_service import CSV_CONTENT_TYPE, alerts_to_csv, export_filename
from brewstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get(
    "",
    response_model=AlertListOut,
    summary="Low-stock alerts grouped by severity",
    responses=error_responses(500),
)
def list_alerts(store: InventoryStore = Depends(get_store)):
    return split_alerts(generate_alerts(store.snapshot()))


@router.get(
    "/export",
    response_class=Response,
    summary="Export low-stock alerts as CSV",
    responses={**CSV_RESPONSE, **error_responses(500)},
)
def export_alerts(store: InventoryStore = Depends(get_store)):
    filename = export_filename("stock-alerts")
    return Response(
        content=alerts_to_csv(generate_alerts(store.snapshot())),
        media_type=CSV_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
