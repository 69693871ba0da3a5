from typing import get_args

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from brewstock.core.api_docs import CSV_RESPONSE, error_responses
from brewstock.core.deps import get_store
from brewstock.schemas.common import PaginationMeta
from brewstock.schemas.transaction import TRANSACTION_TYPES, TransactionLogListOut
from brewstock.services.export_service import CSV_CONTENT_TYPE, export_filename, transactions_to_csv
from brewstock.services.inventory_store import InventoryStore
from brewstock.services.snapshot import TransactionRecord
from brewstock.services.transaction_log_service import (
    DateFilter,
    filter_transactions,
    transaction_entry_out,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])

DATE_FILTERS = set(get_args(DateFilter))


def _filtered(
    store: InventoryStore,
    *,
    type: str | None,
    date_filter: str,
    search: str | None,
) -> list[TransactionRecord]:
    normalized_type = type.strip().upper() if type else None
    if normalized_type and normalized_type not in TRANSACTION_TYPES:
        allowed = ", ".join(TRANSACTION_TYPES)
        raise HTTPException(status_code=400, detail=f"Invalid type. Allowed: {allowed}")
    normalized_filter = date_filter.strip().lower()
    if normalized_filter not in DATE_FILTERS:
        allowed = ", ".join(sorted(DATE_FILTERS))
        raise HTTPException(status_code=400, detail=f"Invalid date_filter. Allowed: {allowed}")
    return filter_transactions(
        store.snapshot().transactions,
        type=normalized_type,
        date_filter=normalized_filter,
        search=search,
    )


@router.get(
    "",
    response_model=TransactionLogListOut,
    summary="Transaction log",
    responses=error_responses(400, 422, 500),
)
def list_transactions(
    type: str | None = Query(default=None),
    date_filter: str = Query(default="all"),
    search: str | None = Query(default=None, max_length=200),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: InventoryStore = Depends(get_store),
):
    records = _filtered(store, type=type, date_filter=date_filter, search=search)
    total = len(records)
    items = [transaction_entry_out(record) for record in records[offset : offset + limit]]
    count = len(items)
    return TransactionLogListOut(
        items=items,
        pagination=PaginationMeta(
            total=total,
            limit=limit,
            offset=offset,
            count=count,
            has_next=(offset + count) < total,
        ),
    )


@router.get(
    "/export",
    response_class=Response,
    summary="Export the filtered transaction log as CSV",
    responses={**CSV_RESPONSE, **error_responses(400, 422, 500)},
)
def export_transactions(
    type: str | None = Query(default=None),
    date_filter: str = Query(default="all"),
    search: str | None = Query(default=None, max_length=200),
    store: InventoryStore = Depends(get_store),
):
    records = _filtered(store, type=type, date_filter=date_filter, search=search)
    filename = export_filename("transaction-log")
    return Response(
        content=transactions_to_csv(records),
        media_type=CSV_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
