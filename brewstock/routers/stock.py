from fastapi import APIRouter, Depends, Query

from brewstock.core.api_docs import error_responses
from brewstock.core.deps import get_store
from brewstock.core.errors import NotFoundError
from brewstock.core.quantity import to_quantity
from brewstock.schemas.inventory import (
    ItemStockViewOut,
    StockLevelListOut,
    StockLevelOut,
    StockLevelUpsertIn,
)
from brewstock.services.aggregation_service import item_stock_view
from brewstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/stock", tags=["stock"])


@router.get(
    "",
    response_model=StockLevelListOut,
    summary="List stock levels",
    responses=error_responses(422, 500),
)
def list_stock_levels(
    item_id: str | None = Query(default=None),
    location_id: str | None = Query(default=None),
    store: InventoryStore = Depends(get_store),
):
    snapshot = store.snapshot()
    items = {row.id: row for row in snapshot.items}
    locations = {row.id: row for row in snapshot.locations}

    rows: list[StockLevelOut] = []
    for stock in snapshot.stock_levels.values():
        if item_id and stock.item_id != item_id:
            continue
        if location_id and stock.location_id != location_id:
            continue
        item = items.get(stock.item_id)
        location = locations.get(stock.location_id)
        rows.append(
            StockLevelOut(
                item_id=stock.item_id,
                location_id=stock.location_id,
                item_name=item.name if item else None,
                location_name=location.name if location else None,
                unit=item.unit if item else None,
                quantity=to_quantity(stock.quantity),
                last_updated=stock.last_updated,
            )
        )
    return StockLevelListOut(items=rows)


@router.put(
    "",
    response_model=StockLevelOut,
    summary="Set the stock level of an item at a location",
    responses=error_responses(400, 404, 422, 500),
)
def upsert_stock_level(payload: StockLevelUpsertIn, store: InventoryStore = Depends(get_store)):
    stock = store.update_stock_level(payload.item_id, payload.location_id, payload.quantity)
    item = store.get_item(stock.item_id)
    location = store.get_location(stock.location_id)
    return StockLevelOut(
        item_id=stock.item_id,
        location_id=stock.location_id,
        item_name=item.name,
        location_name=location.name,
        unit=item.unit,
        quantity=stock.quantity,
        last_updated=stock.last_updated,
    )


@router.get(
    "/items/{item_id}",
    response_model=ItemStockViewOut,
    summary="Stock view for a single item",
    responses=error_responses(404, 500),
)
def get_item_stock(item_id: str, store: InventoryStore = Depends(get_store)):
    snapshot = store.snapshot()
    item = snapshot.item_by_id(item_id)
    if item is None:
        raise NotFoundError("Item not found")
    return item_stock_view(snapshot, item)
