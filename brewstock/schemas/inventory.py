from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from brewstock.schemas.catalog import ItemOut

StockStatus = Literal["out", "critical", "low", "high", "good"]


class StockLevelUpsertIn(BaseModel):
    item_id: str
    location_id: str
    quantity: float = Field(ge=0)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "item_id": "item-id-here",
                "location_id": "location-id-here",
                "quantity": 12.5,
            }
        }
    )


class StockLevelOut(BaseModel):
    item_id: str
    location_id: str
    item_name: str | None = None
    location_name: str | None = None
    unit: str | None = None
    quantity: float
    last_updated: datetime | None = None


class StockLevelListOut(BaseModel):
    items: list[StockLevelOut]


class LocationStockOut(BaseModel):
    location_id: str
    location_name: str
    stock: float


class ItemStockViewOut(ItemOut):
    category_name: str | None = None
    supplier_name: str | None = None
    total_stock: float
    stock_status: StockStatus
    urgency: int
    stock_percentage: float
    fill_percentage: float
    location_stocks: list[LocationStockOut]
