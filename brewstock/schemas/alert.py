from typing import Literal

from pydantic import BaseModel

from brewstock.schemas.inventory import LocationStockOut

AlertSeverity = Literal["critical", "warning"]


class StockAlertOut(BaseModel):
    id: str
    type: Literal["low"] = "low"
    item_id: str
    item_name: str
    unit: str
    current_stock: float
    min_stock: float
    severity: AlertSeverity
    location_stocks: list[LocationStockOut] = []


class AlertListOut(BaseModel):
    total: int
    critical: list[StockAlertOut]
    warning: list[StockAlertOut]
