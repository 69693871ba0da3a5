from pydantic import BaseModel

from brewstock.schemas.inventory import ItemStockViewOut


class DashboardStatsOut(BaseModel):
    total_items: int
    total_locations: int
    out_of_stock: int
    critical_stock: int
    low_stock: int
    high_stock: int
    good_stock: int
    total_alerts: int


class DashboardOut(BaseModel):
    stats: DashboardStatsOut
    items: list[ItemStockViewOut]
    critical_items: list[ItemStockViewOut]
    needs_attention: list[ItemStockViewOut]
    well_stocked: list[ItemStockViewOut]


class LocationHealthOut(BaseModel):
    location_id: str
    location_name: str
    location_type: str | None = None
    assigned_items: int
    healthy_items: int
    health_score: float


class LocationHealthListOut(BaseModel):
    items: list[LocationHealthOut]


class CategorySummaryOut(BaseModel):
    category_id: str
    category_name: str
    description: str | None = None
    total_items: int
    healthy_items: int
    low_items: int
    out_items: int
    healthy_percentage: float
    items: list[ItemStockViewOut]


class CategorySummaryListOut(BaseModel):
    items: list[CategorySummaryOut]
