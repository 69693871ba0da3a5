from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

AnalysisPeriod = Literal["day", "week", "month", "quarter", "year"]

# Net stock direction over the window: restocking vs depletion dominance.
# This is not a demand forecast.
StockTrajectory = Literal["increasing", "declining", "stable"]


class ActivityBucketOut(BaseModel):
    restocked: float = 0.0
    consumed: float = 0.0
    transactions: int = 0


class DailyTotalsOut(BaseModel):
    total_restocked: float = 0.0
    total_consumed: float = 0.0
    transactions: int = 0


class ItemTrendOut(BaseModel):
    item_id: str
    item_name: str
    unit: str
    total_restocked: float = 0.0
    total_consumed: float = 0.0
    restock_count: int = 0
    consumption_count: int = 0
    average_restock: float = 0.0
    average_consumption: float = 0.0
    daily_consumption: float = 0.0
    daily_restock: float = 0.0
    trajectory: StockTrajectory = "stable"
    daily_activity: dict[str, ActivityBucketOut] = Field(default_factory=dict)
    locations: dict[str, ActivityBucketOut] = Field(default_factory=dict)


class AnalysisSummaryOut(BaseModel):
    total_items: int = 0
    total_restock_events: int = 0
    total_consumption_events: int = 0
    total_transactions: int = 0
    average_restocks_per_item: float = 0.0
    average_consumptions_per_item: float = 0.0


class TopPerformersOut(BaseModel):
    top_consumed: list[ItemTrendOut] = Field(default_factory=list)
    top_restocked: list[ItemTrendOut] = Field(default_factory=list)
    most_active: list[ItemTrendOut] = Field(default_factory=list)


class StockAnalysisOut(BaseModel):
    period: AnalysisPeriod
    period_days: int
    cutoff: datetime
    item_id: str | None = None
    location_id: str | None = None
    item_analysis: dict[str, ItemTrendOut] = Field(default_factory=dict)
    daily_data: dict[str, DailyTotalsOut] = Field(default_factory=dict)
    summary: AnalysisSummaryOut = Field(default_factory=AnalysisSummaryOut)
    top_performers: TopPerformersOut = Field(default_factory=TopPerformersOut)
    is_empty: bool = True
