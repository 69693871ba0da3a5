from dataclasses import dataclass
from typing import Any

from brewstock.core.quantity import percentage, to_quantity
from brewstock.schemas.inventory import StockStatus

LOW_STOCK_PERCENT = 25
HIGH_STOCK_PERCENT = 90

URGENCY: dict[str, int] = {
    "out": 4,
    "critical": 3,
    "low": 2,
    "high": 1,
    "good": 0,
}


@dataclass(frozen=True)
class StockClassification:
    status: StockStatus
    urgency: int
    stock_percentage: float

    @property
    def fill_percentage(self) -> float:
        return min(self.stock_percentage, 100.0)

    @property
    def is_healthy(self) -> bool:
        return self.status in ("good", "high")


def classify_stock(current_stock: Any, min_stock: Any, max_stock: Any) -> StockClassification:
    """Classify one item's total stock against its thresholds.

    First match wins: empty is `out`, at or under the minimum is `critical`,
    then the share of `max_stock` decides `low` (<= 25%), `high` (>= 90%) or
    `good`. A zero `max_stock` yields 0%, so any positive stock above the
    minimum is reported `low`.
    """
    current = to_quantity(current_stock)
    minimum = to_quantity(min_stock)
    maximum = to_quantity(max_stock)
    pct = percentage(current, maximum) if maximum > 0 else 0.0

    status: StockStatus
    if current == 0:
        status = "out"
    elif current <= minimum:
        status = "critical"
    elif pct <= LOW_STOCK_PERCENT:
        status = "low"
    elif pct >= HIGH_STOCK_PERCENT:
        status = "high"
    else:
        status = "good"

    return StockClassification(status=status, urgency=URGENCY[status], stock_percentage=pct)
