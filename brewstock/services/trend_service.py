import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from brewstock.schemas.analytics import (
    ActivityBucketOut,
    AnalysisPeriod,
    AnalysisSummaryOut,
    DailyTotalsOut,
    ItemTrendOut,
    StockAnalysisOut,
    StockTrajectory,
    TopPerformersOut,
)
from brewstock.schemas.transaction import StockTransaction, transaction_adapter
from brewstock.services.snapshot import TransactionRecord

logger = logging.getLogger("brewstock.analysis")

PERIOD_DAYS: dict[str, int] = {
    "day": 1,
    "week": 7,
    "month": 30,
    "quarter": 90,
    "year": 365,
}

# One side must exceed the other by more than 20% to count as a trajectory.
TRAJECTORY_MARGIN = 1.2
DEFAULT_TOP_N = 5


def period_days(period: str) -> int:
    try:
        return PERIOD_DAYS[period]
    except KeyError:
        allowed = ", ".join(PERIOD_DAYS)
        raise ValueError(f"Unknown period {period!r}. Allowed: {allowed}") from None


def classify_trajectory(total_restocked: float, total_consumed: float) -> StockTrajectory:
    if total_consumed > total_restocked * TRAJECTORY_MARGIN:
        return "declining"
    if total_restocked > total_consumed * TRAJECTORY_MARGIN:
        return "increasing"
    return "stable"


def _raw_fields(record: TransactionRecord | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(record, Mapping):
        return {
            "id": record.get("id"),
            "type": record.get("type"),
            "timestamp": record.get("timestamp"),
            "details": record.get("details"),
            "user_name": record.get("user_name") or "System",
        }
    return {
        "id": record.id,
        "type": record.type,
        "timestamp": record.timestamp,
        "details": record.details,
        "user_name": record.user_name or "System",
    }


def parse_stock_transaction(record: TransactionRecord | Mapping[str, Any]) -> StockTransaction | None:
    """Parse a STOCK_UPDATED record, or return None if it is another type or malformed."""
    fields = _raw_fields(record)
    if fields["type"] != "STOCK_UPDATED":
        return None
    try:
        parsed = transaction_adapter.validate_python(fields)
    except ValidationError as exc:
        logger.debug("skipping malformed stock transaction %s: %s", fields["id"], exc.errors())
        return None
    if not isinstance(parsed, StockTransaction):
        return None
    return parsed


def _empty_analysis(
    period: AnalysisPeriod,
    days: int,
    cutoff: datetime,
    item_id: str | None,
    location_id: str | None,
) -> StockAnalysisOut:
    return StockAnalysisOut(
        period=period,
        period_days=days,
        cutoff=cutoff,
        item_id=item_id,
        location_id=location_id,
        is_empty=True,
    )


def _add_movement(bucket: ActivityBucketOut, change: float) -> None:
    if change > 0:
        bucket.restocked += change
    elif change < 0:
        bucket.consumed += abs(change)
    bucket.transactions += 1


def analyze_stock_trends(
    transactions: Iterable[TransactionRecord | Mapping[str, Any]],
    *,
    period: AnalysisPeriod = "week",
    item_id: str | None = None,
    location_id: str | None = None,
    now: datetime | None = None,
    top_n: int = DEFAULT_TOP_N,
) -> StockAnalysisOut:
    """Restock and consumption analysis over a trailing window.

    Only STOCK_UPDATED transactions inside the window that match the optional
    item and location filters are considered. Records that cannot be parsed
    are skipped. When nothing survives the filter the result has
    `is_empty=True` and zeroed totals.
    """
    days = period_days(period)
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    cutoff = current - timedelta(days=days)

    matching: list[StockTransaction] = []
    for record in transactions:
        parsed = parse_stock_transaction(record)
        if parsed is None:
            continue
        if parsed.timestamp < cutoff:
            continue
        if item_id and parsed.details.item_id != item_id:
            continue
        if location_id and parsed.details.location_id != location_id:
            continue
        matching.append(parsed)

    if not matching:
        return _empty_analysis(period, days, cutoff, item_id, location_id)

    item_analysis: dict[str, ItemTrendOut] = {}
    daily_data: dict[str, DailyTotalsOut] = {}

    for transaction in matching:
        details = transaction.details
        change = details.quantity_change
        date_key = transaction.timestamp.date().isoformat()

        trend = item_analysis.get(details.item_id)
        if trend is None:
            trend = ItemTrendOut(item_id=details.item_id, item_name=details.item_name, unit=details.unit)
            item_analysis[details.item_id] = trend

        if change > 0:
            trend.total_restocked += change
            trend.restock_count += 1
        elif change < 0:
            trend.total_consumed += abs(change)
            trend.consumption_count += 1

        _add_movement(trend.locations.setdefault(details.location_name, ActivityBucketOut()), change)
        _add_movement(trend.daily_activity.setdefault(date_key, ActivityBucketOut()), change)

        day = daily_data.setdefault(date_key, DailyTotalsOut())
        if change > 0:
            day.total_restocked += change
        elif change < 0:
            day.total_consumed += abs(change)
        day.transactions += 1

    for trend in item_analysis.values():
        active_days = len(trend.daily_activity) or 1
        trend.average_restock = trend.total_restocked / trend.restock_count if trend.restock_count else 0.0
        trend.average_consumption = (
            trend.total_consumed / trend.consumption_count if trend.consumption_count else 0.0
        )
        trend.daily_consumption = trend.total_consumed / active_days
        trend.daily_restock = trend.total_restocked / active_days
        trend.trajectory = classify_trajectory(trend.total_restocked, trend.total_consumed)

    trends = list(item_analysis.values())
    total_items = len(trends)
    restock_events = sum(trend.restock_count for trend in trends)
    consumption_events = sum(trend.consumption_count for trend in trends)

    return StockAnalysisOut(
        period=period,
        period_days=days,
        cutoff=cutoff,
        item_id=item_id,
        location_id=location_id,
        item_analysis=item_analysis,
        daily_data=dict(sorted(daily_data.items())),
        summary=AnalysisSummaryOut(
            total_items=total_items,
            total_restock_events=restock_events,
            total_consumption_events=consumption_events,
            total_transactions=len(matching),
            average_restocks_per_item=round(restock_events / total_items, 1),
            average_consumptions_per_item=round(consumption_events / total_items, 1),
        ),
        top_performers=TopPerformersOut(
            top_consumed=sorted(trends, key=lambda t: t.total_consumed, reverse=True)[:top_n],
            top_restocked=sorted(trends, key=lambda t: t.total_restocked, reverse=True)[:top_n],
            most_active=sorted(
                trends,
                key=lambda t: t.restock_count + t.consumption_count,
                reverse=True,
            )[:top_n],
        ),
        is_empty=False,
    )
