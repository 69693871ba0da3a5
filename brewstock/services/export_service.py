import csv
import io
import json
from datetime import date
from typing import Iterable

from brewstock.core.quantity import format_quantity
from brewstock.schemas.alert import StockAlertOut
from brewstock.schemas.analytics import StockAnalysisOut
from brewstock.services.snapshot import TransactionRecord
from brewstock.services.transaction_log_service import transaction_entry_out

CSV_CONTENT_TYPE = "text/csv"

ANALYSIS_COLUMNS = [
    "Item Name",
    "Unit",
    "Total Restocked",
    "Total Consumed",
    "Restock Count",
    "Consumption Count",
    "Daily Avg Consumption",
    "Daily Avg Restock",
    "Trend",
]
ALERT_COLUMNS = ["Item Name", "Unit", "Severity", "Current Stock", "Minimum Stock"]
TRANSACTION_COLUMNS = ["Timestamp", "Type", "User", "Description", "Details"]


def _write_csv(header: list[str], rows: Iterable[list[object]]) -> str:
    writer_io = io.StringIO()
    writer = csv.writer(writer_io, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow(row)
    return writer_io.getvalue()


def export_filename(report_name: str, *, period: str | None = None, on: date | None = None) -> str:
    stamp = (on or date.today()).isoformat()
    if period:
        return f"{report_name}-{period}-{stamp}.csv"
    return f"{report_name}-{stamp}.csv"


def analysis_to_csv(analysis: StockAnalysisOut) -> str:
    return _write_csv(
        ANALYSIS_COLUMNS,
        (
            [
                trend.item_name,
                trend.unit,
                format_quantity(trend.total_restocked),
                format_quantity(trend.total_consumed),
                trend.restock_count,
                trend.consumption_count,
                format_quantity(trend.daily_consumption),
                format_quantity(trend.daily_restock),
                trend.trajectory,
            ]
            for trend in analysis.item_analysis.values()
        ),
    )


def alerts_to_csv(alerts: list[StockAlertOut]) -> str:
    return _write_csv(
        ALERT_COLUMNS,
        (
            [
                alert.item_name,
                alert.unit,
                alert.severity,
                format_quantity(alert.current_stock),
                format_quantity(alert.min_stock),
            ]
            for alert in alerts
        ),
    )


def transactions_to_csv(transactions: list[TransactionRecord]) -> str:
    rows = []
    for record in transactions:
        entry = transaction_entry_out(record)
        rows.append(
            [
                entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                entry.label,
                entry.user_name,
                entry.description,
                json.dumps(record.details, default=str),
            ]
        )
    return _write_csv(TRANSACTION_COLUMNS, rows)
