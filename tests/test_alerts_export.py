import csv
import io
import json
from datetime import date, datetime, timedelta, timezone

from brewstock.services.alert_service import generate_alerts, split_alerts
from brewstock.services.export_service import (
    ALERT_COLUMNS,
    ANALYSIS_COLUMNS,
    TRANSACTION_COLUMNS,
    alerts_to_csv,
    analysis_to_csv,
    export_filename,
    transactions_to_csv,
)
from brewstock.services.snapshot import (
    InventorySnapshot,
    ItemRecord,
    LocationRecord,
    StockRecord,
    TransactionRecord,
)
from brewstock.services.trend_service import analyze_stock_trends

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _snapshot() -> InventorySnapshot:
    return InventorySnapshot.build(
        locations=[
            LocationRecord(id="loc-1", name="Front Counter"),
            LocationRecord(id="loc-2", name="Back Room"),
        ],
        items=[
            ItemRecord(id="a", name="Item A", unit="kg", min_stock=5, max_stock=20),
            ItemRecord(id="b", name="Item B", unit="unit", min_stock=0, max_stock=0),
            ItemRecord(id="c", name="Syrup, \"Vanilla\"", unit="bottle", min_stock=2, max_stock=12),
            ItemRecord(id="d", name="Lids", unit="unit", min_stock=None, max_stock=None),
        ],
        stock_levels=[
            StockRecord(item_id="a", location_id="loc-1", quantity=3),
            StockRecord(item_id="a", location_id="loc-2", quantity=0),
            StockRecord(item_id="b", location_id="loc-1", quantity=5),
        ],
    )


def _rows(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


def test_scenario_low_stock_alert_is_a_warning():
    alerts = generate_alerts(_snapshot())
    alert = next(alert for alert in alerts if alert.item_id == "a")
    assert alert.id == "a-low"
    assert alert.type == "low"
    assert alert.current_stock == 3
    assert alert.min_stock == 5
    assert alert.severity == "warning"
    assert [row.location_id for row in alert.location_stocks] == ["loc-1"]


def test_alerts_follow_item_order_and_split_by_severity():
    alerts = generate_alerts(_snapshot())
    # Item B is above its minimum of 0; C and D are empty.
    assert [alert.item_id for alert in alerts] == ["a", "c", "d"]
    assert generate_alerts(_snapshot()) == alerts

    grouped = split_alerts(alerts)
    assert grouped.total == 3
    assert [alert.item_id for alert in grouped.critical] == ["c", "d"]
    assert [alert.item_id for alert in grouped.warning] == ["a"]


def test_alerts_csv_quotes_every_field():
    content = alerts_to_csv(generate_alerts(_snapshot()))
    lines = content.splitlines()
    assert lines[0] == ",".join(f'"{column}"' for column in ALERT_COLUMNS)
    assert lines[1] == '"Item A","kg","warning","3","5"'
    assert lines[2] == '"Syrup, ""Vanilla""","bottle","critical","0","2"'
    assert _rows(content)[2][0] == 'Syrup, "Vanilla"'


def test_analysis_csv_uses_quantity_formatting():
    transactions = [
        TransactionRecord(
            id="t1",
            type="STOCK_UPDATED",
            timestamp=NOW - timedelta(hours=1),
            details={"item_id": "a", "item_name": "Item A", "quantity_change": 10.255, "unit": "kg"},
        ),
        TransactionRecord(
            id="t2",
            type="STOCK_UPDATED",
            timestamp=NOW - timedelta(hours=2),
            details={"item_id": "a", "item_name": "Item A", "quantity_change": -4, "unit": "kg"},
        ),
    ]
    analysis = analyze_stock_trends(transactions, period="day", now=NOW)
    rows = _rows(analysis_to_csv(analysis))
    assert rows[0] == ANALYSIS_COLUMNS
    assert rows[1] == ["Item A", "kg", "10.26", "4", "1", "1", "4", "10.26", "increasing"]


def test_empty_exports_still_have_headers():
    empty = analyze_stock_trends([], period="week", now=NOW)
    assert _rows(analysis_to_csv(empty)) == [ANALYSIS_COLUMNS]
    assert _rows(alerts_to_csv([])) == [ALERT_COLUMNS]
    assert _rows(transactions_to_csv([])) == [TRANSACTION_COLUMNS]


def test_transactions_csv_has_description_and_details():
    record = TransactionRecord(
        id="t1",
        type="STOCK_UPDATED",
        timestamp=datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc),
        details={
            "item_id": "a",
            "item_name": "Item A",
            "location_id": "loc-1",
            "location_name": "Front Counter",
            "quantity_change": 5,
            "unit": "kg",
        },
        user_name="Sam",
    )
    rows = _rows(transactions_to_csv([record]))
    assert rows[1][:4] == [
        "2026-10-17 08:30:00",
        "Stock Updated",
        "Sam",
        "Item A stock increased by +5 kg at Front Counter",
    ]
    assert json.loads(rows[1][4])["item_id"] == "a"


def test_export_filename_pattern():
    on = date(2026, 10, 18)
    assert export_filename("stock-analysis", period="week", on=on) == "stock-analysis-week-2026-10-18.csv"
    assert export_filename("stock-alerts", on=on) == "stock-alerts-2026-10-18.csv"
