from brewstock.core.quantity import to_quantity
from brewstock.schemas.alert import AlertListOut, StockAlertOut
from brewstock.services.aggregation_service import location_breakdown, total_stock
from brewstock.services.snapshot import InventorySnapshot


def generate_alerts(snapshot: InventorySnapshot) -> list[StockAlertOut]:
    """One low-stock alert per item at or under its minimum, in item order."""
    alerts: list[StockAlertOut] = []
    for item in snapshot.items:
        stock = total_stock(snapshot, item.id)
        min_stock = to_quantity(item.min_stock)
        if stock > min_stock:
            continue
        alerts.append(
            StockAlertOut(
                id=f"{item.id}-low",
                item_id=item.id,
                item_name=item.name,
                unit=item.unit or "unit",
                current_stock=stock,
                min_stock=min_stock,
                severity="critical" if stock == 0 else "warning",
                location_stocks=location_breakdown(snapshot, item.id),
            )
        )
    return alerts


def split_alerts(alerts: list[StockAlertOut]) -> AlertListOut:
    return AlertListOut(
        total=len(alerts),
        critical=[alert for alert in alerts if alert.severity == "critical"],
        warning=[alert for alert in alerts if alert.severity == "warning"],
    )
