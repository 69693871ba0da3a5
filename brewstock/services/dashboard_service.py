from brewstock.schemas.dashboard import DashboardOut, DashboardStatsOut
from brewstock.schemas.inventory import ItemStockViewOut
from brewstock.services.aggregation_service import build_item_views
from brewstock.services.alert_service import generate_alerts
from brewstock.services.snapshot import InventorySnapshot


def _stats_from_views(
    snapshot: InventorySnapshot, views: list[ItemStockViewOut]
) -> DashboardStatsOut:
    counts = {"out": 0, "critical": 0, "low": 0, "high": 0, "good": 0}
    for view in views:
        counts[view.stock_status] += 1
    return DashboardStatsOut(
        total_items=len(snapshot.items),
        total_locations=len(snapshot.locations),
        out_of_stock=counts["out"],
        critical_stock=counts["critical"],
        low_stock=counts["low"],
        high_stock=counts["high"],
        good_stock=counts["good"],
        total_alerts=len(generate_alerts(snapshot)),
    )


def get_dashboard_stats(snapshot: InventorySnapshot) -> DashboardStatsOut:
    return _stats_from_views(snapshot, build_item_views(snapshot))


def get_dashboard(snapshot: InventorySnapshot) -> DashboardOut:
    views = build_item_views(snapshot)
    return DashboardOut(
        stats=_stats_from_views(snapshot, views),
        items=views,
        critical_items=[view for view in views if view.urgency >= 3],
        needs_attention=[view for view in views if view.urgency >= 2],
        well_stocked=[view for view in views if view.urgency == 0],
    )
