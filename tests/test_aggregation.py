from brewstock.services.aggregation_service import (
    EMPTY_LOCATION_HEALTH,
    build_item_views,
    category_summaries,
    location_assignment,
    location_breakdown,
    location_health,
    location_health_score,
    total_stock,
)
from brewstock.services.dashboard_service import get_dashboard, get_dashboard_stats
from brewstock.services.snapshot import (
    CategoryRecord,
    InventorySnapshot,
    ItemRecord,
    LocationRecord,
    StockRecord,
)


def _snapshot() -> InventorySnapshot:
    return InventorySnapshot.build(
        locations=[
            LocationRecord(id="loc-1", name="Front Counter", type="retail"),
            LocationRecord(id="loc-2", name="Back Room", type="storage"),
            LocationRecord(id="loc-3", name="Roastery", type="production"),
        ],
        categories=[
            CategoryRecord(id="cat-beans", name="Beans"),
            CategoryRecord(id="cat-dairy", name="Dairy"),
            CategoryRecord(id="cat-empty", name="Empty"),
        ],
        items=[
            ItemRecord(id="beans", name="Espresso Beans", unit="kg", min_stock=5, max_stock=20, category_id="cat-beans"),
            ItemRecord(id="milk", name="Whole Milk", unit="l", min_stock=4, max_stock=40, category_id="cat-dairy"),
            ItemRecord(id="oat", name="Oat Milk", unit="l", min_stock=2, max_stock=10, category_id="cat-dairy"),
            ItemRecord(id="cups", name="Paper Cups", unit="unit", min_stock=100, max_stock=1000),
        ],
        stock_levels=[
            StockRecord(item_id="beans", location_id="loc-1", quantity=3),
            StockRecord(item_id="beans", location_id="loc-2", quantity=0),
            StockRecord(item_id="milk", location_id="loc-1", quantity="20"),
            StockRecord(item_id="oat", location_id="loc-2", quantity=9.5),
            StockRecord(item_id="oat", location_id="loc-1", quantity="not-a-number"),
        ],
    )


def test_total_stock_coerces_malformed_quantities():
    snapshot = _snapshot()
    assert total_stock(snapshot, "beans") == 3
    assert total_stock(snapshot, "oat") == 9.5
    assert total_stock(snapshot, "cups") == 0


def test_total_stock_is_idempotent_and_matches_breakdown():
    snapshot = _snapshot()
    first = total_stock(snapshot, "beans")
    assert total_stock(snapshot, "beans") == first

    breakdown = location_breakdown(snapshot, "beans")
    assert [row.location_id for row in breakdown] == ["loc-1"]
    assert sum(row.stock for row in breakdown) == first


def test_stock_upsert_replaces_existing_pair():
    snapshot = _snapshot()
    snapshot.upsert_stock(StockRecord(item_id="beans", location_id="loc-1", quantity=12))
    assert len(snapshot.stock_for_item("beans")) == 2
    assert total_stock(snapshot, "beans") == 12


def test_item_views_sorted_by_urgency_with_stable_ties():
    views = build_item_views(_snapshot())
    assert [(view.id, view.stock_status) for view in views] == [
        ("cups", "out"),
        ("beans", "critical"),
        ("oat", "high"),
        ("milk", "good"),
    ]
    assert views[1].category_name == "Beans"
    assert views[1].location_stocks[0].location_name == "Front Counter"


def test_scenario_item_at_minimum_is_critical():
    snapshot = _snapshot()
    view = next(view for view in build_item_views(snapshot) if view.id == "beans")
    assert view.total_stock == 3
    assert view.stock_status == "critical"
    assert view.urgency == 3
    assert view.stock_percentage == 15.0


def test_location_health_scores():
    snapshot = _snapshot()
    # Front Counter holds beans (critical), milk (good) and oat (high).
    assert round(location_health_score(snapshot, "loc-1"), 2) == 66.67
    # Back Room holds beans and oat.
    assert location_health_score(snapshot, "loc-2") == 50.0
    assert location_health_score(snapshot, "loc-3") == EMPTY_LOCATION_HEALTH

    rows = {row.location_id: row for row in location_health(snapshot)}
    assert rows["loc-1"].assigned_items == 3
    assert rows["loc-1"].healthy_items == 2
    assert rows["loc-3"].health_score == 100.0


def test_category_summaries_count_buckets():
    summaries = {row.category_id: row for row in category_summaries(_snapshot())}
    assert summaries["cat-beans"].low_items == 1
    assert summaries["cat-beans"].healthy_percentage == 0.0
    assert summaries["cat-dairy"].healthy_items == 2
    assert summaries["cat-dairy"].healthy_percentage == 100.0
    assert summaries["cat-empty"].total_items == 0
    assert summaries["cat-empty"].healthy_percentage == 0.0


def test_dashboard_stats_and_groups():
    snapshot = _snapshot()
    stats = get_dashboard_stats(snapshot)
    assert stats.total_items == 4
    assert stats.total_locations == 3
    assert stats.out_of_stock == 1
    assert stats.critical_stock == 1
    assert stats.good_stock == 1
    assert stats.high_stock == 1
    assert stats.low_stock == 0
    assert stats.total_alerts == 2

    dashboard = get_dashboard(snapshot)
    assert [view.id for view in dashboard.critical_items] == ["cups", "beans"]
    assert [view.id for view in dashboard.needs_attention] == ["cups", "beans"]
    assert [view.id for view in dashboard.well_stocked] == ["milk"]


def test_location_assignment_groups_by_category():
    result = location_assignment(_snapshot(), "loc-2")
    assert result is not None
    assert result.total_assigned == 2
    assert result.total_unassigned == 2
    assert {item.id for item in result.assigned_items} == {"beans", "oat"}
    categories = {row.category_id: row for row in result.items_by_category}
    assert set(categories) == {"cat-beans", "cat-dairy"}
    assert categories["cat-dairy"].assigned_count == 1
    assert categories["cat-dairy"].unassigned_count == 1

    assert location_assignment(_snapshot(), "missing") is None


def test_empty_snapshot_is_safe():
    snapshot = InventorySnapshot()
    assert build_item_views(snapshot) == []
    assert location_health(snapshot) == []
    stats = get_dashboard_stats(snapshot)
    assert stats.total_items == 0
    assert stats.total_alerts == 0
