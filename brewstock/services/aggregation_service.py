from brewstock.core.quantity import percentage, to_quantity
from brewstock.schemas.catalog import ItemOut
from brewstock.schemas.dashboard import (
    CategorySummaryOut,
    LocationHealthOut,
)
from brewstock.schemas.inventory import ItemStockViewOut, LocationStockOut
from brewstock.schemas.location import (
    CategoryAssignmentOut,
    LocationAssignmentOut,
    LocationOut,
)
from brewstock.services.snapshot import InventorySnapshot, ItemRecord
from brewstock.services.stock_status import classify_stock

# Health score reported for a location with nothing assigned to it.
EMPTY_LOCATION_HEALTH = 100.0


def total_stock(snapshot: InventorySnapshot, item_id: str) -> float:
    return sum(to_quantity(row.quantity) for row in snapshot.stock_for_item(item_id))


def location_breakdown(snapshot: InventorySnapshot, item_id: str) -> list[LocationStockOut]:
    """Per-location stock for an item, omitting locations that hold none."""
    result: list[LocationStockOut] = []
    for location in snapshot.locations:
        row = snapshot.stock_at(item_id, location.id)
        if row is None:
            continue
        stock = to_quantity(row.quantity)
        if stock > 0:
            result.append(
                LocationStockOut(location_id=location.id, location_name=location.name, stock=stock)
            )
    return result


def item_out(item: ItemRecord) -> ItemOut:
    return ItemOut(
        id=item.id,
        name=item.name,
        category_id=item.category_id,
        supplier_id=item.supplier_id,
        unit=item.unit or "unit",
        min_stock=to_quantity(item.min_stock),
        max_stock=to_quantity(item.max_stock),
        created_at=item.created_at,
    )


def item_stock_view(snapshot: InventorySnapshot, item: ItemRecord) -> ItemStockViewOut:
    stock = total_stock(snapshot, item.id)
    classification = classify_stock(stock, item.min_stock, item.max_stock)
    base = item_out(item)
    return ItemStockViewOut(
        **base.model_dump(),
        category_name=snapshot.category_names().get(item.category_id or ""),
        supplier_name=snapshot.supplier_names().get(item.supplier_id or ""),
        total_stock=stock,
        stock_status=classification.status,
        urgency=classification.urgency,
        stock_percentage=classification.stock_percentage,
        fill_percentage=classification.fill_percentage,
        location_stocks=location_breakdown(snapshot, item.id),
    )


def build_item_views(snapshot: InventorySnapshot) -> list[ItemStockViewOut]:
    """Item views ordered most urgent first; ties keep snapshot order."""
    views = [item_stock_view(snapshot, item) for item in snapshot.items]
    return sorted(views, key=lambda view: view.urgency, reverse=True)


def _assigned_items(snapshot: InventorySnapshot, location_id: str) -> list[ItemRecord]:
    return [item for item in snapshot.items if snapshot.stock_at(item.id, location_id) is not None]


def _health_counts(snapshot: InventorySnapshot, location_id: str) -> tuple[int, int]:
    assigned = _assigned_items(snapshot, location_id)
    healthy = sum(
        1
        for item in assigned
        if classify_stock(total_stock(snapshot, item.id), item.min_stock, item.max_stock).is_healthy
    )
    return len(assigned), healthy


def location_health_score(snapshot: InventorySnapshot, location_id: str) -> float:
    """Share of items assigned to the location whose total stock is healthy.

    Items are classified on their stock across all locations. A location
    with nothing assigned scores 100.
    """
    assigned, healthy = _health_counts(snapshot, location_id)
    if not assigned:
        return EMPTY_LOCATION_HEALTH
    return percentage(healthy, assigned)


def location_health(snapshot: InventorySnapshot) -> list[LocationHealthOut]:
    result: list[LocationHealthOut] = []
    for location in snapshot.locations:
        assigned, healthy = _health_counts(snapshot, location.id)
        result.append(
            LocationHealthOut(
                location_id=location.id,
                location_name=location.name,
                location_type=location.type,
                assigned_items=assigned,
                healthy_items=healthy,
                health_score=percentage(healthy, assigned) if assigned else EMPTY_LOCATION_HEALTH,
            )
        )
    return result


def category_summaries(snapshot: InventorySnapshot) -> list[CategorySummaryOut]:
    views = build_item_views(snapshot)
    result: list[CategorySummaryOut] = []
    for category in snapshot.categories:
        category_views = [view for view in views if view.category_id == category.id]
        healthy = sum(1 for view in category_views if view.stock_status in ("good", "high"))
        low = sum(1 for view in category_views if view.stock_status in ("low", "critical"))
        out = sum(1 for view in category_views if view.stock_status == "out")
        result.append(
            CategorySummaryOut(
                category_id=category.id,
                category_name=category.name,
                description=category.description,
                total_items=len(category_views),
                healthy_items=healthy,
                low_items=low,
                out_items=out,
                healthy_percentage=percentage(healthy, len(category_views)),
                items=category_views,
            )
        )
    return result


def location_assignment(snapshot: InventorySnapshot, location_id: str) -> LocationAssignmentOut | None:
    location = snapshot.location_by_id(location_id)
    if location is None:
        return None

    assigned = _assigned_items(snapshot, location_id)
    assigned_ids = {item.id for item in assigned}
    unassigned = [item for item in snapshot.items if item.id not in assigned_ids]

    by_category: list[CategoryAssignmentOut] = []
    for category in snapshot.categories:
        category_assigned = [item_out(item) for item in assigned if item.category_id == category.id]
        category_unassigned = [item_out(item) for item in unassigned if item.category_id == category.id]
        total = len(category_assigned) + len(category_unassigned)
        if total == 0:
            continue
        by_category.append(
            CategoryAssignmentOut(
                category_id=category.id,
                category_name=category.name,
                assigned_items=category_assigned,
                unassigned_items=category_unassigned,
                assigned_count=len(category_assigned),
                unassigned_count=len(category_unassigned),
                total_category_items=total,
            )
        )

    return LocationAssignmentOut(
        location=LocationOut(
            id=location.id,
            name=location.name,
            address=location.address,
            type=location.type or "retail",
            created_at=location.created_at,
        ),
        assigned_items=[item_out(item) for item in assigned],
        unassigned_items=[item_out(item) for item in unassigned],
        items_by_category=by_category,
        total_assigned=len(assigned),
        total_unassigned=len(unassigned),
        total_items=len(snapshot.items),
    )
