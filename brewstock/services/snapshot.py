from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

StockKey = tuple[str, str]


@dataclass(frozen=True)
class LocationRecord:
    id: str
    name: str
    address: str | None = None
    type: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CategoryRecord:
    id: str
    name: str
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class SupplierRecord:
    id: str
    name: str
    contact: str | None = None
    email: str | None = None
    phone: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ItemRecord:
    id: str
    name: str
    unit: str = "unit"
    min_stock: Any = 0
    max_stock: Any = 0
    category_id: str | None = None
    supplier_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class StockRecord:
    item_id: str
    location_id: str
    # Stored as-is; consumers coerce with to_quantity.
    quantity: Any = 0
    last_updated: datetime | None = None

    @property
    def key(self) -> StockKey:
        return (self.item_id, self.location_id)


@dataclass(frozen=True)
class TransactionRecord:
    id: str
    type: str
    timestamp: Any
    details: Any = None
    user_name: str = "System"


@dataclass
class InventorySnapshot:
    """Read-only view of the inventory handed to the analysis functions.

    Stock rows are keyed by (item_id, location_id); adding a row for an
    existing pair replaces it.
    """

    locations: list[LocationRecord] = field(default_factory=list)
    categories: list[CategoryRecord] = field(default_factory=list)
    suppliers: list[SupplierRecord] = field(default_factory=list)
    items: list[ItemRecord] = field(default_factory=list)
    stock_levels: dict[StockKey, StockRecord] = field(default_factory=dict)
    transactions: list[TransactionRecord] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        *,
        locations: Iterable[LocationRecord] = (),
        categories: Iterable[CategoryRecord] = (),
        suppliers: Iterable[SupplierRecord] = (),
        items: Iterable[ItemRecord] = (),
        stock_levels: Iterable[StockRecord] = (),
        transactions: Iterable[TransactionRecord] = (),
    ) -> "InventorySnapshot":
        snapshot = cls(
            locations=list(locations),
            categories=list(categories),
            suppliers=list(suppliers),
            items=list(items),
            transactions=list(transactions),
        )
        for record in stock_levels:
            snapshot.upsert_stock(record)
        return snapshot

    def upsert_stock(self, record: StockRecord) -> None:
        self.stock_levels[record.key] = record

    def stock_for_item(self, item_id: str) -> list[StockRecord]:
        return [row for row in self.stock_levels.values() if row.item_id == item_id]

    def stock_for_location(self, location_id: str) -> list[StockRecord]:
        return [row for row in self.stock_levels.values() if row.location_id == location_id]

    def stock_at(self, item_id: str, location_id: str) -> StockRecord | None:
        return self.stock_levels.get((item_id, location_id))

    def location_by_id(self, location_id: str) -> LocationRecord | None:
        return next((row for row in self.locations if row.id == location_id), None)

    def item_by_id(self, item_id: str) -> ItemRecord | None:
        return next((row for row in self.items if row.id == item_id), None)

    def category_names(self) -> dict[str, str]:
        return {row.id: row.name for row in self.categories}

    def supplier_names(self) -> dict[str, str]:
        return {row.id: row.name for row in self.suppliers}
