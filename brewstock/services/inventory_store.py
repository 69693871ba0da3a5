import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brewstock.core.config import settings
from brewstock.core.errors import ConflictError, NotFoundError
from brewstock.core.id_utils import generate_shortuuid
from brewstock.core.observability import log_event, store_logger
from brewstock.models.catalog import Category, Item, Supplier
from brewstock.models.inventory import StockLevel
from brewstock.models.location import Location, LocationType
from brewstock.models.transaction import InventoryTransaction
from brewstock.schemas.catalog import (
    CategoryCreateIn,
    CategoryUpdateIn,
    ItemCreateIn,
    ItemUpdateIn,
    SupplierCreateIn,
    SupplierUpdateIn,
)
from brewstock.schemas.location import (
    LocationCreateIn,
    LocationTypeCreateIn,
    LocationTypeUpdateIn,
    LocationUpdateIn,
)
from brewstock.schemas.transaction import StockUpdatedDetails, movement_for_change
from brewstock.services.snapshot import (
    CategoryRecord,
    InventorySnapshot,
    ItemRecord,
    LocationRecord,
    StockRecord,
    SupplierRecord,
    TransactionRecord,
)
from brewstock.services.transaction_log_service import record_transaction


class AuditWriter(Protocol):
    def __call__(
        self,
        db: Session,
        *,
        type: str,
        details: dict[str, Any],
        user_name: str = ...,
    ) -> InventoryTransaction: ...


class InventoryStore:
    """Persistence and mutation layer for the inventory.

    Every mutation commits first and only then writes its audit transaction.
    The audit write is best effort: a failure is rolled back and logged, and
    the already committed mutation is returned as usual.
    """

    def __init__(
        self,
        db: Session,
        *,
        audit_writer: AuditWriter = record_transaction,
        user_name: str | None = None,
    ):
        self.db = db
        self.audit_writer = audit_writer
        self.user_name = user_name or settings.default_user_name

    # Audit

    def _record(self, type: str, details: dict[str, Any]) -> InventoryTransaction | None:
        try:
            return self.audit_writer(self.db, type=type, details=details, user_name=self.user_name)
        except Exception as exc:
            self.db.rollback()
            log_event(
                store_logger,
                "transaction_log_failed",
                level=logging.WARNING,
                transaction_type=type,
                error=str(exc),
            )
            return None

    # Locations

    def list_locations(self) -> list[Location]:
        return list(self.db.execute(select(Location).order_by(Location.name)).scalars().all())

    def get_location(self, location_id: str) -> Location:
        location = self.db.get(Location, location_id)
        if location is None:
            raise NotFoundError("Location not found")
        return location

    def add_location(self, payload: LocationCreateIn) -> Location:
        location = Location(
            id=generate_shortuuid(),
            name=payload.name,
            address=payload.address,
            type=payload.type,
        )
        self.db.add(location)
        self.db.commit()
        self.db.refresh(location)
        self._record(
            "LOCATION_ADDED",
            {
                "location_id": location.id,
                "location_name": location.name,
                "address": location.address,
                "type": location.type,
            },
        )
        return location

    def update_location(self, location_id: str, payload: LocationUpdateIn) -> Location:
        location = self.get_location(location_id)
        changes = payload.model_dump(exclude_unset=True)
        for field_name, value in changes.items():
            setattr(location, field_name, value)
        self.db.commit()
        self.db.refresh(location)
        self._record(
            "LOCATION_UPDATED",
            {"location_id": location.id, "location_name": location.name, "changes": changes},
        )
        return location

    def delete_location(self, location_id: str) -> None:
        location = self.get_location(location_id)
        name = location.name
        self.db.execute(delete(StockLevel).where(StockLevel.location_id == location_id))
        self.db.delete(location)
        self.db.commit()
        self._record("LOCATION_DELETED", {"location_id": location_id, "location_name": name})

    # Location types

    def ensure_default_location_types(self) -> None:
        existing = {
            name.lower()
            for name in self.db.execute(select(LocationType.name)).scalars().all()
        }
        missing = [name for name in settings.default_location_types if name.lower() not in existing]
        if not missing:
            return
        for name in missing:
            self.db.add(
                LocationType(
                    id=generate_shortuuid(),
                    name=name,
                    description=f"Default {name} location type",
                    is_default=True,
                )
            )
        self.db.commit()

    def list_location_types(self) -> list[LocationType]:
        self.ensure_default_location_types()
        return list(
            self.db.execute(
                select(LocationType).order_by(LocationType.is_default.desc(), LocationType.name)
            ).scalars().all()
        )

    def location_type_usage(self) -> dict[str, int]:
        rows = self.db.execute(
            select(Location.type, func.count(Location.id)).group_by(Location.type)
        ).all()
        return {type_name: int(count) for type_name, count in rows}

    def get_location_type(self, type_id: str) -> LocationType:
        location_type = self.db.get(LocationType, type_id)
        if location_type is None:
            raise NotFoundError("Location type not found")
        return location_type

    def _ensure_type_name_free(self, name: str, *, exclude_id: str | None = None) -> None:
        stmt = select(LocationType.id).where(func.lower(LocationType.name) == name.lower())
        if exclude_id:
            stmt = stmt.where(LocationType.id != exclude_id)
        if self.db.execute(stmt).first() is not None:
            raise ConflictError(f'A location type named "{name}" already exists')

    def add_location_type(self, payload: LocationTypeCreateIn) -> LocationType:
        self.ensure_default_location_types()
        self._ensure_type_name_free(payload.name)
        location_type = LocationType(
            id=generate_shortuuid(),
            name=payload.name,
            description=payload.description,
            color=payload.color,
            icon=payload.icon,
            is_default=False,
        )
        self.db.add(location_type)
        self.db.commit()
        self.db.refresh(location_type)
        return location_type

    def update_location_type(self, type_id: str, payload: LocationTypeUpdateIn) -> LocationType:
        location_type = self.get_location_type(type_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        old_name = location_type.name
        new_name = changes.get("name", old_name)
        if new_name != old_name:
            self._ensure_type_name_free(new_name, exclude_id=type_id)

        for field_name, value in changes.items():
            setattr(location_type, field_name, value)
        self.db.commit()

        if new_name != old_name:
            # The type itself stays renamed even if the locations cannot follow.
            try:
                self.db.execute(update(Location).where(Location.type == old_name).values(type=new_name))
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                log_event(
                    store_logger,
                    "location_type_rename_cascade_failed",
                    level=logging.WARNING,
                    old_name=old_name,
                    new_name=new_name,
                    error=str(exc),
                )

        self.db.refresh(location_type)
        return location_type

    def delete_location_type(self, type_id: str) -> None:
        location_type = self.get_location_type(type_id)
        if location_type.is_default:
            raise ConflictError("Cannot delete default location types")
        in_use = self.db.execute(
            select(Location.name).where(Location.type == location_type.name).order_by(Location.name)
        ).scalars().all()
        if in_use:
            raise ConflictError(
                f"Location type is used by {len(in_use)} location(s): {', '.join(in_use)}"
            )
        self.db.delete(location_type)
        self.db.commit()

    # Categories

    def list_categories(self) -> list[Category]:
        return list(self.db.execute(select(Category).order_by(Category.name)).scalars().all())

    def get_category(self, category_id: str) -> Category:
        category = self.db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def add_category(self, payload: CategoryCreateIn) -> Category:
        category = Category(id=generate_shortuuid(), name=payload.name.strip(), description=payload.description)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        self._record(
            "CATEGORY_ADDED",
            {
                "category_id": category.id,
                "category_name": category.name,
                "description": category.description,
            },
        )
        return category

    def update_category(self, category_id: str, payload: CategoryUpdateIn) -> Category:
        category = self.get_category(category_id)
        changes = payload.model_dump(exclude_unset=True)
        for field_name, value in changes.items():
            setattr(category, field_name, value)
        self.db.commit()
        self.db.refresh(category)
        self._record(
            "CATEGORY_UPDATED",
            {"category_id": category.id, "category_name": category.name, "changes": changes},
        )
        return category

    def delete_category(self, category_id: str) -> None:
        category = self.get_category(category_id)
        name = category.name
        self.db.execute(update(Item).where(Item.category_id == category_id).values(category_id=None))
        self.db.delete(category)
        self.db.commit()
        self._record("CATEGORY_DELETED", {"category_id": category_id, "category_name": name})

    # Suppliers

    def list_suppliers(self) -> list[Supplier]:
        return list(self.db.execute(select(Supplier).order_by(Supplier.name)).scalars().all())

    def get_supplier(self, supplier_id: str) -> Supplier:
        supplier = self.db.get(Supplier, supplier_id)
        if supplier is None:
            raise NotFoundError("Supplier not found")
        return supplier

    def add_supplier(self, payload: SupplierCreateIn) -> Supplier:
        supplier = Supplier(
            id=generate_shortuuid(),
            name=payload.name.strip(),
            contact=payload.contact,
            email=payload.email,
            phone=payload.phone,
        )
        self.db.add(supplier)
        self.db.commit()
        self.db.refresh(supplier)
        self._record(
            "SUPPLIER_ADDED",
            {
                "supplier_id": supplier.id,
                "supplier_name": supplier.name,
                "contact": supplier.contact,
                "email": supplier.email,
                "phone": supplier.phone,
            },
        )
        return supplier

    def update_supplier(self, supplier_id: str, payload: SupplierUpdateIn) -> Supplier:
        supplier = self.get_supplier(supplier_id)
        changes = payload.model_dump(exclude_unset=True)
        for field_name, value in changes.items():
            setattr(supplier, field_name, value)
        self.db.commit()
        self.db.refresh(supplier)
        self._record(
            "SUPPLIER_UPDATED",
            {"supplier_id": supplier.id, "supplier_name": supplier.name, "changes": changes},
        )
        return supplier

    def delete_supplier(self, supplier_id: str) -> None:
        supplier = self.get_supplier(supplier_id)
        name = supplier.name
        self.db.execute(update(Item).where(Item.supplier_id == supplier_id).values(supplier_id=None))
        self.db.delete(supplier)
        self.db.commit()
        self._record("SUPPLIER_DELETED", {"supplier_id": supplier_id, "supplier_name": name})

    # Items

    def list_items(self) -> list[Item]:
        return list(self.db.execute(select(Item).order_by(Item.name)).scalars().all())

    def get_item(self, item_id: str) -> Item:
        item = self.db.get(Item, item_id)
        if item is None:
            raise NotFoundError("Item not found")
        return item

    def _item_references(self, category_id: str | None, supplier_id: str | None) -> tuple[str, str]:
        category_name = self.get_category(category_id).name if category_id else "Unknown Category"
        supplier_name = self.get_supplier(supplier_id).name if supplier_id else "Unknown Supplier"
        return category_name, supplier_name

    def add_item(self, payload: ItemCreateIn) -> Item:
        category_name, supplier_name = self._item_references(payload.category_id, payload.supplier_id)
        item = Item(
            id=generate_shortuuid(),
            name=payload.name.strip(),
            category_id=payload.category_id,
            supplier_id=payload.supplier_id,
            unit=payload.unit,
            min_stock=payload.min_stock,
            max_stock=payload.max_stock,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        self._record(
            "ITEM_ADDED",
            {
                "item_id": item.id,
                "item_name": item.name,
                "category_name": category_name,
                "supplier_name": supplier_name,
                "unit": item.unit,
                "min_stock": item.min_stock,
                "max_stock": item.max_stock,
            },
        )
        return item

    def update_item(self, item_id: str, payload: ItemUpdateIn) -> Item:
        item = self.get_item(item_id)
        changes = {
            field_name: value
            for field_name, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field_name not in ("name", "unit", "min_stock", "max_stock")
        }
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        category_name, supplier_name = self._item_references(
            changes.get("category_id", item.category_id),
            changes.get("supplier_id", item.supplier_id),
        )
        for field_name, value in changes.items():
            setattr(item, field_name, value)
        self.db.commit()
        self.db.refresh(item)
        self._record(
            "ITEM_UPDATED",
            {
                "item_id": item.id,
                "item_name": item.name,
                "category_name": category_name,
                "supplier_name": supplier_name,
                "changes": changes,
            },
        )
        return item

    def delete_item(self, item_id: str) -> None:
        item = self.get_item(item_id)
        name = item.name
        self.db.execute(delete(StockLevel).where(StockLevel.item_id == item_id))
        self.db.delete(item)
        self.db.commit()
        self._record("ITEM_DELETED", {"item_id": item_id, "item_name": name})

    # Stock

    def update_stock_level(self, item_id: str, location_id: str, quantity: float) -> StockLevel:
        item = self.get_item(item_id)
        location = self.get_location(location_id)

        stock = self.db.get(StockLevel, (item_id, location_id))
        previous_quantity = float(stock.quantity) if stock is not None else 0.0
        if stock is None:
            stock = StockLevel(item_id=item_id, location_id=location_id)
            self.db.add(stock)
        stock.quantity = quantity
        stock.last_updated = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(stock)

        quantity_change = quantity - previous_quantity
        details = StockUpdatedDetails(
            item_id=item_id,
            item_name=item.name,
            location_id=location_id,
            location_name=location.name,
            previous_quantity=previous_quantity,
            new_quantity=quantity,
            quantity_change=quantity_change,
            unit=item.unit or "unit",
            movement=movement_for_change(quantity_change),
        )
        self._record("STOCK_UPDATED", details.model_dump(exclude_none=True))
        return stock

    def assign_items(self, location_id: str, item_ids: list[str]) -> tuple[list[str], list[str]]:
        """Give each listed item an empty stock row at the location.

        Items already stocked there, or unknown, are skipped.
        """
        self.get_location(location_id)
        known = set(self.db.execute(select(Item.id).where(Item.id.in_(item_ids))).scalars().all())
        present = set(
            self.db.execute(
                select(StockLevel.item_id).where(
                    StockLevel.location_id == location_id,
                    StockLevel.item_id.in_(item_ids),
                )
            ).scalars().all()
        )
        assigned: list[str] = []
        skipped: list[str] = []
        for item_id in dict.fromkeys(item_ids):
            if item_id not in known or item_id in present:
                skipped.append(item_id)
                continue
            self.update_stock_level(item_id, location_id, 0)
            assigned.append(item_id)
        return assigned, skipped

    def copy_assignments(self, source_location_id: str, target_location_id: str) -> tuple[list[str], list[str]]:
        self.get_location(source_location_id)
        source_items = self.db.execute(
            select(StockLevel.item_id).where(StockLevel.location_id == source_location_id)
        ).scalars().all()
        if not source_items:
            return [], []
        return self.assign_items(target_location_id, list(source_items))

    # Snapshot

    def snapshot(self) -> InventorySnapshot:
        locations = [
            LocationRecord(id=row.id, name=row.name, address=row.address, type=row.type, created_at=row.created_at)
            for row in self.list_locations()
        ]
        categories = [
            CategoryRecord(id=row.id, name=row.name, description=row.description, created_at=row.created_at)
            for row in self.list_categories()
        ]
        suppliers = [
            SupplierRecord(
                id=row.id,
                name=row.name,
                contact=row.contact,
                email=row.email,
                phone=row.phone,
                created_at=row.created_at,
            )
            for row in self.list_suppliers()
        ]
        items = [
            ItemRecord(
                id=row.id,
                name=row.name,
                unit=row.unit,
                min_stock=row.min_stock,
                max_stock=row.max_stock,
                category_id=row.category_id,
                supplier_id=row.supplier_id,
                created_at=row.created_at,
            )
            for row in self.list_items()
        ]
        stock_levels = [
            StockRecord(
                item_id=row.item_id,
                location_id=row.location_id,
                quantity=row.quantity,
                last_updated=row.last_updated,
            )
            for row in self.db.execute(
                select(StockLevel).order_by(StockLevel.last_updated.desc())
            ).scalars().all()
        ]
        transactions = [
            TransactionRecord(
                id=row.id,
                type=row.type,
                timestamp=row.timestamp,
                details=row.details,
                user_name=row.user_name,
            )
            for row in self.db.execute(
                select(InventoryTransaction)
                .order_by(InventoryTransaction.timestamp.desc())
                .limit(settings.transaction_snapshot_limit)
            ).scalars().all()
        ]
        return InventorySnapshot.build(
            locations=locations,
            categories=categories,
            suppliers=suppliers,
            items=items,
            stock_levels=stock_levels,
            transactions=transactions,
        )
