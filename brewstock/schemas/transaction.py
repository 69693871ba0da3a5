from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter

from brewstock.core.quantity import to_quantity
from brewstock.schemas.common import PaginationMeta

LocationTransactionType = Literal["LOCATION_ADDED", "LOCATION_UPDATED", "LOCATION_DELETED"]
CategoryTransactionType = Literal["CATEGORY_ADDED", "CATEGORY_UPDATED", "CATEGORY_DELETED"]
SupplierTransactionType = Literal["SUPPLIER_ADDED", "SUPPLIER_UPDATED", "SUPPLIER_DELETED"]
ItemTransactionType = Literal["ITEM_ADDED", "ITEM_UPDATED", "ITEM_DELETED"]
StockTransactionType = Literal["STOCK_UPDATED"]

TRANSACTION_TYPES: tuple[str, ...] = (
    "LOCATION_ADDED",
    "LOCATION_UPDATED",
    "LOCATION_DELETED",
    "CATEGORY_ADDED",
    "CATEGORY_UPDATED",
    "CATEGORY_DELETED",
    "SUPPLIER_ADDED",
    "SUPPLIER_UPDATED",
    "SUPPLIER_DELETED",
    "ITEM_ADDED",
    "ITEM_UPDATED",
    "ITEM_DELETED",
    "STOCK_UPDATED",
)

TRANSACTION_LABELS: dict[str, str] = {
    "LOCATION_ADDED": "Location Added",
    "LOCATION_UPDATED": "Location Updated",
    "LOCATION_DELETED": "Location Deleted",
    "CATEGORY_ADDED": "Category Added",
    "CATEGORY_UPDATED": "Category Updated",
    "CATEGORY_DELETED": "Category Deleted",
    "SUPPLIER_ADDED": "Supplier Added",
    "SUPPLIER_UPDATED": "Supplier Updated",
    "SUPPLIER_DELETED": "Supplier Deleted",
    "ITEM_ADDED": "Item Added",
    "ITEM_UPDATED": "Item Updated",
    "ITEM_DELETED": "Item Deleted",
    "STOCK_UPDATED": "Stock Updated",
}

StockMovement = Literal["STOCK_IN", "STOCK_OUT", "STOCK_ADJUSTMENT"]

Quantity = Annotated[float, BeforeValidator(to_quantity)]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDateTime = Annotated[datetime, AfterValidator(_as_utc)]


def movement_for_change(quantity_change: float) -> StockMovement:
    if quantity_change > 0:
        return "STOCK_IN"
    if quantity_change < 0:
        return "STOCK_OUT"
    return "STOCK_ADJUSTMENT"


class _Details(BaseModel):
    # Older rows may carry extra keys; keep them rather than fail.
    model_config = ConfigDict(extra="allow")

    changes: dict[str, Any] | None = None


class LocationDetails(_Details):
    location_id: str = Field(min_length=1)
    location_name: str = "Unknown Location"
    address: str | None = None
    type: str | None = None


class CategoryDetails(_Details):
    category_id: str = Field(min_length=1)
    category_name: str = "Unknown Category"
    description: str | None = None


class SupplierDetails(_Details):
    supplier_id: str = Field(min_length=1)
    supplier_name: str = "Unknown Supplier"
    contact: str | None = None
    email: str | None = None
    phone: str | None = None


class ItemDetails(_Details):
    item_id: str = Field(min_length=1)
    item_name: str = "Unknown Item"
    category_name: str | None = None
    supplier_name: str | None = None
    unit: str | None = None
    min_stock: float | None = None
    max_stock: float | None = None


class StockUpdatedDetails(_Details):
    item_id: str = Field(min_length=1)
    item_name: str = "Unknown Item"
    location_id: str | None = None
    location_name: str = "Unknown Location"
    previous_quantity: Quantity = 0.0
    new_quantity: Quantity = 0.0
    quantity_change: Quantity = 0.0
    unit: str = "unit"
    movement: StockMovement = "STOCK_ADJUSTMENT"


class _TransactionBase(BaseModel):
    id: str
    timestamp: UtcDateTime
    user_name: str = "System"


class LocationTransaction(_TransactionBase):
    type: LocationTransactionType
    details: LocationDetails


class CategoryTransaction(_TransactionBase):
    type: CategoryTransactionType
    details: CategoryDetails


class SupplierTransaction(_TransactionBase):
    type: SupplierTransactionType
    details: SupplierDetails


class ItemTransaction(_TransactionBase):
    type: ItemTransactionType
    details: ItemDetails


class StockTransaction(_TransactionBase):
    type: StockTransactionType
    details: StockUpdatedDetails


Transaction = Annotated[
    Union[
        LocationTransaction,
        CategoryTransaction,
        SupplierTransaction,
        ItemTransaction,
        StockTransaction,
    ],
    Field(discriminator="type"),
]

transaction_adapter: TypeAdapter[Transaction] = TypeAdapter(Transaction)


class TransactionLogEntryOut(BaseModel):
    id: str
    type: str
    label: str
    timestamp: datetime
    user_name: str
    description: str
    details: dict[str, Any] | None = None


class TransactionLogListOut(BaseModel):
    items: list[TransactionLogEntryOut]
    pagination: PaginationMeta
