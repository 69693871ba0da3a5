import json
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from pydantic import ValidationError
from sqlalchemy.orm import Session

from brewstock.core.id_utils import generate_shortuuid
from brewstock.core.quantity import format_quantity
from brewstock.models.transaction import InventoryTransaction
from brewstock.schemas.transaction import (
    TRANSACTION_LABELS,
    CategoryTransaction,
    ItemTransaction,
    LocationTransaction,
    StockTransaction,
    SupplierTransaction,
    TransactionLogEntryOut,
    transaction_adapter,
)
from brewstock.services.snapshot import TransactionRecord

DateFilter = Literal["all", "today", "week", "month"]


def record_transaction(
    db: Session,
    *,
    type: str,
    details: dict[str, Any],
    user_name: str = "System",
) -> InventoryTransaction:
    entry = InventoryTransaction(
        id=generate_shortuuid(),
        type=type,
        timestamp=datetime.now(timezone.utc),
        details=details,
        user_name=user_name,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def _verb(type: str) -> str:
    return {"ADDED": "Added", "UPDATED": "Updated", "DELETED": "Deleted"}[type.rsplit("_", 1)[1]]


def describe_transaction(record: TransactionRecord) -> str:
    if not record.details:
        return "No details available"
    try:
        parsed = transaction_adapter.validate_python(
            {
                "id": record.id,
                "type": record.type,
                "timestamp": record.timestamp,
                "details": record.details,
                "user_name": record.user_name or "System",
            }
        )
    except ValidationError:
        return f"{record.type}: {json.dumps(record.details, default=str)}"

    details = parsed.details
    if isinstance(parsed, LocationTransaction):
        if parsed.type == "LOCATION_ADDED":
            return f'Added location "{details.location_name}" ({details.type or "unknown"})'
        return f'{_verb(parsed.type)} location "{details.location_name}"'
    if isinstance(parsed, CategoryTransaction):
        return f'{_verb(parsed.type)} category "{details.category_name}"'
    if isinstance(parsed, SupplierTransaction):
        return f'{_verb(parsed.type)} supplier "{details.supplier_name}"'
    if isinstance(parsed, ItemTransaction):
        if parsed.type == "ITEM_ADDED":
            return f'Added item "{details.item_name}" ({details.category_name or "Unknown Category"})'
        return f'{_verb(parsed.type)} item "{details.item_name}"'
    if isinstance(parsed, StockTransaction):
        change = details.quantity_change
        if change > 0:
            verb, change_text = "increased", f"+{format_quantity(change)}"
        elif change < 0:
            verb, change_text = "decreased", format_quantity(change)
        else:
            verb, change_text = "adjusted", format_quantity(change)
        return (
            f"{details.item_name} stock {verb} by {change_text} {details.unit} "
            f"at {details.location_name}"
        )
    return f"{record.type}: {json.dumps(record.details, default=str)}"


def _timestamp(record: TransactionRecord) -> datetime | None:
    value = record.timestamp
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _date_floor(date_filter: DateFilter, now: datetime) -> datetime | None:
    if date_filter == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_filter == "week":
        return now - timedelta(days=7)
    if date_filter == "month":
        return now - timedelta(days=30)
    return None


def filter_transactions(
    transactions: list[TransactionRecord],
    *,
    type: str | None = None,
    date_filter: DateFilter = "all",
    search: str | None = None,
    now: datetime | None = None,
) -> list[TransactionRecord]:
    """Newest-first transaction log filtered by type, recency and free text."""
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    floor = _date_floor(date_filter, current)
    needle = (search or "").strip().lower()

    result: list[TransactionRecord] = []
    for record in transactions:
        if type and record.type != type:
            continue
        if floor is not None:
            stamp = _timestamp(record)
            if stamp is None or stamp < floor:
                continue
        if needle:
            haystack = " ".join(
                [
                    str(record.type or ""),
                    json.dumps(record.details, default=str),
                    str(record.user_name or ""),
                ]
            ).lower()
            if needle not in haystack:
                continue
        result.append(record)

    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(result, key=lambda record: _timestamp(record) or epoch, reverse=True)


def transaction_entry_out(record: TransactionRecord) -> TransactionLogEntryOut:
    stamp = _timestamp(record) or datetime.min.replace(tzinfo=timezone.utc)
    return TransactionLogEntryOut(
        id=record.id,
        type=record.type,
        label=TRANSACTION_LABELS.get(record.type, record.type),
        timestamp=stamp,
        user_name=record.user_name or "System",
        description=describe_transaction(record),
        details=record.details if isinstance(record.details, dict) else None,
    )
