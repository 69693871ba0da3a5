from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from brewstock.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryTransaction(Base):
    """
    Append-only audit trail. `details` holds the payload for `type`; see
    brewstock.schemas.transaction for the per-type shapes.
    """
    __tablename__ = "inventory_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    type: Mapped[str] = mapped_column(String(40), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    user_name: Mapped[str] = mapped_column(String(120), nullable=False, default="System", server_default="System")

    __table_args__ = (
        Index("ix_inventory_transactions_timestamp", "timestamp"),
        Index("ix_inventory_transactions_type_timestamp", "type", "timestamp"),
    )
