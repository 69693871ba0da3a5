from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, PrimaryKeyConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from brewstock.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StockLevel(Base):
    """
    Current quantity of one item at one location. The (item_id, location_id)
    pair is the primary key, so a write is always an upsert.
    """
    __tablename__ = "stock_levels"

    item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("items.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        PrimaryKeyConstraint("item_id", "location_id", name="pk_stock_levels"),
        Index("ix_stock_levels_last_updated", "last_updated"),
    )
