"""initial inventory schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:30:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(inspector: sa.Inspector, table_name: str) -> bool:
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not _table_exists(inspector, "location_types"):
        op.create_table(
            "location_types",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("name", sa.String(length=60), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=True),
            sa.Column("color", sa.String(length=20), server_default="blue", nullable=False),
            sa.Column("icon", sa.String(length=40), server_default="map-pin", nullable=False),
            sa.Column("is_default", sa.Boolean(), server_default=sa.false(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("name", name="uq_location_types_name"),
        )

    if not _table_exists(inspector, "locations"):
        op.create_table(
            "locations",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("name", sa.String(length=120), nullable=False),
            sa.Column("address", sa.Text(), nullable=True),
            sa.Column("type", sa.String(length=60), server_default="retail", nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_locations_type", "locations", ["type"], unique=False)
        op.create_index("ix_locations_name", "locations", ["name"], unique=False)

    if not _table_exists(inspector, "categories"):
        op.create_table(
            "categories",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("name", sa.String(length=120), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_categories_name"), "categories", ["name"], unique=False)

    if not _table_exists(inspector, "suppliers"):
        op.create_table(
            "suppliers",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("name", sa.String(length=120), nullable=False),
            sa.Column("contact", sa.String(length=120), nullable=True),
            sa.Column("email", sa.String(length=255), nullable=True),
            sa.Column("phone", sa.String(length=40), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_suppliers_name"), "suppliers", ["name"], unique=False)

    if not _table_exists(inspector, "items"):
        op.create_table(
            "items",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("name", sa.String(length=120), nullable=False),
            sa.Column("category_id", sa.String(length=36), nullable=True),
            sa.Column("supplier_id", sa.String(length=36), nullable=True),
            sa.Column("unit", sa.String(length=30), server_default="unit", nullable=False),
            sa.Column("min_stock", sa.Float(), server_default="0", nullable=False),
            sa.Column("max_stock", sa.Float(), server_default="0", nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["supplier_id"], ["suppliers.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_items_name", "items", ["name"], unique=False)
        op.create_index(op.f("ix_items_category_id"), "items", ["category_id"], unique=False)
        op.create_index(op.f("ix_items_supplier_id"), "items", ["supplier_id"], unique=False)

    if not _table_exists(inspector, "stock_levels"):
        op.create_table(
            "stock_levels",
            sa.Column("item_id", sa.String(length=36), nullable=False),
            sa.Column("location_id", sa.String(length=36), nullable=False),
            sa.Column("quantity", sa.Float(), nullable=False),
            sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["location_id"], ["locations.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("item_id", "location_id", name="pk_stock_levels"),
        )
        op.create_index(op.f("ix_stock_levels_location_id"), "stock_levels", ["location_id"], unique=False)
        op.create_index("ix_stock_levels_last_updated", "stock_levels", ["last_updated"], unique=False)

    if not _table_exists(inspector, "inventory_transactions"):
        op.create_table(
            "inventory_transactions",
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("type", sa.String(length=40), nullable=False),
            sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
            sa.Column("details", sa.JSON(), nullable=True),
            sa.Column("user_name", sa.String(length=120), server_default="System", nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(
            "ix_inventory_transactions_timestamp",
            "inventory_transactions",
            ["timestamp"],
            unique=False,
        )
        op.create_index(
            "ix_inventory_transactions_type_timestamp",
            "inventory_transactions",
            ["type", "timestamp"],
            unique=False,
        )


def downgrade() -> None:
    op.drop_index("ix_inventory_transactions_type_timestamp", table_name="inventory_transactions")
    op.drop_index("ix_inventory_transactions_timestamp", table_name="inventory_transactions")
    op.drop_table("inventory_transactions")

    op.drop_index("ix_stock_levels_last_updated", table_name="stock_levels")
    op.drop_index(op.f("ix_stock_levels_location_id"), table_name="stock_levels")
    op.drop_table("stock_levels")

    op.drop_index(op.f("ix_items_supplier_id"), table_name="items")
    op.drop_index(op.f("ix_items_category_id"), table_name="items")
    op.drop_index("ix_items_name", table_name="items")
    op.drop_table("items")

    op.drop_index(op.f("ix_suppliers_name"), table_name="suppliers")
    op.drop_table("suppliers")

    op.drop_index(op.f("ix_categories_name"), table_name="categories")
    op.drop_table("categories")

    op.drop_index("ix_locations_name", table_name="locations")
    op.drop_index("ix_locations_type", table_name="locations")
    op.drop_table("locations")

    op.drop_table("location_types")
