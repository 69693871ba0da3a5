import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text

PROJECT_ROOT = Path(__file__).resolve().parents[1]
INVENTORY_TABLES = {
    "location_types",
    "locations",
    "categories",
    "suppliers",
    "items",
    "stock_levels",
    "inventory_transactions",
}


def _alembic_config(url: str) -> Config:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_alembic_upgrade_downgrade_sqlite(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = _alembic_config(url)

    command.upgrade(config, "head")
    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert INVENTORY_TABLES <= set(inspector.get_table_names())
        primary_key = inspector.get_pk_constraint("stock_levels")
        assert primary_key["constrained_columns"] == ["item_id", "location_id"]
    finally:
        engine.dispose()

    command.downgrade(config, "base")
    engine = create_engine(url)
    try:
        assert not INVENTORY_TABLES & set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def _test_pg_url() -> str | None:
    return os.getenv("TEST_POSTGRES_DATABASE_URL")


@pytest.mark.integration
def test_postgres_connection_and_core_tables():
    url = _test_pg_url()
    if not url:
        pytest.skip("Set TEST_POSTGRES_DATABASE_URL to run Postgres integration tests.")

    command.upgrade(_alembic_config(url), "head")
    engine = create_engine(url, pool_pre_ping=True)
    try:
        with engine.connect() as conn:
            assert conn.execute(text("SELECT 1")).scalar_one() == 1
        assert INVENTORY_TABLES <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
