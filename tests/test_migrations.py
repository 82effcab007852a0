"""
Runs the Alembic baseline against a throwaway SQLite file.
"""
from sqlalchemy import create_engine, inspect

from mockhire.core import config
from mockhire.db.migrate import run_migrations

EXPECTED_TABLES = {
    "users",
    "time_slots",
    "interviews",
    "bookings",
    "points_transactions",
    "booking_notifications",
    "user_blocks",
}


def test_upgrade_head_creates_schema(tmp_path, monkeypatch):
    database_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setattr(config, "DATABASE_URL", database_url)

    run_migrations()
    # Second run is a no-op at head
    run_migrations()

    engine = create_engine(database_url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert EXPECTED_TABLES <= tables
        assert "alembic_version" in tables

        booking_indexes = {ix["name"]: ix for ix in inspector.get_indexes("bookings")}
        assert booking_indexes["uq_bookings_active_slot"]["unique"]

        block_indexes = {ix["name"]: ix for ix in inspector.get_indexes("user_blocks")}
        assert block_indexes["uq_user_blocks_active_user"]["unique"]
    finally:
        engine.dispose()


def test_init_db_creates_tables(tmp_path, monkeypatch):
    from mockhire.db import init_db as init_db_module

    engine = create_engine(f"sqlite:///{tmp_path / 'dev.db'}")
    monkeypatch.setattr(init_db_module, "engine", engine)
    try:
        init_db_module.init_db()
        assert EXPECTED_TABLES <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
