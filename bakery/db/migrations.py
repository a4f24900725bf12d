"""Lightweight schema migrations for SQLite databases."""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

# Columns added after the first release, as (table, column, DDL fragment).
_BACKFILL_COLUMNS: list[tuple[str, str, str]] = [
    ("pickup_locations", "requires_preorder", "BOOLEAN NOT NULL DEFAULT 0"),
    ("pickup_locations", "cutoff_day", "INTEGER"),
    ("pickup_locations", "cutoff_time", "VARCHAR(5)"),
    ("pickup_locations", "lead_time_days", "INTEGER NOT NULL DEFAULT 0"),
    ("delivery_one_off_dates", "lead_time_days", "INTEGER"),
    ("orders", "delivery_zone_id", "INTEGER"),
    ("orders", "delivery_fee_cents", "INTEGER NOT NULL DEFAULT 0"),
    ("orders", "delivery_status", "VARCHAR(32)"),
    ("orders", "pickup_status", "VARCHAR(32)"),
    ("orders", "status_updated_at", "DATETIME"),
]

_BACKFILL_INDEXES: list[tuple[str, str, str]] = [
    ("orders", "ix_orders_fulfillment_method", "fulfillment_method"),
    ("orders", "ix_orders_delivery_date", "delivery_date"),
    ("orders", "ix_orders_pickup_date", "pickup_date"),
]


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_index_names(connection: Connection, table_name: str) -> set[str]:
    """Return index names for a SQLite table using PRAGMA index_list."""
    rows = connection.execute(text(f"PRAGMA index_list({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def ensure_sqlite_schema(engine: Engine) -> None:
    """Add columns and indexes missing from databases created by older builds."""
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as connection:
        table_rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
        table_names: set[str] = {str(row[0]) for row in table_rows}

        columns_by_table: dict[str, set[str]] = {}
        for table_name, column_name, ddl in _BACKFILL_COLUMNS:
            if table_name not in table_names:
                continue
            columns = columns_by_table.setdefault(table_name, _sqlite_column_names(connection, table_name))
            if column_name in columns:
                continue
            connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))
            columns.add(column_name)
            logger.info("Added column %s.%s", table_name, column_name)

        if "orders" in table_names:
            # Orders placed before status tracking start out pending.
            connection.execute(
                text(
                    "UPDATE orders SET delivery_status = 'pending' "
                    "WHERE fulfillment_method = 'delivery' AND delivery_status IS NULL"
                )
            )
            connection.execute(
                text(
                    "UPDATE orders SET pickup_status = 'pending' "
                    "WHERE fulfillment_method = 'pickup' AND pickup_status IS NULL"
                )
            )

        for table_name, index_name, column_name in _BACKFILL_INDEXES:
            if table_name not in table_names:
                continue
            if index_name not in _sqlite_index_names(connection, table_name):
                connection.execute(text(f"CREATE INDEX {index_name} ON {table_name} ({column_name})"))
