"""Lightweight schema upgrades for SQLite databases created by older builds."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_index_names(connection: Connection, table_name: str) -> set[str]:
    """Return index names for a SQLite table using PRAGMA index_list."""
    rows = connection.execute(text(f"PRAGMA index_list({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def ensure_sqlite_schema(engine: Engine) -> None:
    """Add columns and indexes missing from legacy SQLite databases."""
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as connection:
        table_rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
        table_names: set[str] = {str(row[0]) for row in table_rows}

        if "users" in table_names:
            user_columns = _sqlite_column_names(connection, "users")
            if "full_name" not in user_columns:
                connection.execute(text("ALTER TABLE users ADD COLUMN full_name VARCHAR(255) NOT NULL DEFAULT ''"))
                logger.info("[MIGRATE] users.full_name added")

        if "assets" in table_names:
            asset_columns = _sqlite_column_names(connection, "assets")
            if "notes" not in asset_columns:
                connection.execute(text("ALTER TABLE assets ADD COLUMN notes TEXT NOT NULL DEFAULT ''"))
            if "condition_status" not in asset_columns:
                connection.execute(
                    text("ALTER TABLE assets ADD COLUMN condition_status VARCHAR(32) NOT NULL DEFAULT 'Good'")
                )
                logger.info("[MIGRATE] assets.condition_status added; existing rows set to Good")
            if "status" not in asset_columns:
                connection.execute(text("ALTER TABLE assets ADD COLUMN status VARCHAR(16) NOT NULL DEFAULT 'active'"))
            if "updated_at" not in asset_columns:
                now_iso: str = datetime.now(timezone.utc).replace(tzinfo=None).isoformat(sep=" ", timespec="seconds")
                connection.execute(
                    text(f"ALTER TABLE assets ADD COLUMN updated_at DATETIME NOT NULL DEFAULT '{now_iso}'")
                )

        if "audit_log" in table_names:
            index_names = _sqlite_index_names(connection, "audit_log")
            if "ix_audit_log_created_at" not in index_names:
                connection.execute(
                    text("CREATE INDEX IF NOT EXISTS ix_audit_log_created_at ON audit_log(created_at)")
                )
