# database/schema.py
from __future__ import annotations

import sqlite3

from ..constants import TABLE_COLLECTIONS, SCHEMA_VERSION

TABLE_SCHEMA_VERSION = "schema_version"

SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_COLLECTIONS} (
    name        TEXT PRIMARY KEY,
    payload     TEXT NOT NULL,
    revision    INTEGER NOT NULL DEFAULT 1,
    updated_at  TEXT NOT NULL DEFAULT (CURRENT_TIMESTAMP)
);

CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION} (
    id       INTEGER PRIMARY KEY CHECK (id=1),
    version  TEXT NOT NULL
);
"""


def init_schema(conn: sqlite3.Connection) -> None:
    """Create tables if missing (idempotent) and stamp the schema version."""
    conn.executescript(SQL)
    row = conn.execute(
        f"SELECT version FROM {TABLE_SCHEMA_VERSION} WHERE id=1;"
    ).fetchone()
    if row is None:
        conn.execute(
            f"INSERT INTO {TABLE_SCHEMA_VERSION}(id, version) VALUES (1, ?);",
            (SCHEMA_VERSION,),
        )
    conn.commit()


def get_current_version(conn: sqlite3.Connection) -> str | None:
    row = conn.execute(f"SELECT version FROM {TABLE_SCHEMA_VERSION} WHERE id=1;").fetchone()
    return row[0] if row else None
