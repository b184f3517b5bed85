# database/__init__.py
from __future__ import annotations

from pathlib import Path
import sqlite3

from ..config import DB_PATH
from . import schema as schema_module
from .store import CollectionStore


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """
    Returns a sqlite3.Connection with:
      - WAL mode
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
    Ensures the schema is applied idempotently.
    """
    path = Path(db_path) if db_path is not None else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL;")

    schema_module.init_schema(conn)
    return conn


def open_store(db_path: str | Path | None = None) -> CollectionStore:
    """Open (or create) the database file and wrap it in a CollectionStore."""
    return CollectionStore(get_connection(db_path))


__all__ = [
    "get_connection",
    "open_store",
    "CollectionStore",
]
