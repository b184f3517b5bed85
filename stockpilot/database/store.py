# database/store.py
"""
Key-value collection store.

Each named collection (products, sales, ...) is persisted as one JSON document
in the `collections` table. Readers always get a fresh snapshot straight from
SQLite; writers replace a collection wholesale.

Conventions:
- get(name) returns list[dict] for record collections and dict for settings.
- set(name, value) replaces the whole collection and bumps its revision.
- Writes issued inside `transaction()` commit together; change notifications
  are emitted only after the outermost commit succeeds.
- Another connection on the same file (another window/process) is detected by
  revision drift in `sync_external_changes()`.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from ..constants import ALL_COLLECTIONS, COL_SETTINGS, TABLE_COLLECTIONS
from ..utils.helpers import now_iso

_log = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]


class CollectionStore(QObject):
    """Persistent collection store with change notification."""

    # (collection_name, new_value)
    collectionChanged = Signal(str, object)

    def __init__(self, conn: sqlite3.Connection, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.conn = conn
        self.conn.row_factory = sqlite3.Row
        self._depth = 0
        self._pending: Dict[str, Any] = {}
        self._listeners: List[Callable[[str, Any], None]] = []
        self._timer: Optional[QTimer] = None
        self._revisions = self._read_revisions()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get(self, name: str) -> Any:
        """Fresh snapshot of one collection (never cached)."""
        self._check_name(name)
        row = self.conn.execute(
            f"SELECT payload FROM {TABLE_COLLECTIONS} WHERE name=?", (name,)
        ).fetchone()
        if row is None:
            return self._empty(name)
        try:
            return json.loads(row["payload"])
        except json.JSONDecodeError as e:
            _log.error("Stored payload for %r is not valid JSON: %s", name, e)
            return self._empty(name)

    def revision(self, name: str) -> int:
        self._check_name(name)
        row = self.conn.execute(
            f"SELECT revision FROM {TABLE_COLLECTIONS} WHERE name=?", (name,)
        ).fetchone()
        return int(row["revision"]) if row else 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def set(self, name: str, value: Any) -> None:
        """Replace a whole collection."""
        self._check_name(name)
        payload = json.dumps(value, ensure_ascii=False)
        with self.transaction():
            self.conn.execute(
                f"""
                INSERT INTO {TABLE_COLLECTIONS}(name, payload, revision, updated_at)
                VALUES (?, ?, 1, ?)
                ON CONFLICT(name) DO UPDATE SET
                    payload    = excluded.payload,
                    revision   = {TABLE_COLLECTIONS}.revision + 1,
                    updated_at = excluded.updated_at
                """,
                (name, payload, now_iso()),
            )
            self._pending[name] = value

    @contextmanager
    def transaction(self) -> Iterator["CollectionStore"]:
        """
        Run several writes as one IMMEDIATE transaction.
        Commit on success, rollback on error. Nested calls join the outer one.
        """
        if self._depth > 0:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        cur = self.conn.cursor()
        cur.execute("BEGIN IMMEDIATE")
        self._depth = 1
        try:
            yield self
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            self._pending.clear()
            raise
        finally:
            self._depth = 0
            cur.close()

        changed, self._pending = self._pending, {}
        for name in changed:
            self._revisions[name] = self.revision(name)
        for name, value in changed.items():
            self.collectionChanged.emit(name, value)

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def subscribe(self, callback: Listener, name: Optional[str] = None) -> Callable[[], None]:
        """
        Call `callback(collection_name, new_value)` after every committed change
        (optionally only for one collection). Returns an unsubscribe function.
        """
        if name is not None:
            self._check_name(name)

        def _relay(changed_name: str, value: Any) -> None:
            if name is None or changed_name == name:
                callback(changed_name, value)

        self._listeners.append(_relay)
        self.collectionChanged.connect(_relay)

        def unsubscribe() -> None:
            if _relay in self._listeners:
                self._listeners.remove(_relay)
                self.collectionChanged.disconnect(_relay)

        return unsubscribe

    def sync_external_changes(self) -> List[str]:
        """
        Emit notifications for collections rewritten through another connection
        since we last looked. Returns the names that changed.
        """
        if self._depth > 0:
            return []
        current = self._read_revisions()
        changed = [n for n, rev in current.items() if self._revisions.get(n) != rev]
        self._revisions = current
        for name in changed:
            _log.debug("External change detected on %s", name)
            self.collectionChanged.emit(name, self.get(name))
        return changed

    def start_watching(self, interval_ms: int = 1000) -> None:
        if self._timer is None:
            self._timer = QTimer(self)
            self._timer.timeout.connect(self.sync_external_changes)
        self._timer.start(int(interval_ms))

    def stop_watching(self) -> None:
        if self._timer is not None:
            self._timer.stop()

    def close(self) -> None:
        self.stop_watching()
        self.conn.close()

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------
    def _read_revisions(self) -> Dict[str, int]:
        rows = self.conn.execute(f"SELECT name, revision FROM {TABLE_COLLECTIONS}").fetchall()
        return {r["name"]: int(r["revision"]) for r in rows}

    @staticmethod
    def _check_name(name: str) -> None:
        if name not in ALL_COLLECTIONS:
            raise ValueError(f"Unknown collection: {name!r}")

    @staticmethod
    def _empty(name: str) -> Any:
        return {} if name == COL_SETTINGS else []
