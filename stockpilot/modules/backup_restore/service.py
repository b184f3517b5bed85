"""
stockpilot/modules/backup_restore/service.py

Bulk export and import of every collection as one JSON document:

    {"version": 1, "exported_at": "...", "collections": {"products": [...], ...}}

Import is an additive merge: records whose `id` is already present are kept as
they are, new ones are appended. Settings, when present in the file, overwrite
the current settings. The whole import runs in one store transaction.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from ...constants import ALL_COLLECTIONS, COL_SETTINGS
from ...database.store import CollectionStore
from ...errors import MalformedImportFile
from ...utils.helpers import now_iso
from .logging_utils import get_logger, log_event
from .validators import validate_import_document

EXPORT_VERSION = 1

_log = get_logger()


def export_all(store: CollectionStore) -> Dict[str, Any]:
    return {
        "version": EXPORT_VERSION,
        "exported_at": now_iso(),
        "collections": {name: store.get(name) for name in ALL_COLLECTIONS},
    }


def export_to_file(store: CollectionStore, path: str | Path) -> Path:
    doc = export_all(store)
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
    counts = {k: len(v) for k, v in doc["collections"].items() if isinstance(v, list)}
    log_event(_log, "export", "done", "Export written", {"path": str(dest), "counts": counts})
    return dest


def import_document(store: CollectionStore, doc: Any) -> Dict[str, int]:
    """
    Merge `doc` into the store. Returns {collection: appended_count}; settings
    report 1 when overwritten. Raises MalformedImportFile with nothing written.
    """
    try:
        incoming = validate_import_document(doc)
    except MalformedImportFile as e:
        log_event(_log, "import", "validate", str(e), level=logging.ERROR)
        raise

    counts: Dict[str, int] = {}
    with store.transaction():
        for name, value in incoming.items():
            if name == COL_SETTINGS:
                store.set(COL_SETTINGS, dict(value))
                counts[name] = 1
                continue
            current = list(store.get(name))
            known = {r.get("id") for r in current}
            added = 0
            for row in value:
                if row["id"] in known:
                    continue
                current.append(row)
                known.add(row["id"])
                added += 1
            if added:
                store.set(name, current)
            counts[name] = added

    log_event(_log, "import", "merge", "Import merged", {"counts": counts})
    return counts


def import_from_file(store: CollectionStore, path: str | Path) -> Dict[str, int]:
    src = Path(path)
    log_event(_log, "import", "read", "Reading backup file", {"path": str(src)})
    try:
        doc = json.loads(src.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise MalformedImportFile(f"Backup file not found: {src}") from None
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        log_event(_log, "import", "read", "Backup file is not valid JSON", {"error": str(e)}, level=logging.ERROR)
        raise MalformedImportFile("The backup file is not valid JSON.") from e
    return import_document(store, doc)
