"""
stockpilot/modules/backup_restore/validators.py

Shape checks for an import document, with messages the user can act on.

Public API
---------
- normalize_collection_key(key) -> str | None
- validate_import_document(doc) -> dict[str, object]
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ...constants import ALL_COLLECTIONS, COL_SETTINGS, LEGACY_COLLECTION_KEYS
from ...errors import MalformedImportFile

SUPPORTED_VERSIONS = (1,)


def normalize_collection_key(key: str) -> Optional[str]:
    """Current collection name for `key` (legacy aliases accepted), or None."""
    if key in ALL_COLLECTIONS:
        return key
    return LEGACY_COLLECTION_KEYS.get(key)


def validate_import_document(doc: Any) -> Dict[str, Any]:
    """
    Check the top-level shape and return {collection_name: value} with legacy
    keys mapped to their current names. Unknown collections are ignored.

    Rules:
      - The document is a JSON object.
      - `version`, when present, is a supported version.
      - `collections` (or, for bare exports, the object itself) maps names to
        a list of objects with an `id`, or an object for settings.
    Raises:
      MalformedImportFile with a user-facing message on failure.
    """
    if not isinstance(doc, dict):
        raise MalformedImportFile("The backup file does not contain a JSON object.")

    version = doc.get("version")
    if version is not None and version not in SUPPORTED_VERSIONS:
        raise MalformedImportFile(f"Unsupported backup version: {version!r}.")

    body = doc.get("collections", doc if version is None else None)
    if not isinstance(body, dict):
        raise MalformedImportFile("The backup file has no 'collections' section.")

    out: Dict[str, Any] = {}
    for key, value in body.items():
        name = normalize_collection_key(key)
        if name is None:
            continue
        if name == COL_SETTINGS:
            if not isinstance(value, dict):
                raise MalformedImportFile("Settings must be a JSON object.")
        else:
            if not isinstance(value, list):
                raise MalformedImportFile(f"Collection '{key}' must be a list.")
            for i, row in enumerate(value):
                if not isinstance(row, dict) or not row.get("id"):
                    raise MalformedImportFile(
                        f"Record #{i + 1} in '{key}' is not an object with an id."
                    )
        out[name] = value

    if not out:
        raise MalformedImportFile("The backup file contains no known collections.")
    return out
