# database/repositories/base.py
from __future__ import annotations

import re
from dataclasses import asdict, fields
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from ...errors import RecordNotFound
from ..store import CollectionStore

T = TypeVar("T")

# camelCase keys written by the browser build that don't map 1:1 after snake-casing
_LEGACY_KEYS = {
    "price": "selling_price",
    "cpfCnpj": "tax_id",
    "cnpj": "tax_id",
    "photoUrl": "photo_url",
    "appName": "app_name",
    "logoUrl": "logo_url",
}

_CAMEL_RX = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RX.sub("_", key).lower()


def record_kwargs(cls: type, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a stored JSON object onto dataclass field names.
    Unknown keys are dropped so older/newer files still load.
    """
    names = {f.name for f in fields(cls)}
    out: Dict[str, Any] = {}
    for key, value in (data or {}).items():
        name = _LEGACY_KEYS.get(key) or _snake(key)
        if name in names:
            out[name] = value
    return out


class Record:
    """Mixin for dataclass records stored as JSON objects."""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return cls(**record_kwargs(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)  # type: ignore[arg-type]


class CollectionRepo(Generic[T]):
    """
    Read-modify-write access to one collection of `id`-keyed records.

    Every call re-reads the collection from the store; nothing is cached.
    """

    collection: str = ""
    record_type: Type[T]

    def __init__(self, store: CollectionStore):
        self.store = store

    # ---- Queries ----------------------------------------------------------

    def rows(self) -> List[Dict[str, Any]]:
        return list(self.store.get(self.collection))

    def list_all(self) -> List[T]:
        return [self.record_type.from_dict(r) for r in self.rows()]  # type: ignore[attr-defined]

    def get(self, record_id: str) -> Optional[T]:
        for r in self.rows():
            if r.get("id") == record_id:
                return self.record_type.from_dict(r)  # type: ignore[attr-defined]
        return None

    def require(self, record_id: str) -> T:
        rec = self.get(record_id)
        if rec is None:
            raise RecordNotFound(self.collection, record_id)
        return rec

    def exists(self, record_id: str) -> bool:
        return any(r.get("id") == record_id for r in self.rows())

    # ---- Mutations --------------------------------------------------------

    def add(self, record: T) -> T:
        rows = self.rows()
        rows.append(record.to_dict())  # type: ignore[attr-defined]
        self.store.set(self.collection, rows)
        return record

    def replace(self, record: T) -> T:
        rows = self.rows()
        rid = record.id  # type: ignore[attr-defined]
        for i, r in enumerate(rows):
            if r.get("id") == rid:
                rows[i] = record.to_dict()  # type: ignore[attr-defined]
                self.store.set(self.collection, rows)
                return record
        raise RecordNotFound(self.collection, rid)

    def remove(self, record_id: str) -> None:
        rows = self.rows()
        kept = [r for r in rows if r.get("id") != record_id]
        if len(kept) == len(rows):
            raise RecordNotFound(self.collection, record_id)
        self.store.set(self.collection, kept)
