from __future__ import annotations
from dataclasses import dataclass

from ...constants import COL_SUPPLIERS
from ...utils.helpers import new_id
from ...utils.validators import require_text
from .base import CollectionRepo, Record


@dataclass
class Supplier(Record):
    id: str
    name: str
    phone: str | None = None
    email: str | None = None
    tax_id: str | None = None
    address: str | None = None


class SuppliersRepo(CollectionRepo[Supplier]):
    collection = COL_SUPPLIERS
    record_type = Supplier

    def list_suppliers(self) -> list[Supplier]:
        return sorted(self.list_all(), key=lambda s: s.name.lower())

    def name_of(self, supplier_id: str | None, default: str = "Unknown supplier") -> str:
        if not supplier_id:
            return default
        s = self.get(supplier_id)
        return s.name if s else default

    def create(
        self,
        name: str,
        phone: str | None = None,
        email: str | None = None,
        tax_id: str | None = None,
        address: str | None = None,
    ) -> Supplier:
        supplier = Supplier(
            id=new_id(),
            name=require_text(name, "name", "Name"),
            phone=phone or None,
            email=email or None,
            tax_id=tax_id or None,
            address=address or None,
        )
        return self.add(supplier)

    def update(self, supplier: Supplier) -> Supplier:
        supplier.name = require_text(supplier.name, "name", "Name")
        return self.replace(supplier)

    def delete(self, supplier_id: str) -> None:
        self.remove(supplier_id)
