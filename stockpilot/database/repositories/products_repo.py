# stockpilot/database/repositories/products_repo.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ...constants import COL_PRODUCTS
from ...utils.helpers import new_id
from ...utils.validators import (
    require_non_negative,
    require_positive,
    require_quantity,
    require_text,
)
from .base import CollectionRepo, Record


@dataclass
class Product(Record):
    id: str
    name: str
    selling_price: float
    cost_price: float = 0.0
    quantity: int = 0
    photo_url: str | None = None
    supplier_id: str | None = None
    brand_id: str | None = None
    barcode: str | None = None

    def __post_init__(self):
        self.quantity = int(self.quantity or 0)
        self.selling_price = float(self.selling_price or 0.0)
        self.cost_price = float(self.cost_price or 0.0)


class ProductsRepo(CollectionRepo[Product]):
    collection = COL_PRODUCTS
    record_type = Product

    # ---------------------------- Queries ----------------------------

    def list_products(self) -> list[Product]:
        return sorted(self.list_all(), key=lambda p: p.name.lower())

    def search(self, term: str, in_stock_only: bool = False) -> List[Product]:
        """
        Case-insensitive match on name, or exact barcode match.
        Empty term returns nothing (the search box is idle).
        """
        t = (term or "").strip().lower()
        if not t:
            return []
        out = []
        for p in self.list_all():
            if in_stock_only and p.quantity <= 0:
                continue
            if t in p.name.lower() or (p.barcode and p.barcode == term.strip()):
                out.append(p)
        return out

    def find_by_code(self, code: str) -> Optional[Product]:
        """Exact barcode lookup (scanner input)."""
        c = (code or "").strip()
        if not c:
            return None
        for p in self.list_all():
            if p.barcode and p.barcode == c:
                return p
        return None

    def low_stock(self, threshold: int = 5) -> List[Product]:
        return sorted(
            (p for p in self.list_all() if p.quantity <= threshold),
            key=lambda p: (p.quantity, p.name.lower()),
        )

    # ---------------------------- Mutations ----------------------------

    def create(
        self,
        name: str,
        selling_price: float,
        cost_price: float = 0.0,
        quantity: int = 0,
        *,
        photo_url: str | None = None,
        supplier_id: str | None = None,
        brand_id: str | None = None,
        barcode: str | None = None,
    ) -> Product:
        product = Product(
            id=new_id(),
            name=require_text(name, "name", "Name", min_len=2),
            selling_price=require_positive(selling_price, "selling_price", "Selling price"),
            cost_price=require_non_negative(cost_price or 0.0, "cost_price", "Cost price"),
            quantity=require_quantity(quantity, allow_zero=True),
            photo_url=photo_url or None,
            supplier_id=supplier_id or None,
            brand_id=brand_id or None,
            barcode=(barcode or "").strip() or None,
        )
        return self.add(product)

    def update(self, product: Product) -> Product:
        """
        Save catalog fields. `quantity` is always taken from the stored record,
        since stock only moves through the inventory ledger.
        """
        require_text(product.name, "name", "Name", min_len=2)
        require_positive(product.selling_price, "selling_price", "Selling price")
        require_non_negative(product.cost_price, "cost_price", "Cost price")
        product.quantity = self.require(product.id).quantity
        return self.replace(product)

    def delete(self, product_id: str) -> None:
        # Historical sales/purchases keep the id; reports show a placeholder.
        self.remove(product_id)
