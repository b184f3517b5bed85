from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List

from ...constants import COL_PURCHASES
from ...utils.helpers import money, parse_dt
from .base import CollectionRepo, Record, record_kwargs


@dataclass
class PurchaseItem(Record):
    product_id: str
    product_name: str  # snapshot; the product may be renamed later
    quantity: int
    unit_price: float

    def __post_init__(self):
        self.quantity = int(self.quantity)
        self.unit_price = float(self.unit_price)

    @property
    def line_total(self) -> float:
        return money(self.quantity * self.unit_price)


@dataclass
class Purchase(Record):
    id: str
    items: List[PurchaseItem]
    subtotal: float
    discount: float
    shipping: float
    total: float
    supplier_id: str
    date: str
    payment_method: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Purchase":
        kw = record_kwargs(cls, data)
        items = [PurchaseItem.from_dict(i) for i in kw.get("items") or []]
        kw["items"] = items
        # Records written before discount/shipping existed only carry `total`.
        kw.setdefault("subtotal", money(sum(i.quantity * i.unit_price for i in items)))
        kw["discount"] = float(kw.get("discount") or 0.0)
        kw["shipping"] = float(kw.get("shipping") or 0.0)
        kw.setdefault("payment_method", "")
        return cls(**kw)


class PurchasesRepo(CollectionRepo[Purchase]):
    collection = COL_PURCHASES
    record_type = Purchase

    def list_purchases(self) -> list[Purchase]:
        """Newest first."""
        return sorted(self.list_all(), key=lambda p: parse_dt(p.date), reverse=True)
