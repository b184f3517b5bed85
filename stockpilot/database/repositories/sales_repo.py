from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List

from ...constants import COL_SALES, PAYMENT_CASH, PAYMENT_CREDIT_TERM
from ...utils.helpers import money, parse_dt
from .base import CollectionRepo, Record, record_kwargs


@dataclass
class SaleItem(Record):
    product_id: str
    quantity: int
    unit_price: float  # snapshot at sale time

    def __post_init__(self):
        self.quantity = int(self.quantity)
        self.unit_price = float(self.unit_price)

    @property
    def line_total(self) -> float:
        return money(self.quantity * self.unit_price)


@dataclass
class Sale(Record):
    id: str
    items: List[SaleItem]
    total: float
    discount: float = 0.0
    payment_method: str = PAYMENT_CASH
    date: str = ""
    client_id: str | None = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sale":
        kw = record_kwargs(cls, data)
        kw["items"] = [SaleItem.from_dict(i) for i in kw.get("items") or []]
        kw["discount"] = float(kw.get("discount") or 0.0)
        return cls(**kw)

    @property
    def subtotal(self) -> float:
        return money(sum(i.quantity * i.unit_price for i in self.items))

    @property
    def is_credit_term(self) -> bool:
        return self.payment_method == PAYMENT_CREDIT_TERM


class SalesRepo(CollectionRepo[Sale]):
    collection = COL_SALES
    record_type = Sale

    def list_sales(self) -> list[Sale]:
        """Newest first."""
        return sorted(self.list_all(), key=lambda s: parse_dt(s.date), reverse=True)
