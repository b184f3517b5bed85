from __future__ import annotations
from dataclasses import dataclass

from ...constants import COL_RECEIVABLES, RECEIVABLE_PAID, RECEIVABLE_PENDING
from .base import CollectionRepo, Record


@dataclass
class AccountReceivable(Record):
    id: str
    sale_id: str
    client_id: str
    amount: float
    due_date: str
    status: str = RECEIVABLE_PENDING
    paid_date: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == RECEIVABLE_PAID


class ReceivablesRepo(CollectionRepo[AccountReceivable]):
    collection = COL_RECEIVABLES
    record_type = AccountReceivable

    def for_sale(self, sale_id: str) -> list[AccountReceivable]:
        return [r for r in self.list_all() if r.sale_id == sale_id]

    def paid(self) -> list[AccountReceivable]:
        return [r for r in self.list_all() if r.is_paid]
