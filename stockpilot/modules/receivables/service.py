from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ...constants import RECEIVABLE_PAID
from ...database.repositories import AccountReceivable, ClientsRepo, ReceivablesRepo
from ...database.store import CollectionStore
from ...utils.helpers import money, now_iso, parse_dt

_log = logging.getLogger(__name__)


class ReceivablesService:
    """Settlement of money owed for credit-term sales (pending -> paid, once)."""

    def __init__(self, store: CollectionStore):
        self.store = store
        self.receivables = ReceivablesRepo(store)
        self.clients = ClientsRepo(store)

    def mark_paid(self, receivable_id: str, *, when: Optional[str] = None) -> AccountReceivable:
        """
        Stamp a pending receivable as paid. Paid is terminal: calling this on an
        already-paid receivable changes nothing and returns it as stored.
        """
        rec = self.receivables.require(receivable_id)
        if rec.is_paid:
            _log.info("Receivable %s already paid on %s; nothing to do", rec.id, rec.paid_date)
            return rec
        rec.status = RECEIVABLE_PAID
        rec.paid_date = when or now_iso()
        self.receivables.replace(rec)
        _log.info("Receivable %s marked paid (%.2f)", rec.id, rec.amount)
        return rec

    def list_sorted(self) -> List[AccountReceivable]:
        """Pending first, then by due date (earliest first)."""
        return sorted(
            self.receivables.list_all(),
            key=lambda r: (r.is_paid, parse_dt(r.due_date)),
        )

    def overdue(self, as_of: Optional[datetime] = None) -> List[AccountReceivable]:
        now = as_of or datetime.now()
        return [
            r for r in self.list_sorted()
            if not r.is_paid and parse_dt(r.due_date) < now
        ]

    def outstanding_total(self) -> float:
        return money(sum(r.amount for r in self.receivables.list_all() if not r.is_paid))

    def client_label(self, rec: AccountReceivable) -> str:
        return self.clients.name_of(rec.client_id)
