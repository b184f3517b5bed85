"""
Cash-flow projection.

The transaction feed is never stored: it is rebuilt from sales, purchases,
paid receivables and manual cash adjustments on every call.

- Sale            -> income, except credit-term sales (cash arrives with the receivable)
- Purchase        -> expense, amount = -total
- Paid receivable -> income dated at paid_date
- Cash adjustment -> income for 'add', expense for 'remove'

Feed order is newest first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ...constants import (
    ADJUSTMENT_ADD,
    ADJUSTMENT_REMOVE,
    COL_CASH_ADJUSTMENTS,
    COL_CLIENTS,
    COL_PURCHASES,
    COL_RECEIVABLES,
    COL_SALES,
    COL_SUPPLIERS,
    DASHBOARD_RECENT_LIMIT,
    PAYMENT_CREDIT_TERM,
    RECEIVABLE_PAID,
    TXN_EXPENSE,
    TXN_INCOME,
)
from ...database.repositories import CashAdjustment, CashAdjustmentsRepo
from ...database.store import CollectionStore
from ...errors import ValidationError
from ...utils.helpers import as_date, money, new_id, now_iso, parse_dt
from ...utils.validators import require_positive, require_text

_log = logging.getLogger(__name__)

DateLike = Union[str, date, datetime]


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str
    description: str
    amount: float  # signed: positive income, negative expense
    type: str      # 'income' | 'expense'

    @property
    def when(self) -> datetime:
        return parse_dt(self.date)


@dataclass
class CashFlowSummary:
    total_income: float
    total_expense: float
    balance: float
    transactions: List[Transaction] = field(default_factory=list)
    date_from: Optional[date] = None
    date_to: Optional[date] = None


def window_bounds(
    date_from: Optional[DateLike], date_to: Optional[DateLike] = None
) -> Optional[Tuple[datetime, datetime]]:
    """
    Half-open [from 00:00, (to + 1 day) 00:00). Without `to` the window is the
    single day `from`. Without `from` there is no window (None).
    """
    if date_from in (None, ""):
        return None
    start_d = as_date(date_from)
    end_d = as_date(date_to) if date_to not in (None, "") else start_d
    start = datetime(start_d.year, start_d.month, start_d.day)
    end = datetime(end_d.year, end_d.month, end_d.day) + timedelta(days=1)
    return start, end


def in_window(value: DateLike, bounds: Optional[Tuple[datetime, datetime]]) -> bool:
    if bounds is None:
        return True
    dt = parse_dt(value) if not isinstance(value, datetime) else value
    return bounds[0] <= dt < bounds[1]


def _names(rows: Iterable[dict]) -> Dict[str, str]:
    return {r.get("id"): r.get("name", "") for r in rows or []}


def project_transactions(
    sales: Iterable[dict],
    purchases: Iterable[dict],
    receivables: Iterable[dict],
    adjustments: Iterable[dict],
    clients: Iterable[dict] = (),
    suppliers: Iterable[dict] = (),
) -> List[Transaction]:
    """Pure derivation of the transaction feed from raw collection snapshots."""
    client_names = _names(clients)
    supplier_names = _names(suppliers)
    out: List[Transaction] = []

    for s in sales or []:
        if (s.get("payment_method") or s.get("paymentMethod")) == PAYMENT_CREDIT_TERM:
            continue
        client_id = s.get("client_id") or s.get("clientId")
        if client_id:
            label = f"Sale to {client_names.get(client_id) or 'unknown client'}"
        else:
            label = "Counter sale"
        out.append(Transaction(
            id=f"sale-{s['id']}",
            date=s["date"],
            description=label,
            amount=money(s.get("total") or 0.0),
            type=TXN_INCOME,
        ))

    for p in purchases or []:
        supplier_id = p.get("supplier_id") or p.get("supplierId")
        out.append(Transaction(
            id=f"purchase-{p['id']}",
            date=p["date"],
            description=f"Purchase from {supplier_names.get(supplier_id) or 'unknown supplier'}",
            amount=-money(p.get("total") or 0.0),
            type=TXN_EXPENSE,
        ))

    for r in receivables or []:
        if r.get("status") != RECEIVABLE_PAID:
            continue
        paid_date = r.get("paid_date") or r.get("paidDate")
        if not paid_date:
            _log.warning("Paid receivable %s has no paid date; using now", r.get("id"))
            paid_date = now_iso()
        client_id = r.get("client_id") or r.get("clientId")
        out.append(Transaction(
            id=f"receivable-{r['id']}",
            date=paid_date,
            description=f"Payment from {client_names.get(client_id) or 'unknown client'}",
            amount=money(r.get("amount") or 0.0),
            type=TXN_INCOME,
        ))

    for a in adjustments or []:
        amount = money(a.get("amount") or 0.0)
        is_add = a.get("type") == ADJUSTMENT_ADD
        out.append(Transaction(
            id=f"adj-{a['id']}",
            date=a["date"],
            description=a.get("description") or "",
            amount=amount if is_add else -amount,
            type=TXN_INCOME if is_add else TXN_EXPENSE,
        ))

    out.sort(key=lambda t: t.when, reverse=True)
    return out


def summarize(transactions: Iterable[Transaction]) -> Tuple[float, float, float]:
    """(total_income, total_expense, balance); expenses are reported as a positive sum."""
    income = 0.0
    expense = 0.0
    for t in transactions:
        if t.type == TXN_INCOME:
            income += t.amount
        else:
            expense += abs(t.amount)
    return money(income), money(expense), money(income - expense)


class CashFlowProjector:
    """Store-backed facade over project_transactions(); reads fresh snapshots every call."""

    def __init__(self, store: CollectionStore):
        self.store = store
        self.adjustments = CashAdjustmentsRepo(store)

    def transactions(self) -> List[Transaction]:
        return project_transactions(
            self.store.get(COL_SALES),
            self.store.get(COL_PURCHASES),
            self.store.get(COL_RECEIVABLES),
            self.store.get(COL_CASH_ADJUSTMENTS),
            clients=self.store.get(COL_CLIENTS),
            suppliers=self.store.get(COL_SUPPLIERS),
        )

    def window(self, date_from: Optional[DateLike] = None, date_to: Optional[DateLike] = None) -> List[Transaction]:
        bounds = window_bounds(date_from, date_to)
        return [t for t in self.transactions() if in_window(t.when, bounds)]

    def summarize(self, date_from: Optional[DateLike] = None, date_to: Optional[DateLike] = None) -> CashFlowSummary:
        txns = self.window(date_from, date_to)
        income, expense, balance = summarize(txns)
        bounds = window_bounds(date_from, date_to)
        return CashFlowSummary(
            total_income=income,
            total_expense=expense,
            balance=balance,
            transactions=txns,
            date_from=bounds[0].date() if bounds else None,
            date_to=(bounds[1] - timedelta(days=1)).date() if bounds else None,
        )

    def recent(self, limit: int = DASHBOARD_RECENT_LIMIT) -> List[Transaction]:
        return self.transactions()[: max(0, int(limit))]

    def record_adjustment(
        self, type: str, amount: float, description: str, *, when: Optional[str] = None
    ) -> CashAdjustment:
        """Manual cash movement (e.g. owner withdrawal, change fund top-up)."""
        if type not in (ADJUSTMENT_ADD, ADJUSTMENT_REMOVE):
            raise ValidationError("type", "Choose whether cash is added or removed.")
        adj = CashAdjustment(
            id=new_id(),
            date=when or now_iso(),
            type=type,
            amount=money(require_positive(amount, "amount", "Amount")),
            description=require_text(description, "description", "Description", min_len=3),
        )
        self.adjustments.add(adj)
        _log.info("Cash adjustment %s: %s %.2f (%s)", adj.id, adj.type, adj.amount, adj.description)
        return adj
