from __future__ import annotations

from pathlib import Path

from ...constants import TXN_INCOME
from ...database.repositories import SettingsRepo
from ...database.store import CollectionStore
from ...utils.helpers import fmt_date, fmt_money
from ..cashflow.projector import CashFlowProjector, CashFlowSummary
from .pdf import ENGINE_QT, html_to_pdf, render_page, resolve_period


class CashFlowReport:
    """Income/expense feed for a period with totals and the period balance."""

    title = "Cash Flow Report"
    template = "cash_flow.html"

    def __init__(self, store: CollectionStore):
        self.store = store
        self.projector = CashFlowProjector(store)
        self.settings = SettingsRepo(store)

    def build(self, date_from=None, date_to=None) -> CashFlowSummary:
        start, end = resolve_period(date_from, date_to)
        return self.projector.summarize(start, end)

    def to_html(self, summary: CashFlowSummary) -> str:
        rows = [
            {
                "date": fmt_date(t.date),
                "description": t.description,
                "type_label": "Income" if t.type == TXN_INCOME else "Expense",
                "css": "income" if t.type == TXN_INCOME else "expense",
                "amount": fmt_money(t.amount),
            }
            for t in summary.transactions
        ]
        return render_page(
            self.template,
            title=self.title,
            app_name=self.settings.load().app_name,
            start=summary.date_from,
            end=summary.date_to,
            transactions=rows,
            total_income=fmt_money(summary.total_income),
            total_expense=fmt_money(summary.total_expense),
            balance=fmt_money(summary.balance),
        )

    def export_pdf(self, filepath: str | Path, date_from=None, date_to=None, engine: str = ENGINE_QT) -> Path:
        return html_to_pdf(self.to_html(self.build(date_from, date_to)), filepath, engine)
