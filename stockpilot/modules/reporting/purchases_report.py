from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List

from ...database.repositories import Purchase, SettingsRepo
from ...database.store import CollectionStore
from ...utils.helpers import fmt_date, fmt_money, money
from ..cashflow.projector import in_window, window_bounds
from ..purchase.service import PurchaseService
from .pdf import ENGINE_QT, html_to_pdf, render_page, resolve_period


@dataclass
class PurchasesReportData:
    date_from: date
    date_to: date
    purchases: List[Purchase] = field(default_factory=list)
    total: float = 0.0


class PurchasesReport:
    """Itemized purchases for a period, using the product name stored on each line."""

    title = "Purchases Report"
    template = "purchases.html"

    def __init__(self, store: CollectionStore):
        self.store = store
        self.service = PurchaseService(store)
        self.settings = SettingsRepo(store)

    def build(self, date_from=None, date_to=None) -> PurchasesReportData:
        start, end = resolve_period(date_from, date_to)
        bounds = window_bounds(start, end)
        purchases = [p for p in self.service.history() if in_window(p.date, bounds)]
        return PurchasesReportData(start, end, purchases, money(sum(p.total for p in purchases)))

    def rows(self, data: PurchasesReportData) -> List[dict]:
        return [
            {
                "party": self.service.supplier_label(p),
                "date": fmt_date(p.date),
                "lines": [
                    {
                        "name": it.product_name,
                        "quantity": it.quantity,
                        "unit_price": fmt_money(it.unit_price),
                        "line_total": fmt_money(it.line_total),
                    }
                    for it in p.items
                ],
                "shipping": fmt_money(p.shipping) if p.shipping > 0 else "",
                "discount": fmt_money(p.discount) if p.discount > 0 else "",
                "total": fmt_money(p.total),
            }
            for p in data.purchases
        ]

    def to_html(self, data: PurchasesReportData) -> str:
        return render_page(
            self.template,
            title=self.title,
            app_name=self.settings.load().app_name,
            start=data.date_from,
            end=data.date_to,
            purchases=self.rows(data),
            count=len(data.purchases),
            total=fmt_money(data.total),
        )

    def export_pdf(self, filepath: str | Path, date_from=None, date_to=None, engine: str = ENGINE_QT) -> Path:
        return html_to_pdf(self.to_html(self.build(date_from, date_to)), filepath, engine)
