from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List

from ...constants import PAYMENT_LABELS
from ...database.repositories import ProductsRepo, Sale, SettingsRepo
from ...database.store import CollectionStore
from ...utils.helpers import fmt_date, fmt_money, money
from ..cashflow.projector import in_window, window_bounds
from ..sales.service import SalesService
from .pdf import ENGINE_QT, html_to_pdf, render_page, resolve_period

UNKNOWN_PRODUCT = "Unknown product"


@dataclass
class SalesReportData:
    date_from: date
    date_to: date
    sales: List[Sale] = field(default_factory=list)
    total: float = 0.0


class SalesReport:
    """Itemized sales for a period. Product names come from the live catalog."""

    title = "Sales Report"
    template = "sales.html"

    def __init__(self, store: CollectionStore):
        self.store = store
        self.service = SalesService(store)
        self.products = ProductsRepo(store)
        self.settings = SettingsRepo(store)

    def build(self, date_from=None, date_to=None) -> SalesReportData:
        start, end = resolve_period(date_from, date_to)
        bounds = window_bounds(start, end)
        sales = [s for s in self.service.history() if in_window(s.date, bounds)]
        return SalesReportData(start, end, sales, money(sum(s.total for s in sales)))

    def rows(self, data: SalesReportData) -> List[dict]:
        names = {p.id: p.name for p in self.products.list_all()}
        return [
            {
                "party": self.service.client_label(s),
                "date": fmt_date(s.date),
                "payment": PAYMENT_LABELS.get(s.payment_method, s.payment_method),
                "lines": [
                    {
                        "name": names.get(it.product_id, UNKNOWN_PRODUCT),
                        "quantity": it.quantity,
                        "unit_price": fmt_money(it.unit_price),
                        "line_total": fmt_money(it.line_total),
                    }
                    for it in s.items
                ],
                "discount": fmt_money(s.discount) if s.discount > 0 else "",
                "total": fmt_money(s.total),
            }
            for s in data.sales
        ]

    def to_html(self, data: SalesReportData) -> str:
        return render_page(
            self.template,
            title=self.title,
            app_name=self.settings.load().app_name,
            start=data.date_from,
            end=data.date_to,
            sales=self.rows(data),
            count=len(data.sales),
            total=fmt_money(data.total),
        )

    def export_pdf(self, filepath: str | Path, date_from=None, date_to=None, engine: str = ENGINE_QT) -> Path:
        return html_to_pdf(self.to_html(self.build(date_from, date_to)), filepath, engine)
