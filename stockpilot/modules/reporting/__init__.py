"""PDF reports: cash flow, sales and purchases."""

from .cash_flow_report import CashFlowReport
from .purchases_report import PurchasesReport
from .sales_report import SalesReport

__all__ = ["CashFlowReport", "PurchasesReport", "SalesReport"]
