"""Derived cash-flow feed (sales, purchases, paid receivables, cash adjustments)."""

from .projector import (
    CashFlowProjector,
    CashFlowSummary,
    Transaction,
    in_window,
    project_transactions,
    summarize,
    window_bounds,
)

__all__ = [
    "CashFlowProjector",
    "CashFlowSummary",
    "Transaction",
    "in_window",
    "project_transactions",
    "summarize",
    "window_bounds",
]
