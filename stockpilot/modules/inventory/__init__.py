"""Stock levels: the only writer of product quantities."""

from .ledger import InventoryLedger, stock_deltas

__all__ = ["InventoryLedger", "stock_deltas"]
