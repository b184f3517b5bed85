"""
Inventory ledger.

Keeps products[*].quantity consistent with recorded sales and purchases.
No other component writes product quantities.

Rules:
- Sales may never drive stock below zero (checked per product, all lines
  validated before anything is written).
- Purchases always succeed; lines whose product has since been deleted are
  skipped with a warning.
- Reversing a purchase that would leave negative stock (the product was sold
  in the meantime) is rejected unless the caller passes allow_negative=True,
  in which case the negative quantity is kept as a visible drift signal.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, Mapping

from ...constants import COL_PRODUCTS
from ...database.store import CollectionStore
from ...errors import InsufficientStock, RecordNotFound

_log = logging.getLogger(__name__)


def stock_deltas(items: Iterable, sign: int = 1) -> Dict[str, int]:
    """Sum line quantities per product id (a product may appear on several lines)."""
    out: Dict[str, int] = OrderedDict()
    for it in items:
        out[it.product_id] = out.get(it.product_id, 0) + sign * int(it.quantity)
    return out


class InventoryLedger:
    def __init__(self, store: CollectionStore):
        self.store = store

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------
    def available(self, product_id: str) -> int:
        for r in self.store.get(COL_PRODUCTS):
            if r.get("id") == product_id:
                return int(r.get("quantity") or 0)
        raise RecordNotFound(COL_PRODUCTS, product_id)

    def check_sale(self, items: Iterable) -> None:
        """
        Raise InsufficientStock for the first product whose requested total
        exceeds current stock; RecordNotFound for unknown products.
        """
        self._plan(stock_deltas(items, -1), allow_negative=False, skip_missing=False)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def apply_purchase(self, items: Iterable) -> Dict[str, int]:
        return self.apply_deltas(stock_deltas(items, +1), skip_missing=True)

    def apply_sale(self, items: Iterable) -> Dict[str, int]:
        return self.apply_deltas(stock_deltas(items, -1))

    def reverse_purchase(self, items: Iterable, *, allow_negative: bool = False) -> Dict[str, int]:
        return self.apply_deltas(
            stock_deltas(items, -1), allow_negative=allow_negative, skip_missing=True
        )

    def reverse_sale(self, items: Iterable) -> Dict[str, int]:
        return self.apply_deltas(stock_deltas(items, +1), skip_missing=True)

    def apply_deltas(
        self,
        deltas: Mapping[str, int],
        *,
        allow_negative: bool = False,
        skip_missing: bool = False,
    ) -> Dict[str, int]:
        """
        Add `deltas[product_id]` to each product's quantity in one write.
        Everything is validated first; on error nothing is written.
        Returns {product_id: new_quantity} for the products touched.
        """
        rows, planned = self._plan(deltas, allow_negative=allow_negative, skip_missing=skip_missing)
        if not planned:
            return {}
        for r in rows:
            if r.get("id") in planned:
                r["quantity"] = planned[r["id"]]
        with self.store.transaction():
            self.store.set(COL_PRODUCTS, rows)
        for pid, qty in planned.items():
            if qty < 0:
                _log.warning("Stock for product %s is negative (%d) after reversal", pid, qty)
        _log.debug("Applied stock deltas %s", dict(deltas))
        return planned

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------
    def _plan(self, deltas: Mapping[str, int], *, allow_negative: bool, skip_missing: bool):
        rows = list(self.store.get(COL_PRODUCTS))
        index = {r.get("id"): r for r in rows}
        planned: Dict[str, int] = {}
        for pid, delta in deltas.items():
            row = index.get(pid)
            if row is None:
                if skip_missing:
                    _log.warning("Product %s no longer exists; stock change %+d skipped", pid, delta)
                    continue
                raise RecordNotFound(COL_PRODUCTS, pid)
            current = int(row.get("quantity") or 0)
            new_qty = current + int(delta)
            if new_qty < 0 and delta < 0 and not allow_negative:
                raise InsufficientStock(pid, -int(delta), current, row.get("name"))
            planned[pid] = new_qty
        return rows, planned
