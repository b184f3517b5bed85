"""
Sale recording.

commit() turns a validated cart into a Sale. The stock decrease, the Sale
append and (for credit-term sales) the receivable append happen inside one
store transaction: if any step fails none of them is persisted and the cart
is left untouched for correction.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ...constants import (
    COL_CLIENTS,
    CREDIT_TERM_DAYS,
    PAYMENT_CREDIT_TERM,
    RECEIVABLE_PENDING,
)
from ...database.repositories import (
    AccountReceivable,
    ClientsRepo,
    ProductsRepo,
    ReceivablesRepo,
    Sale,
    SaleItem,
    SalesRepo,
)
from ...database.store import CollectionStore
from ...errors import (
    EmptyCart,
    MissingClientForCredit,
    ReceivableAlreadyPaid,
    RecordNotFound,
    ValidationError,
)
from ...utils.helpers import add_days, money, new_id, now_iso
from ..inventory.ledger import InventoryLedger
from .cart import SaleCart

_log = logging.getLogger(__name__)

COUNTER_SALE_LABEL = "Counter sale"


class SalesService:
    def __init__(self, store: CollectionStore):
        self.store = store
        self.sales = SalesRepo(store)
        self.receivables = ReceivablesRepo(store)
        self.clients = ClientsRepo(store)
        self.products = ProductsRepo(store)
        self.ledger = InventoryLedger(store)

    def new_cart(self) -> SaleCart:
        return SaleCart(self.products)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------
    def validate(self, cart: SaleCart) -> None:
        if cart.is_empty:
            raise EmptyCart("sale")
        if cart.payment_method == PAYMENT_CREDIT_TERM and not cart.client_id:
            raise MissingClientForCredit()
        if cart.client_id and not self.clients.exists(cart.client_id):
            raise RecordNotFound(COL_CLIENTS, cart.client_id)
        if cart.discount < 0:
            raise ValidationError("discount", "Discount cannot be negative.")
        if cart.discount > cart.subtotal():
            raise ValidationError("discount", "Discount cannot exceed the sale subtotal.")
        self.ledger.check_sale(cart.items)

    def commit(self, cart: SaleCart, *, when: Optional[str] = None) -> Sale:
        """
        Record the cart as a Sale. Raises EmptyCart, MissingClientForCredit,
        InsufficientStock or ValidationError with nothing persisted.
        """
        self.validate(cart)

        sale_date = when or now_iso()
        sale = Sale(
            id=new_id(),
            items=[SaleItem(it.product_id, it.quantity, it.unit_price) for it in cart.items],
            total=cart.total(),
            discount=money(cart.discount),
            payment_method=cart.payment_method,
            date=sale_date,
            client_id=cart.client_id,
        )

        with self.store.transaction():
            self.ledger.apply_sale(sale.items)
            self.sales.add(sale)
            if sale.is_credit_term:
                self.receivables.add(
                    AccountReceivable(
                        id=new_id(),
                        sale_id=sale.id,
                        client_id=sale.client_id or "",
                        amount=sale.total,
                        due_date=add_days(sale_date, CREDIT_TERM_DAYS),
                        status=RECEIVABLE_PENDING,
                    )
                )

        _log.info(
            "Sale %s recorded: %d line(s), total=%.2f, method=%s",
            sale.id, len(sale.items), sale.total, sale.payment_method,
        )
        cart.clear()
        return sale

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------
    def delete_sale(self, sale_id: str) -> None:
        """
        Put the sold units back in stock and drop the sale together with its
        pending receivable. A sale whose receivable was already paid cannot be
        deleted: the payment is part of the cash history.
        """
        sale = self.sales.require(sale_id)
        linked = self.receivables.for_sale(sale_id)
        for r in linked:
            if r.is_paid:
                raise ReceivableAlreadyPaid(r.id)

        with self.store.transaction():
            self.ledger.reverse_sale(sale.items)
            for r in linked:
                self.receivables.remove(r.id)
            self.sales.remove(sale_id)
        _log.info("Sale %s deleted; stock restored for %d line(s)", sale_id, len(sale.items))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def client_label(self, sale: Sale) -> str:
        if not sale.client_id:
            return COUNTER_SALE_LABEL
        return self.clients.name_of(sale.client_id)

    def history(self, search: str = "") -> List[Sale]:
        """Newest first; `search` matches the client label or the sale id."""
        term = (search or "").strip().lower()
        out = []
        for s in self.sales.list_sales():
            if not term or term in self.client_label(s).lower() or term in s.id.lower():
                out.append(s)
        return out
