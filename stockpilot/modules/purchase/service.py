"""
Purchase recording.

- record(): append the Purchase and add its quantities to stock (one transaction).
- edit(): swap the item set of an existing purchase; stock moves by the net
  difference between old and new lines, checked as a whole before writing.
- delete(): take the purchased units back out of stock and drop the record.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ...constants import COL_SUPPLIERS
from ...database.repositories import (
    Product,
    ProductsRepo,
    Purchase,
    PurchaseItem,
    PurchasesRepo,
    SuppliersRepo,
)
from ...database.store import CollectionStore
from ...errors import EmptyCart, RecordNotFound, ValidationError
from ...utils.helpers import money, new_id, now_iso
from ..inventory.ledger import InventoryLedger, stock_deltas
from .cart import PurchaseCart, looks_like_barcode

_log = logging.getLogger(__name__)


class PurchaseService:
    def __init__(self, store: CollectionStore):
        self.store = store
        self.purchases = PurchasesRepo(store)
        self.products = ProductsRepo(store)
        self.suppliers = SuppliersRepo(store)
        self.ledger = InventoryLedger(store)

    def new_cart(self) -> PurchaseCart:
        return PurchaseCart(self.products)

    def cart_for(self, purchase_id: str) -> PurchaseCart:
        return PurchaseCart.from_purchase(self.products, self.purchases.require(purchase_id))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate(self, cart: PurchaseCart) -> None:
        if cart.is_empty:
            raise EmptyCart("purchase")
        if not cart.supplier_id:
            raise ValidationError("supplier_id", "A supplier must be selected.")
        if not self.suppliers.exists(cart.supplier_id):
            raise RecordNotFound(COL_SUPPLIERS, cart.supplier_id)
        if not (cart.payment_method or "").strip():
            raise ValidationError("payment_method", "A payment method must be selected.")
        if cart.discount < 0:
            raise ValidationError("discount", "Discount cannot be negative.")
        if cart.shipping < 0:
            raise ValidationError("shipping", "Shipping cannot be negative.")
        if cart.discount > cart.subtotal() + cart.shipping:
            raise ValidationError("discount", "Discount cannot exceed the subtotal plus shipping.")

    def _build(self, cart: PurchaseCart, purchase_id: str, date: str) -> Purchase:
        return Purchase(
            id=purchase_id,
            items=[
                PurchaseItem(it.product_id, it.product_name, it.quantity, it.unit_price)
                for it in cart.items
            ],
            subtotal=cart.subtotal(),
            discount=money(cart.discount),
            shipping=money(cart.shipping),
            total=cart.total(),
            supplier_id=cart.supplier_id or "",
            date=date,
            payment_method=cart.payment_method.strip(),
        )

    # ------------------------------------------------------------------
    # Create / Update / Delete
    # ------------------------------------------------------------------
    def record(self, cart: PurchaseCart, *, when: Optional[str] = None) -> Purchase:
        self.validate(cart)
        purchase = self._build(cart, new_id(), when or now_iso())
        with self.store.transaction():
            self.purchases.add(purchase)
            self.ledger.apply_purchase(purchase.items)
        _log.info(
            "Purchase %s recorded: %d line(s), total=%.2f",
            purchase.id, len(purchase.items), purchase.total,
        )
        cart.clear()
        return purchase

    def edit(self, purchase_id: str, cart: PurchaseCart, *, allow_negative: bool = False) -> Purchase:
        """
        Replace the lines/header of an existing purchase, keeping its id and date.
        Raises InsufficientStock when removing units that were already sold
        (unless allow_negative=True).
        """
        old = self.purchases.require(purchase_id)
        self.validate(cart)
        new = self._build(cart, old.id, old.date)

        net = stock_deltas(old.items, -1)
        for pid, qty in stock_deltas(new.items, +1).items():
            net[pid] = net.get(pid, 0) + qty
        net = {pid: d for pid, d in net.items() if d != 0}

        with self.store.transaction():
            self.ledger.apply_deltas(net, allow_negative=allow_negative, skip_missing=True)
            self.purchases.replace(new)
        _log.info("Purchase %s edited; net stock change %s", purchase_id, net)
        return new

    def delete(self, purchase_id: str, *, allow_negative: bool = False) -> None:
        purchase = self.purchases.require(purchase_id)
        with self.store.transaction():
            self.ledger.reverse_purchase(purchase.items, allow_negative=allow_negative)
            self.purchases.remove(purchase_id)
        _log.info("Purchase %s deleted; stock reversed", purchase_id)

    # ------------------------------------------------------------------
    # Inline catalog entry
    # ------------------------------------------------------------------
    def create_adhoc_product(
        self,
        cart: PurchaseCart,
        search_term: str = "",
        *,
        name: Optional[str] = None,
        barcode: Optional[str] = None,
        selling_price: float,
        cost_price: float = 0.0,
    ) -> Product:
        """
        Register a product that isn't in the catalog yet (quantity 0) and put one
        unit of it in the cart at cost price. A digits-only search term of 8+
        characters is taken as the barcode, anything else as the name.
        """
        term = (search_term or "").strip()
        if looks_like_barcode(term):
            barcode = barcode or term
        else:
            name = name or term
        product = self.products.create(
            name or "",
            selling_price,
            cost_price,
            0,
            barcode=barcode,
            supplier_id=cart.supplier_id,
        )
        cart.add_product(product, unit_price=product.cost_price)
        _log.info("Product %s (%s) created from the purchase form", product.id, product.name)
        return product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def history(self) -> List[Purchase]:
        return self.purchases.list_purchases()

    def supplier_label(self, purchase: Purchase) -> str:
        return self.suppliers.name_of(purchase.supplier_id)
