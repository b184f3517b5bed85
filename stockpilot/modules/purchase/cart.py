from __future__ import annotations

import re
from typing import List, Optional

from ...database.repositories.products_repo import Product, ProductsRepo
from ...database.repositories.purchases_repo import Purchase, PurchaseItem
from ...utils.helpers import money
from ...utils.validators import require_non_negative, require_quantity

_BARCODE_RX = re.compile(r"^\d{8,}$")


def looks_like_barcode(text: str) -> bool:
    return bool(_BARCODE_RX.match((text or "").strip()))


class PurchaseCart:
    """
    In-progress purchase. No stock limits apply; lines default to the
    product's cost price and snapshot its current name.
    """

    def __init__(self, products: ProductsRepo):
        self.products = products
        self.items: List[PurchaseItem] = []
        self.supplier_id: Optional[str] = None
        self.payment_method: str = ""
        self.discount: float = 0.0
        self.shipping: float = 0.0

    @classmethod
    def from_purchase(cls, products: ProductsRepo, purchase: Purchase) -> "PurchaseCart":
        """Pre-filled cart for editing an existing purchase."""
        cart = cls(products)
        cart.items = [
            PurchaseItem(it.product_id, it.product_name, it.quantity, it.unit_price)
            for it in purchase.items
        ]
        cart.supplier_id = purchase.supplier_id
        cart.payment_method = purchase.payment_method
        cart.discount = purchase.discount
        cart.shipping = purchase.shipping
        return cart

    def _line(self, product_id: str) -> Optional[PurchaseItem]:
        for it in self.items:
            if it.product_id == product_id:
                return it
        return None

    def add_product(self, product: Product, unit_price: float | None = None) -> PurchaseItem:
        line = self._line(product.id)
        if line is not None:
            line.quantity += 1
            return line
        price = product.cost_price if unit_price is None else unit_price
        line = PurchaseItem(
            product_id=product.id,
            product_name=product.name,
            quantity=1,
            unit_price=float(price or 0.0),
        )
        self.items.append(line)
        return line

    def add_by_code(self, code: str) -> bool:
        product = self.products.find_by_code(code)
        if product is None:
            return False
        self.add_product(product)
        return True

    def update_line(self, product_id: str, *, quantity=None, unit_price=None) -> None:
        line = self._line(product_id)
        if line is None:
            return
        if quantity is not None:
            line.quantity = require_quantity(quantity)
        if unit_price is not None:
            line.unit_price = require_non_negative(unit_price, "unit_price", "Unit price")

    def remove(self, product_id: str) -> None:
        self.items = [it for it in self.items if it.product_id != product_id]

    def clear(self) -> None:
        self.items = []
        self.supplier_id = None
        self.payment_method = ""
        self.discount = 0.0
        self.shipping = 0.0

    def set_discount(self, value) -> None:
        self.discount = require_non_negative(value or 0.0, "discount", "Discount")

    def set_shipping(self, value) -> None:
        self.shipping = require_non_negative(value or 0.0, "shipping", "Shipping")

    @property
    def is_empty(self) -> bool:
        return not self.items

    def subtotal(self) -> float:
        return money(sum(it.quantity * it.unit_price for it in self.items))

    def total(self) -> float:
        return money(self.subtotal() - self.discount + self.shipping)
