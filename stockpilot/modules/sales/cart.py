from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ...constants import PAYMENT_CASH, PAYMENT_METHODS
from ...database.repositories.products_repo import Product, ProductsRepo
from ...database.repositories.sales_repo import SaleItem
from ...errors import ValidationError
from ...utils.helpers import money
from ...utils.validators import require_non_negative


@dataclass
class CartWarning:
    """Non-fatal notice for the UI (e.g. cart already holds all available stock)."""
    product_id: str
    message: str


class SaleCart:
    """
    In-progress sale ("Building" state).

    Lines snapshot the product's selling price when first added. Quantities are
    capped by current stock; attempts beyond it are ignored and reported as a
    CartWarning instead of raising.
    """

    def __init__(self, products: ProductsRepo):
        self.products = products
        self.items: List[SaleItem] = []
        self.discount: float = 0.0
        self.payment_method: str = PAYMENT_CASH
        self.client_id: Optional[str] = None
        self.warnings: List[CartWarning] = []

    # ---- lines ----

    def _line(self, product_id: str) -> Optional[SaleItem]:
        for it in self.items:
            if it.product_id == product_id:
                return it
        return None

    def _warn(self, product_id: str, message: str) -> CartWarning:
        w = CartWarning(product_id, message)
        self.warnings.append(w)
        return w

    def add_product(self, product: Product) -> Optional[CartWarning]:
        existing = self._line(product.id)
        if existing is not None:
            if existing.quantity < product.quantity:
                existing.quantity += 1
                return None
            return self._warn(
                product.id,
                f"The cart already holds all {product.quantity} units of {product.name} in stock.",
            )
        if product.quantity <= 0:
            return self._warn(product.id, f"{product.name} is out of stock.")
        self.items.append(SaleItem(product_id=product.id, quantity=1, unit_price=product.selling_price))
        return None

    def add_by_code(self, code: str) -> bool:
        """
        Scanner path: exact barcode lookup. Returns True when one unit was
        added. False means no in-stock match, or the line already holds all
        the stock (a CartWarning is recorded in that case).
        """
        product = self.products.find_by_code(code)
        if product is None or product.quantity <= 0:
            return False
        return self.add_product(product) is None

    def set_quantity(self, product_id: str, quantity: int) -> Optional[CartWarning]:
        line = self._line(product_id)
        product = self.products.get(product_id)
        if line is None or product is None:
            return None
        if 0 < quantity <= product.quantity:
            line.quantity = int(quantity)
        elif quantity > product.quantity:
            return self._warn(
                product_id, f"Only {product.quantity} units of {product.name} available."
            )
        return None

    def remove(self, product_id: str) -> None:
        self.items = [it for it in self.items if it.product_id != product_id]

    def clear(self) -> None:
        self.items = []
        self.discount = 0.0
        self.payment_method = PAYMENT_CASH
        self.client_id = None
        self.warnings = []

    # ---- header ----

    def set_discount(self, value: float) -> None:
        self.discount = require_non_negative(value, "discount", "Discount")

    def set_payment_method(self, method: str) -> None:
        if method not in PAYMENT_METHODS:
            raise ValidationError("payment_method", f"Unknown payment method: {method!r}")
        self.payment_method = method

    def select_client(self, client_id: Optional[str]) -> None:
        self.client_id = client_id or None

    # ---- totals ----

    @property
    def is_empty(self) -> bool:
        return not self.items

    def subtotal(self) -> float:
        return money(sum(it.quantity * it.unit_price for it in self.items))

    def total(self) -> float:
        return money(self.subtotal() - self.discount)
