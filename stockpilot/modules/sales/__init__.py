"""Point-of-sale: cart building and sale recording."""

from .cart import SaleCart, CartWarning
from .service import SalesService

__all__ = ["SaleCart", "CartWarning", "SalesService"]
