"""Purchases from suppliers: cart, recording, edit and delete."""

from .cart import PurchaseCart
from .service import PurchaseService

__all__ = ["PurchaseCart", "PurchaseService"]
