# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from stockpilot.database.repositories import (
        ProductsRepo, Product,
        ClientsRepo, Client,
        SuppliersRepo, Supplier,
        BrandsRepo, Brand,
        SalesRepo, Sale, SaleItem,
        PurchasesRepo, Purchase, PurchaseItem,
        ReceivablesRepo, AccountReceivable,
        CashAdjustmentsRepo, CashAdjustment,
        SettingsRepo, AppSettings,
    )
"""

# ---------------- Catalog ------------------
from .products_repo import ProductsRepo, Product
from .brands_repo import BrandsRepo, Brand

# ---------------- Parties ------------------
from .clients_repo import ClientsRepo, Client
from .suppliers_repo import SuppliersRepo, Supplier

# ------------- Transactions ----------------
from .sales_repo import SalesRepo, Sale, SaleItem
from .purchases_repo import PurchasesRepo, Purchase, PurchaseItem
from .receivables_repo import ReceivablesRepo, AccountReceivable
from .cash_adjustments_repo import CashAdjustmentsRepo, CashAdjustment

# ---------------- Settings -----------------
from .settings_repo import SettingsRepo, AppSettings

__all__ = [
    "ProductsRepo",
    "Product",
    "BrandsRepo",
    "Brand",
    "ClientsRepo",
    "Client",
    "SuppliersRepo",
    "Supplier",
    "SalesRepo",
    "Sale",
    "SaleItem",
    "PurchasesRepo",
    "Purchase",
    "PurchaseItem",
    "ReceivablesRepo",
    "AccountReceivable",
    "CashAdjustmentsRepo",
    "CashAdjustment",
    "SettingsRepo",
    "AppSettings",
]
