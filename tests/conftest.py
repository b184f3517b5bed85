# stockpilot/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Every test gets its own SQLite file under tmp_path
# - Catalog/party fixtures seed through the repositories (validation included)
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import tempfile

# Headless Qt; keep the backup/restore JSON log out of the project tree
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("STOCKPILOT_LOG_DIR", tempfile.mkdtemp(prefix="stockpilot-logs-"))

import pytest  # noqa: E402

from stockpilot.database import open_store  # noqa: E402
from stockpilot.database.repositories import ClientsRepo, ProductsRepo, SuppliersRepo  # noqa: E402


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "stockpilot.db"


@pytest.fixture()
def store(qapp, db_path):
    s = open_store(db_path)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def products(store):
    """Two stocked products plus one out of stock."""
    repo = ProductsRepo(store)
    return {
        "widget": repo.create("Widget", 10.0, 6.0, 5, barcode="7891234567890"),
        "gadget": repo.create("Gadget", 25.5, 15.0, 2),
        "empty": repo.create("Empty Box", 3.0, 1.0, 0),
    }


@pytest.fixture()
def client(store):
    return ClientsRepo(store).create(
        "Maria Silva", "11999990000", "maria@example.com", "12345678901", "Rua A, 100"
    )


@pytest.fixture()
def supplier(store):
    return SuppliersRepo(store).create("Acme Distribuidora", phone="1133334444")


@pytest.fixture()
def stock(store):
    """stock(product_id) -> current persisted quantity (None if deleted)."""
    repo = ProductsRepo(store)

    def _qty(product_id: str):
        p = repo.get(product_id)
        return None if p is None else p.quantity

    return _qty
