from datetime import datetime, timedelta

import pytest

from stockpilot.constants import (
    COL_PRODUCTS,
    COL_RECEIVABLES,
    COL_SALES,
    PAYMENT_CASH,
    PAYMENT_CREDIT_TERM,
    PAYMENT_PIX,
    RECEIVABLE_PENDING,
)
from stockpilot.database.repositories import ProductsRepo, ReceivablesRepo
from stockpilot.errors import (
    EmptyCart,
    InsufficientStock,
    MissingClientForCredit,
    ReceivableAlreadyPaid,
    RecordNotFound,
    ValidationError,
)
from stockpilot.modules.receivables import ReceivablesService
from stockpilot.modules.sales import SalesService
from stockpilot.utils.helpers import parse_dt


# ---------------- Cart ----------------

def test_cart_caps_quantity_at_stock(store, products):
    cart = SalesService(store).new_cart()
    g = products["gadget"]
    assert cart.add_product(g) is None
    assert cart.add_product(g) is None
    warning = cart.add_product(g)
    assert warning is not None and warning.product_id == g.id
    assert cart.items[0].quantity == 2
    assert cart.warnings == [warning]


def test_cart_refuses_out_of_stock_product(store, products):
    cart = SalesService(store).new_cart()
    assert cart.add_product(products["empty"]) is not None
    assert cart.is_empty


def test_cart_add_by_code(store, products):
    cart = SalesService(store).new_cart()
    assert cart.add_by_code("7891234567890") is True
    assert cart.add_by_code("0000") is False
    assert [(it.product_id, it.quantity) for it in cart.items] == [(products["widget"].id, 1)]


def test_cart_add_by_code_at_stock_limit(store, products):
    cart = SalesService(store).new_cart()
    w = products["widget"]
    cart.add_product(w)
    cart.set_quantity(w.id, 5)
    assert cart.add_by_code("7891234567890") is False
    assert cart.items[0].quantity == 5
    assert [x.product_id for x in cart.warnings] == [w.id]


def test_cart_set_quantity_and_totals(store, products):
    cart = SalesService(store).new_cart()
    w = products["widget"]
    cart.add_product(w)
    cart.add_product(products["gadget"])
    cart.set_quantity(w.id, 3)
    assert cart.set_quantity(w.id, 99) is not None
    assert cart.items[0].quantity == 3
    cart.set_discount(5.5)
    assert cart.subtotal() == 55.5
    assert cart.total() == 50.0

    cart.remove(w.id)
    assert [it.product_id for it in cart.items] == [products["gadget"].id]


def test_cart_rejects_unknown_payment_method(store):
    cart = SalesService(store).new_cart()
    with pytest.raises(ValidationError):
        cart.set_payment_method("cheque")
    cart.set_payment_method(PAYMENT_PIX)
    assert cart.payment_method == PAYMENT_PIX


# ---------------- Commit ----------------

def test_cash_sale_example(store, products, stock):
    service = SalesService(store)
    cart = service.new_cart()
    w = products["widget"]
    cart.add_product(w)
    cart.set_quantity(w.id, 2)
    cart.set_payment_method(PAYMENT_CASH)

    sale = service.commit(cart, when="2024-05-10T14:30:00")

    assert sale.total == 20.0
    assert stock(w.id) == 3
    assert store.get(COL_SALES)[0]["id"] == sale.id
    assert store.get(COL_RECEIVABLES) == []
    assert cart.is_empty


def test_editing_a_stale_product_keeps_ledger_stock(store, products, stock):
    repo = ProductsRepo(store)
    loaded = repo.require(products["widget"].id)
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(loaded)
    cart.set_quantity(loaded.id, 2)
    service.commit(cart)
    assert stock(loaded.id) == 3

    loaded.name = "Widget XL"
    loaded.quantity = 99
    saved = repo.update(loaded)

    assert saved.quantity == 3
    assert stock(loaded.id) == 3
    assert repo.require(loaded.id).name == "Widget XL"


def test_credit_sale_creates_one_pending_receivable(store, products, client):
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["gadget"])
    cart.set_payment_method(PAYMENT_CREDIT_TERM)
    cart.select_client(client.id)

    sale = service.commit(cart, when="2024-05-10T09:00:00")

    recs = ReceivablesRepo(store).list_all()
    assert len(recs) == 1
    r = recs[0]
    assert (r.sale_id, r.client_id, r.amount, r.status) == (sale.id, client.id, 25.5, RECEIVABLE_PENDING)
    assert parse_dt(r.due_date) == datetime(2024, 5, 10, 9, 0) + timedelta(days=30)


def test_credit_sale_requires_client(store, products, stock):
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["widget"])
    cart.set_payment_method(PAYMENT_CREDIT_TERM)
    with pytest.raises(MissingClientForCredit):
        service.commit(cart)
    assert not cart.is_empty
    assert stock(products["widget"].id) == 5
    assert store.get(COL_SALES) == []


def test_empty_cart_is_rejected(store):
    service = SalesService(store)
    with pytest.raises(EmptyCart):
        service.commit(service.new_cart())


def test_unknown_client_is_rejected(store, products):
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["widget"])
    cart.select_client("ghost")
    with pytest.raises(RecordNotFound):
        service.commit(cart)


def test_discount_cannot_exceed_subtotal(store, products):
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["widget"])
    cart.set_discount(11)
    with pytest.raises(ValidationError):
        service.commit(cart)


def test_negative_discount_is_rejected(store, products, stock):
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["widget"])
    cart.discount = -5
    with pytest.raises(ValidationError):
        service.commit(cart)
    assert stock(products["widget"].id) == 5
    assert store.get(COL_SALES) == []


def test_stock_shortage_leaves_everything_unchanged(store, products):
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["widget"])
    cart.add_product(products["gadget"])

    # Another view sells the gadgets before this cart is committed
    rows = store.get(COL_PRODUCTS)
    for r in rows:
        if r["id"] == products["gadget"].id:
            r["quantity"] = 0
    store.set(COL_PRODUCTS, rows)
    before = store.get(COL_PRODUCTS)

    with pytest.raises(InsufficientStock):
        service.commit(cart)
    assert store.get(COL_PRODUCTS) == before
    assert store.get(COL_SALES) == []
    assert len(cart.items) == 2


def test_commit_notifies_after_the_whole_unit_of_work(store, products, client):
    seen = []
    store.subscribe(lambda name, value: seen.append(name))
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["widget"])
    cart.set_payment_method(PAYMENT_CREDIT_TERM)
    cart.select_client(client.id)
    service.commit(cart)
    assert sorted(seen) == sorted([COL_PRODUCTS, COL_SALES, COL_RECEIVABLES])


# ---------------- Delete / history ----------------

def _credit_sale(store, products, client):
    service = SalesService(store)
    cart = service.new_cart()
    cart.add_product(products["widget"])
    cart.set_payment_method(PAYMENT_CREDIT_TERM)
    cart.select_client(client.id)
    return service, service.commit(cart)


def test_delete_sale_restores_stock_and_drops_pending_receivable(store, products, client, stock):
    service, sale = _credit_sale(store, products, client)
    assert stock(products["widget"].id) == 4

    service.delete_sale(sale.id)

    assert stock(products["widget"].id) == 5
    assert store.get(COL_SALES) == []
    assert store.get(COL_RECEIVABLES) == []


def test_delete_sale_with_paid_receivable_is_refused(store, products, client, stock):
    service, sale = _credit_sale(store, products, client)
    rec = ReceivablesRepo(store).for_sale(sale.id)[0]
    ReceivablesService(store).mark_paid(rec.id)

    with pytest.raises(ReceivableAlreadyPaid):
        service.delete_sale(sale.id)
    assert stock(products["widget"].id) == 4
    assert len(store.get(COL_SALES)) == 1


def test_history_search_and_labels(store, products, client):
    service, credit = _credit_sale(store, products, client)
    cart = service.new_cart()
    cart.add_product(products["gadget"])
    counter = service.commit(cart)

    assert service.client_label(counter) == "Counter sale"
    assert service.client_label(credit) == "Maria Silva"
    assert [s.id for s in service.history("maria")] == [credit.id]
    assert {s.id for s in service.history()} == {credit.id, counter.id}
