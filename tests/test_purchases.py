import pytest

from stockpilot.constants import COL_PRODUCTS, COL_PURCHASES, PAYMENT_PIX
from stockpilot.errors import EmptyCart, InsufficientStock, RecordNotFound, ValidationError
from stockpilot.modules.cashflow import CashFlowProjector
from stockpilot.modules.purchase import PurchaseService
from stockpilot.modules.purchase.cart import looks_like_barcode


def _cart(service, supplier, lines):
    cart = service.new_cart()
    cart.supplier_id = supplier.id
    cart.payment_method = PAYMENT_PIX
    for product, quantity, unit_price in lines:
        cart.add_product(product)
        cart.update_line(product.id, quantity=quantity, unit_price=unit_price)
    return cart


def test_looks_like_barcode():
    assert looks_like_barcode("78912345")
    assert not looks_like_barcode("7891234")
    assert not looks_like_barcode("ABC12345678")


def test_cart_defaults_to_cost_price_and_snapshots_name(store, products):
    cart = PurchaseService(store).new_cart()
    line = cart.add_product(products["widget"])
    assert (line.product_name, line.unit_price, line.quantity) == ("Widget", 6.0, 1)
    cart.add_product(products["widget"])
    assert cart.items[0].quantity == 2


def test_cart_line_validation(store, products):
    cart = PurchaseService(store).new_cart()
    cart.add_product(products["widget"])
    with pytest.raises(ValidationError):
        cart.update_line(products["widget"].id, quantity=0)
    with pytest.raises(ValidationError):
        cart.update_line(products["widget"].id, unit_price=-1)
    with pytest.raises(ValidationError):
        cart.set_shipping(-3)


def test_purchase_example_and_delete(store, products, supplier, stock):
    service = PurchaseService(store)
    g = products["gadget"]
    cart = _cart(service, supplier, [(g, 5, 2.0)])
    cart.set_shipping(3)
    cart.set_discount(1)

    purchase = service.record(cart, when="2024-05-10T10:00:00")

    assert (purchase.subtotal, purchase.total) == (10.0, 12.0)
    assert stock(g.id) == 7
    feed = CashFlowProjector(store).transactions()
    assert [(t.id, t.amount) for t in feed] == [(f"purchase-{purchase.id}", -12.0)]
    assert feed[0].description == "Purchase from Acme Distribuidora"

    service.delete(purchase.id)

    assert stock(g.id) == 2
    assert store.get(COL_PURCHASES) == []
    assert CashFlowProjector(store).transactions() == []


def test_record_then_delete_in_any_order_restores_stock(store, products, supplier, stock):
    service = PurchaseService(store)
    w, g = products["widget"], products["gadget"]
    p1 = service.record(_cart(service, supplier, [(w, 3, 6.0), (g, 1, 15.0)]))
    p2 = service.record(_cart(service, supplier, [(w, 2, 6.0)]))
    p3 = service.record(_cart(service, supplier, [(g, 4, 15.0)]))
    assert (stock(w.id), stock(g.id)) == (10, 7)

    for pid in (p2.id, p3.id, p1.id):
        service.delete(pid)
    assert (stock(w.id), stock(g.id)) == (5, 2)


@pytest.mark.parametrize(
    "mutate, exc",
    [
        (lambda c: c.clear(), EmptyCart),
        (lambda c: setattr(c, "supplier_id", None), ValidationError),
        (lambda c: setattr(c, "supplier_id", "ghost"), RecordNotFound),
        (lambda c: setattr(c, "payment_method", " "), ValidationError),
        (lambda c: c.set_discount(50), ValidationError),
        (lambda c: setattr(c, "discount", -1), ValidationError),
    ],
)
def test_invalid_purchase_writes_nothing(store, products, supplier, stock, mutate, exc):
    service = PurchaseService(store)
    cart = _cart(service, supplier, [(products["widget"], 2, 6.0)])
    mutate(cart)
    with pytest.raises(exc):
        service.record(cart)
    assert store.get(COL_PURCHASES) == []
    assert stock(products["widget"].id) == 5


def test_edit_applies_the_net_difference(store, products, supplier, stock):
    service = PurchaseService(store)
    w, g = products["widget"], products["gadget"]
    original = service.record(_cart(service, supplier, [(w, 5, 6.0)]), when="2024-04-01T08:00:00")
    assert stock(w.id) == 10

    cart = service.cart_for(original.id)
    cart.update_line(w.id, quantity=2)
    cart.add_product(g)
    cart.update_line(g.id, quantity=3)
    edited = service.edit(original.id, cart)

    assert (edited.id, edited.date) == (original.id, "2024-04-01T08:00:00")
    assert (stock(w.id), stock(g.id)) == (7, 5)
    assert len(store.get(COL_PURCHASES)) == 1
    assert edited.total == 2 * 6.0 + 3 * 15.0


def test_edit_that_would_drive_stock_negative_is_refused(store, products, supplier, stock):
    service = PurchaseService(store)
    w = products["widget"]
    original = service.record(_cart(service, supplier, [(w, 5, 6.0)]))

    # 8 of the 10 units are sold afterwards
    rows = store.get(COL_PRODUCTS)
    for r in rows:
        if r["id"] == w.id:
            r["quantity"] = 2
    store.set(COL_PRODUCTS, rows)

    cart = service.cart_for(original.id)
    cart.update_line(w.id, quantity=1)
    with pytest.raises(InsufficientStock):
        service.edit(original.id, cart)
    assert stock(w.id) == 2
    assert service.purchases.require(original.id).items[0].quantity == 5

    service.edit(original.id, cart, allow_negative=True)
    assert stock(w.id) == -2


def test_delete_keeps_stock_when_refused(store, products, supplier, stock):
    service = PurchaseService(store)
    g = products["gadget"]
    purchase = service.record(_cart(service, supplier, [(g, 1, 15.0)]))
    rows = store.get(COL_PRODUCTS)
    for r in rows:
        if r["id"] == g.id:
            r["quantity"] = 0
    store.set(COL_PRODUCTS, rows)

    with pytest.raises(InsufficientStock):
        service.delete(purchase.id)
    assert stock(g.id) == 0
    assert len(store.get(COL_PURCHASES)) == 1


def test_delete_unknown_purchase(store):
    with pytest.raises(RecordNotFound):
        PurchaseService(store).delete("ghost")


def test_adhoc_product_from_barcode_search(store, supplier, stock):
    service = PurchaseService(store)
    cart = service.new_cart()
    cart.supplier_id = supplier.id

    product = service.create_adhoc_product(
        cart, "78900001111", name="Coffee 500g", selling_price=18.0, cost_price=11.0
    )

    assert (product.barcode, product.quantity, product.supplier_id) == ("78900001111", 0, supplier.id)
    assert [(it.product_id, it.unit_price) for it in cart.items] == [(product.id, 11.0)]

    cart.payment_method = PAYMENT_PIX
    service.record(cart)
    assert stock(product.id) == 1


def test_adhoc_product_from_name_search(store, supplier):
    service = PurchaseService(store)
    cart = service.new_cart()
    product = service.create_adhoc_product(cart, "Sugar 1kg", selling_price=6.0)
    assert (product.name, product.barcode) == ("Sugar 1kg", None)


def test_history_is_newest_first(store, products, supplier):
    service = PurchaseService(store)
    old = service.record(_cart(service, supplier, [(products["widget"], 1, 6.0)]), when="2024-01-01T10:00:00")
    new = service.record(_cart(service, supplier, [(products["widget"], 1, 6.0)]), when="2024-02-01T10:00:00")
    assert [p.id for p in service.history()] == [new.id, old.id]
    assert service.supplier_label(new) == "Acme Distribuidora"
