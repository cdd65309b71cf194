import pytest

from motorbuy.errors import EmptyCart, InvalidTransition, NotFound
from motorbuy.repositories import CartRepository, OrderRepository, ProductRepository, VendorRepository
from motorbuy.services import CartService, CheckoutService, CommissionService
from motorbuy.services.checkout import can_transition


@pytest.fixture
def cart(db):
    return CartService(CartRepository(db), ProductRepository(db))


@pytest.fixture
def checkout(db):
    return CheckoutService(
        OrderRepository(db),
        CartRepository(db),
        ProductRepository(db),
        CommissionService(VendorRepository(db)),
    )


def test_checkout_snapshots_cart_and_accrues(db, cart, checkout, market):
    user_id = market.customer["id"]
    cart.add_item(user_id, market.tire["id"], 2)
    cart.add_item(user_id, market.battery["id"], 1)

    order = checkout.get_order(checkout.checkout(user_id)["id"])

    assert order["status"] == "paid"
    assert order["total_fils"] == 2 * 45000 + 35000
    assert sorted((i["product_id"], i["price_fils"], i["quantity"]) for i in order["items"]) == sorted(
        [(market.tire["id"], 45000, 2), (market.battery["id"], 35000, 1)]
    )
    assert cart.get_cart(user_id) == []

    tires = db.row("vendors", market.tires["id"])
    assert tires["gross_sales_fils"] == 90000
    assert tires["pending_payout_fils"] == 85500
    parts = db.row("vendors", market.parts["id"])
    assert parts["gross_sales_fils"] == 35000
    assert parts["pending_payout_fils"] == 33000

    # Stock never goes below zero
    assert db.row("products", market.tire["id"])["stock"] == 8
    assert db.row("products", market.battery["id"])["stock"] == 0


def test_order_prices_do_not_follow_catalog_edits(db, cart, checkout, market):
    user_id = market.customer["id"]
    cart.add_item(user_id, market.tire["id"])
    order_id = checkout.checkout(user_id)["id"]

    ProductRepository(db).update(market.tire["id"], {"price_fils": 99000})

    order = checkout.get_order(order_id)
    assert order["total_fils"] == 45000
    assert order["items"][0]["price_fils"] == 45000


def test_empty_cart(db, checkout, market):
    with pytest.raises(EmptyCart) as excinfo:
        checkout.checkout(market.customer["id"])
    assert excinfo.value.message == "Cart is empty"
    assert db.tables["orders"] == []
    assert "place_order" not in db.rpc_calls


def test_cart_of_only_deleted_products_is_empty(db, cart, checkout, market):
    user_id = market.customer["id"]
    cart.add_item(user_id, market.battery["id"])
    ProductRepository(db).delete(market.battery["id"])

    with pytest.raises(EmptyCart):
        checkout.checkout(user_id)


def test_guest_checkout_reads_catalog_prices(db, checkout, market):
    order = checkout.checkout_guest(
        [
            {"product_id": market.brake_pads["id"], "quantity": 1},
            {"product_id": market.battery["id"], "quantity": 1},
        ],
        email="guest@example.com",
        name="Guest",
        phone="+96550000000",
    )

    assert order["user_id"] == "guest:guest@example.com"
    assert order["guest_email"] == "guest@example.com"
    assert order["total_fils"] == 315000
    parts = db.row("vendors", market.parts["id"])
    assert parts["gross_sales_fils"] == 315000
    assert parts["pending_payout_fils"] == 313000

    ledger = VendorRepository(db).ledger(market.parts["id"])
    assert [(e["kind"], e["commission_fils"], e["net_fils"]) for e in ledger] == [("accrual", 2000, 313000)]


def test_guest_checkout_unknown_product(db, checkout, market):
    with pytest.raises(NotFound):
        checkout.checkout_guest([{"product_id": "nope", "quantity": 1}], "g@example.com", "G", "1")
    assert db.tables["orders"] == []


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        ("pending", "paid", True),
        ("paid", "shipped", True),
        ("shipped", "delivered", True),
        ("paid", "cancelled", True),
        ("paid", "paid", True),
        ("paid", "delivered", False),
        ("delivered", "cancelled", False),
        ("cancelled", "paid", False),
        ("paid", "refunded", False),
    ],
)
def test_status_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_set_status(db, cart, checkout, market):
    cart.add_item(market.customer["id"], market.tire["id"])
    order_id = checkout.checkout(market.customer["id"])["id"]

    assert checkout.set_status(order_id, "shipped")["status"] == "shipped"
    with pytest.raises(InvalidTransition):
        checkout.set_status(order_id, "paid")

    # Cancelling keeps what was already accrued
    checkout.set_status(order_id, "cancelled")
    assert db.row("vendors", market.tires["id"])["pending_payout_fils"] == 42750


def test_checkout_endpoints(client, login, market):
    login(market.customer)
    empty = client.post("/api/orders")
    assert empty.status_code == 400
    assert empty.json() == {"message": "Cart is empty"}

    client.post("/api/cart", json={"productId": market.tire["id"], "quantity": 1})
    created = client.post("/api/orders")
    assert created.status_code == 201
    body = created.json()
    assert body["total"] == "45.000"
    assert body["status"] == "paid"
    assert body["items"][0]["price"] == "45.000"

    history = client.get("/api/orders").json()
    assert [o["id"] for o in history] == [body["id"]]

    login(market.parts_owner)
    assert client.get(f"/api/orders/{body['id']}").status_code == 403


def test_guest_checkout_endpoint(client, market):
    response = client.post(
        "/api/orders/guest",
        json={
            "items": [{"productId": market.tire["id"], "quantity": 2}],
            "guestEmail": "guest@example.com",
            "guestName": "Guest",
            "guestPhone": "+96550000000",
        },
    )
    assert response.status_code == 201
    assert response.json()["total"] == "90.000"
    assert response.json()["guestEmail"] == "guest@example.com"

    bad = client.post(
        "/api/orders/guest",
        json={"items": [], "guestEmail": "not-an-email", "guestName": "G", "guestPhone": "1"},
    )
    assert bad.status_code == 400


def test_repeat_orders_accumulate_vendor_balance(db, cart, checkout, market):
    user_id = market.customer["id"]
    cart.add_item(user_id, market.tire["id"], 1)
    checkout.checkout(user_id)
    cart.add_item(user_id, market.tire["id"], 2)
    checkout.checkout(user_id)

    tires = db.row("vendors", market.tires["id"])
    assert tires["gross_sales_fils"] == 45000 + 90000
    assert tires["pending_payout_fils"] == 42750 + 85500

    ledger = VendorRepository(db).ledger(market.tires["id"])
    assert sorted(e["net_fils"] for e in ledger) == [42750, 85500]
    assert {e["kind"] for e in ledger} == {"accrual"}
