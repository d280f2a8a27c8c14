"""Checkout flow tests: login redirect, step guards, validation and order placement."""

import pytest
from bookstore.repositories import orders as orders_repo
from helpers import ADDRESS, USER_HEADERS, add_book


def _get(client, path, headers=USER_HEADERS):
    return client.get(path, headers=headers, follow_redirects=False)


def _post(client, path, body=None, headers=USER_HEADERS):
    return client.post(path, json=body, headers=headers, follow_redirects=False)


@pytest.fixture()
def filled_cart(client, db):
    """Two lines worth 128.00: 2 x 49 + 1 x 30."""
    mockingbird = add_book(db, "To Kill a Mockingbird", price=49, count_in_stock=15)
    alchemist = add_book(db, "The Alchemist", price=30, count_in_stock=15)
    client.post("/cart/items", json={"product_id": mockingbird, "quantity": 2})
    client.post("/cart/items", json={"product_id": alchemist, "quantity": 1})
    return client


def _ready_to_place(client):
    _post(client, "/checkout/shipping", ADDRESS)
    _post(client, "/checkout/payment", {"payment_method": "PayPal"})


class TestLoginRedirect:
    @pytest.mark.parametrize("step", ["shipping", "payment", "placeorder"])
    def test_get_without_identity(self, client, step):
        r = _get(client, f"/checkout/{step}", headers=None)
        assert r.status_code == 303
        assert r.headers["location"] == f"/login?redirect=/checkout/{step}"

    def test_post_without_identity(self, client):
        r = _post(client, "/checkout/shipping", ADDRESS, headers=None)
        assert r.status_code == 303
        assert r.headers["location"] == "/login?redirect=/checkout/shipping"
        assert client.get("/cart").json()["shipping_address"]["address"] is None


class TestShippingStep:
    def test_get_shows_progress_and_back(self, client):
        r = _get(client, "/checkout/shipping")
        assert r.status_code == 200
        data = r.json()
        assert data["step"] == "shipping"
        assert data["progress"] == 1
        assert data["steps"] == ["User Login", "Shipping Address", "Payment Method", "Place Order"]
        assert data["back"] == "/cart"

    def test_save_redirects_to_payment(self, client):
        r = _post(client, "/checkout/shipping", ADDRESS)
        assert r.status_code == 303
        assert r.headers["location"] == "/checkout/payment"
        assert "cart=" in r.headers["set-cookie"]
        assert client.get("/cart").json()["shipping_address"] == ADDRESS

    def test_saved_address_prefills(self, client):
        _post(client, "/checkout/shipping", ADDRESS)
        assert _get(client, "/checkout/shipping").json()["shipping_address"] == ADDRESS

    def test_missing_fields(self, client):
        r = _post(client, "/checkout/shipping", {"full_name": "Jean Finch"})
        assert r.status_code == 422
        assert r.json()["detail"] == {
            "address": "Please enter address",
            "city": "Please enter city",
            "postal_code": "Please enter postal code",
            "country": "Please enter country",
        }

    def test_short_address(self, client):
        r = _post(client, "/checkout/shipping", {**ADDRESS, "address": "ab"})
        assert r.status_code == 422
        assert r.json()["detail"] == {"address": "Address is more than 2 chars"}


class TestPaymentStep:
    def test_requires_shipping_address(self, client):
        r = _get(client, "/checkout/payment")
        assert r.status_code == 303
        assert r.headers["location"] == "/checkout/shipping"

    def test_get_lists_methods(self, client):
        _post(client, "/checkout/shipping", ADDRESS)
        r = _get(client, "/checkout/payment")
        assert r.status_code == 200
        data = r.json()
        assert data["progress"] == 2
        assert data["back"] == "/checkout/shipping"
        assert data["payment_methods"] == ["PayPal", "Stripe", "CashOnDelivery"]
        assert data["payment_method"] == ""

    def test_save_redirects_to_place_order(self, client):
        _post(client, "/checkout/shipping", ADDRESS)
        r = _post(client, "/checkout/payment", {"payment_method": "Stripe"})
        assert r.status_code == 303
        assert r.headers["location"] == "/checkout/placeorder"
        assert client.get("/cart").json()["payment_method"] == "Stripe"

    def test_method_required(self, client):
        r = _post(client, "/checkout/payment", {})
        assert r.status_code == 422
        assert r.json()["detail"] == {"payment_method": "Payment method is required"}

    def test_going_back_keeps_values(self, client):
        _ready_to_place(client)
        assert _get(client, "/checkout/payment").json()["payment_method"] == "PayPal"
        assert _get(client, "/checkout/shipping").json()["shipping_address"] == ADDRESS


class TestPlaceOrderStep:
    def test_requires_payment_method(self, client):
        _post(client, "/checkout/shipping", ADDRESS)
        r = _get(client, "/checkout/placeorder")
        assert r.status_code == 303
        assert r.headers["location"] == "/checkout/payment"

    def test_summary(self, filled_cart):
        _ready_to_place(filled_cart)
        r = _get(filled_cart, "/checkout/placeorder")
        assert r.status_code == 200
        data = r.json()
        assert data["progress"] == 3
        assert data["back"] == "/checkout/payment"
        assert data["can_place_order"] is True
        assert data["payment_method"] == "PayPal"
        assert data["totals"] == {
            "items_price": 128.0,
            "tax_price": 19.2,
            "shipping_price": 15.0,
            "total_price": 162.2,
        }

    def test_empty_cart_notice(self, client):
        _ready_to_place(client)
        data = _get(client, "/checkout/placeorder").json()
        assert data["notice"] == "Cart is empty"
        assert data["can_place_order"] is False

    def test_empty_cart_cannot_be_submitted(self, client, db):
        _ready_to_place(client)
        r = _post(client, "/checkout/placeorder")
        assert r.status_code == 422
        assert db.collection("orders").get() == []

    def test_place_order(self, filled_cart, db):
        _ready_to_place(filled_cart)
        r = _post(filled_cart, "/checkout/placeorder")
        assert r.status_code == 303
        location = r.headers["location"]
        assert location.startswith("/orders/")

        order = filled_cart.get(location, headers=USER_HEADERS).json()
        assert order["user_id"] == "reader-1"
        assert order["payment_method"] == "PayPal"
        assert order["shipping_address"] == ADDRESS
        assert [it["slug"] for it in order["order_items"]] == ["to-kill-a-mockingbird", "the-alchemist"]
        assert order["total_price"] == 162.2
        assert order["is_paid"] is False

        cart = filled_cart.get("/cart").json()
        assert cart["cart_items"] == []
        assert cart["shipping_address"] == ADDRESS
        assert cart["payment_method"] == "PayPal"

    def test_order_uses_catalog_prices(self, filled_cart, db):
        _ready_to_place(filled_cart)
        for snap in db.collection("products").stream():
            if snap.to_dict()["slug"] == "to-kill-a-mockingbird":
                snap.reference.update({"price": 1})

        summary = _get(filled_cart, "/checkout/placeorder").json()
        assert summary["totals"]["items_price"] == 32.0

        location = _post(filled_cart, "/checkout/placeorder").headers["location"]
        order = filled_cart.get(location, headers=USER_HEADERS).json()
        assert [it["price"] for it in order["order_items"]] == [1.0, 30.0]
        # 2 x 1 + 30 = 32; tax 4.80; shipping 15
        assert order["total_price"] == 51.8

    def test_book_removed_from_catalog(self, filled_cart, db):
        _ready_to_place(filled_cart)
        for snap in db.collection("products").stream():
            if snap.to_dict()["slug"] == "the-alchemist":
                snap.reference.delete()

        r = _post(filled_cart, "/checkout/placeorder")
        assert r.status_code == 422
        assert r.json()["detail"] == {"cart_items": "The Alchemist is no longer available"}
        assert len(filled_cart.get("/cart").json()["cart_items"]) == 2
        assert db.collection("orders").get() == []

    def test_failed_submission_keeps_cart(self, filled_cart, monkeypatch):
        _ready_to_place(filled_cart)

        def boom(db, uid, payload):
            raise RuntimeError("Firestore unavailable")

        monkeypatch.setattr(orders_repo, "create", boom)
        r = _post(filled_cart, "/checkout/placeorder")
        assert r.status_code == 502
        assert r.json()["detail"] == "Firestore unavailable"
        assert len(filled_cart.get("/cart").json()["cart_items"]) == 2
