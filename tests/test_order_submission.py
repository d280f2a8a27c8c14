"""Tests for order request packaging, submission and cart cookie encoding."""

import logging
from types import SimpleNamespace

import pytest
from bookstore.config import get_settings
from bookstore.core.cart_cookie import MAX_COOKIE_BYTES, CookieCartStorage, decode_cart, encode_cart
from bookstore.core.errors import CheckoutValidationError, SubmissionFailure
from bookstore.schemas.cart import Cart, CartLineItem, ShippingAddress
from bookstore.services.cart_store import CartStore
from bookstore.services.order_submission import build_order_request, submit_order
from fastapi import Response


class MemoryStorage:
    def __init__(self, cart=None):
        self.saved = cart

    def load(self):
        return self.saved

    def save(self, cart):
        self.saved = cart


def _full_cart():
    return Cart(
        cart_items=[
            CartLineItem(slug="mockingbird", product_id="p1", name="To Kill a Mockingbird", price=49, quantity=2,
                         stock_quantity=15, image="/images/m.webp"),
            CartLineItem(slug="alchemist", product_id="p2", name="The Alchemist", price=30, quantity=1),
        ],
        shipping_address=ShippingAddress(full_name="Jean Finch", address="12 Maycomb Road", city="Monroeville",
                                         postal_code="36460", country="USA"),
        payment_method="PayPal",
    )


class TestBuildOrderRequest:
    def test_packages_items_and_totals(self):
        request = build_order_request(_full_cart())
        assert [it.slug for it in request.order_items] == ["mockingbird", "alchemist"]
        assert request.payment_method == "PayPal"
        assert request.shipping_address.city == "Monroeville"
        assert (request.items_price, request.shipping_price, request.tax_price, request.total_price) == (
            128.0, 15.0, 19.2, 162.2,
        )

    def test_empty_cart_is_rejected(self):
        with pytest.raises(CheckoutValidationError):
            build_order_request(Cart(payment_method="PayPal"))

    def test_prices_come_from_the_catalog(self):
        catalog = {
            "p1": SimpleNamespace(name="To Kill a Mockingbird (Anniversary)", price=60),
            "p2": SimpleNamespace(name="The Alchemist", price=30),
        }
        request = build_order_request(_full_cart(), catalog.get)
        assert [(it.name, it.price) for it in request.order_items] == [
            ("To Kill a Mockingbird (Anniversary)", 60), ("The Alchemist", 30),
        ]
        # 2 x 60 + 30 = 150; tax 22.50; shipping 15
        assert (request.items_price, request.tax_price, request.total_price) == (150.0, 22.5, 187.5)

    def test_book_missing_from_catalog(self):
        with pytest.raises(CheckoutValidationError) as exc:
            build_order_request(_full_cart(), {"p1": SimpleNamespace(name="x", price=1)}.get)
        assert exc.value.errors == {"cart_items": "The Alchemist is no longer available"}


class TestSubmitOrder:
    def test_success_clears_items_only(self):
        storage = MemoryStorage(_full_cart())
        store = CartStore(storage)
        sent = []

        order_id = submit_order(store, lambda req: sent.append(req) or "order-1")

        assert order_id == "order-1"
        assert len(sent) == 1
        assert storage.saved.cart_items == []
        assert storage.saved.payment_method == "PayPal"
        assert storage.saved.shipping_address.address == "12 Maycomb Road"

    def test_failure_leaves_cart_untouched(self):
        cart = _full_cart()
        storage = MemoryStorage(cart)
        store = CartStore(storage)

        def boom(_):
            raise RuntimeError("Firestore unavailable")

        with pytest.raises(SubmissionFailure, match="Firestore unavailable"):
            submit_order(store, boom)
        assert store.cart == cart
        assert storage.saved == cart

    def test_submission_failure_passes_through(self):
        store = CartStore(MemoryStorage(_full_cart()))

        def refuse(_):
            raise SubmissionFailure("Order rejected")

        with pytest.raises(SubmissionFailure, match="Order rejected"):
            submit_order(store, refuse)


class TestCartCookieEncoding:
    def test_round_trip(self):
        cart = _full_cart()
        assert decode_cart(encode_cart(cart)) == cart

    def test_round_trip_empty(self):
        assert decode_cart(encode_cart(Cart())) == Cart()

    def test_encoded_value_is_cookie_safe(self):
        raw = encode_cart(_full_cart())
        assert not any(ch in raw for ch in ' ",;\\')

    def test_json_punctuation_is_not_escaped(self):
        raw = encode_cart(_full_cart())
        assert raw.startswith("{%22cart_items%22:[{")
        assert "%7B" not in raw and "%3A" not in raw

    def test_oversized_cookie_is_logged(self, caplog):
        items = [
            CartLineItem(slug=f"book-{i}", product_id=f"p{i}", name=f"A rather long book title number {i}",
                         price=12.5, quantity=1, image=f"/images/book-{i}.webp")
            for i in range(60)
        ]
        response = Response()
        storage = CookieCartStorage(None, response, get_settings())
        with caplog.at_level(logging.WARNING, logger="bookstore.cart"):
            storage.save(Cart(cart_items=items))
        assert len(encode_cart(Cart(cart_items=items))) > MAX_COOKIE_BYTES
        assert "browsers may drop it" in caplog.text
        assert "set-cookie" in response.headers

    def test_small_cookie_is_not_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="bookstore.cart"):
            CookieCartStorage(None, Response(), get_settings()).save(_full_cart())
        assert caplog.text == ""

    @pytest.mark.parametrize("raw", [None, "", "not-json", "%7B%22cart_items%22%3A5%7D"])
    def test_unreadable_cookie_is_no_cart(self, raw):
        assert decode_cart(raw) is None
