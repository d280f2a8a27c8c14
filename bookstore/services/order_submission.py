# bookstore/services/order_submission.py
"""
Order placement.

Line prices and names are read back from the catalog when the order is built;
the values held in the client's cart cookie are for display only and never
reach a persisted order.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from bookstore.core.errors import CheckoutValidationError, SubmissionFailure
from bookstore.schemas.cart import Cart, CartLineItem
from bookstore.schemas.order import OrderCreate, OrderItem
from bookstore.services.cart_store import CartStore, ClearItems
from bookstore.services.pricing import calc_totals

logger = logging.getLogger("bookstore.orders")

# OrderCreate -> persisted order id
OrderSubmitter = Callable[[OrderCreate], str]
# product_id -> current product (anything with `name` and `price`) or None
CatalogLookup = Callable[[str], Optional[Any]]


def current_lines(items: List[CartLineItem], lookup: Optional[CatalogLookup]) -> List[CartLineItem]:
    """Cart lines with `name` and `price` taken from the catalog."""
    if lookup is None:
        return list(items)
    lines = []
    for it in items:
        product = lookup(it.product_id)
        if product is None:
            raise CheckoutValidationError({"cart_items": f"{it.name} is no longer available"})
        lines.append(it.model_copy(update={"name": product.name, "price": product.price}))
    return lines


def build_order_request(cart: Cart, lookup: Optional[CatalogLookup] = None) -> OrderCreate:
    """Packages cart lines, shipping, payment and the computed totals."""
    if not cart.cart_items:
        raise CheckoutValidationError({"cart_items": "Cart is empty"})
    items = current_lines(cart.cart_items, lookup)
    totals = calc_totals(items)
    return OrderCreate(
        order_items=[
            OrderItem(
                slug=it.slug,
                product_id=it.product_id,
                name=it.name,
                quantity=it.quantity,
                price=it.price,
                image=it.image,
            )
            for it in items
        ],
        shipping_address=cart.shipping_address,
        payment_method=cart.payment_method,
        items_price=totals.items_price,
        shipping_price=totals.shipping_price,
        tax_price=totals.tax_price,
        total_price=totals.total_price,
    )


def submit_order(store: CartStore, submitter: OrderSubmitter, lookup: Optional[CatalogLookup] = None) -> str:
    """
    One submission attempt. On success the cart lines are cleared (address and
    payment method are kept) and the new order id is returned. On failure the
    cart is left as it was and SubmissionFailure is raised; no retry.
    """
    request = build_order_request(store.cart, lookup)
    try:
        order_id = submitter(request)
    except SubmissionFailure:
        raise
    except Exception as exc:
        logger.exception("Order submission failed")
        raise SubmissionFailure(str(exc) or "Failed to create order", cause=exc) from exc

    store.dispatch(ClearItems())
    return order_id
