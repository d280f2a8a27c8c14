"""
bookstore/services/cart_store.py
Cart state: a closed set of transition commands, a pure reducer over `Cart`,
and a small container that persists every transition through an injected storage.

Behavior
- AddItem replaces an existing line with the same slug (quantities are not summed).
- ClearItems empties the lines only; shipping address and payment method survive
  so a returning customer does not retype them.
- SaveShippingAddress shallow-merges the given fields into the stored address.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Union

from bookstore.core.errors import UnknownCartAction
from bookstore.schemas.cart import Cart, CartLineItem, ShippingAddress


# ---------- commands ----------
@dataclass(frozen=True)
class AddItem:
    item: CartLineItem


@dataclass(frozen=True)
class RemoveItem:
    slug: str


@dataclass(frozen=True)
class ClearItems:
    pass


@dataclass(frozen=True)
class SaveShippingAddress:
    address: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SavePaymentMethod:
    method: str


CartAction = Union[AddItem, RemoveItem, ClearItems, SaveShippingAddress, SavePaymentMethod]


# ---------- reducer ----------
def reduce_cart(cart: Cart, action: CartAction) -> Cart:
    """Returns the next cart; `cart` itself is never modified."""
    if isinstance(action, AddItem):
        new_item = action.item
        if any(it.slug == new_item.slug for it in cart.cart_items):
            items = [new_item if it.slug == new_item.slug else it for it in cart.cart_items]
        else:
            items = [*cart.cart_items, new_item]
        return cart.model_copy(update={"cart_items": items})

    if isinstance(action, RemoveItem):
        items = [it for it in cart.cart_items if it.slug != action.slug]
        return cart.model_copy(update={"cart_items": items})

    if isinstance(action, ClearItems):
        return cart.model_copy(update={"cart_items": []})

    if isinstance(action, SaveShippingAddress):
        merged = {**cart.shipping_address.model_dump(), **action.address}
        return cart.model_copy(update={"shipping_address": ShippingAddress(**merged)})

    if isinstance(action, SavePaymentMethod):
        return cart.model_copy(update={"payment_method": action.method})

    raise UnknownCartAction(f"Invalid action type: {type(action).__name__}")


# ---------- container ----------
class CartStorage(Protocol):
    def load(self) -> Optional[Cart]: ...

    def save(self, cart: Cart) -> None: ...


class CartStore:
    """Holds the current cart; every dispatch is persisted through `storage`."""

    def __init__(self, storage: CartStorage):
        self.storage = storage
        self.cart: Cart = storage.load() or Cart()

    def dispatch(self, action: CartAction) -> Cart:
        self.cart = reduce_cart(self.cart, action)
        self.storage.save(self.cart)
        return self.cart

    def find(self, slug: str) -> Optional[CartLineItem]:
        return next((it for it in self.cart.cart_items if it.slug == slug), None)

    @property
    def total_quantity(self) -> int:
        return sum(it.quantity for it in self.cart.cart_items)
