# bookstore/services/checkout.py
"""
Checkout step sequencing: shipping -> payment -> place order.

A step whose prerequisite is missing redirects to the step that provides it;
moving back never touches the cart, so previously entered values stay prefilled.
"""
from __future__ import annotations

import enum
from typing import Dict, Optional

from bookstore.core.errors import CheckoutValidationError
from bookstore.schemas.cart import Cart

PROGRESS_STEPS = ["User Login", "Shipping Address", "Payment Method", "Place Order"]
PAYMENT_METHODS = ["PayPal", "Stripe", "CashOnDelivery"]
EMPTY_CART_NOTICE = "Cart is empty"


class CheckoutStep(str, enum.Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"
    PLACE_ORDER = "placeorder"

    @property
    def path(self) -> str:
        return f"/checkout/{self.value}"

    @property
    def progress(self) -> int:
        """Index of the active entry in PROGRESS_STEPS."""
        return _ORDER.index(self) + 1


_ORDER = [CheckoutStep.SHIPPING, CheckoutStep.PAYMENT, CheckoutStep.PLACE_ORDER]


def previous_step(step: CheckoutStep) -> Optional[CheckoutStep]:
    i = _ORDER.index(step)
    return _ORDER[i - 1] if i > 0 else None


def next_step(step: CheckoutStep) -> Optional[CheckoutStep]:
    i = _ORDER.index(step)
    return _ORDER[i + 1] if i + 1 < len(_ORDER) else None


def guard(step: CheckoutStep, cart: Cart) -> Optional[CheckoutStep]:
    """Returns the step to redirect to, or None when `step` may be shown."""
    if step is CheckoutStep.PAYMENT and not cart.shipping_address.address:
        return CheckoutStep.SHIPPING
    if step is CheckoutStep.PLACE_ORDER and not cart.payment_method:
        return CheckoutStep.PAYMENT
    return None


def can_place_order(cart: Cart) -> bool:
    return bool(cart.cart_items) and guard(CheckoutStep.PLACE_ORDER, cart) is None


# ---------- form validation ----------
_REQUIRED_ADDRESS_FIELDS = {
    "full_name": "Please enter full name",
    "address": "Please enter address",
    "city": "Please enter city",
    "postal_code": "Please enter postal code",
    "country": "Please enter country",
}
ADDRESS_MIN_LENGTH = 3


def validate_shipping_address(data: Dict[str, Optional[str]]) -> Dict[str, str]:
    """Returns the cleaned address; raises CheckoutValidationError with per-field messages."""
    cleaned: Dict[str, str] = {}
    errors: Dict[str, str] = {}
    for name, message in _REQUIRED_ADDRESS_FIELDS.items():
        value = (data.get(name) or "").strip()
        if not value:
            errors[name] = message
            continue
        cleaned[name] = value

    if "address" in cleaned and len(cleaned["address"]) < ADDRESS_MIN_LENGTH:
        errors["address"] = "Address is more than 2 chars"

    if errors:
        raise CheckoutValidationError(errors)
    return cleaned


def validate_payment_method(method: Optional[str]) -> str:
    method = (method or "").strip()
    if method not in PAYMENT_METHODS:
        raise CheckoutValidationError({"payment_method": "Payment method is required"})
    return method
