"""
# `bookstore/routers/checkout.py` - Checkout steps

Shipping -> Payment -> Place Order. Every step requires a signed-in caller;
without one the step answers `303` to `{login_url}?redirect=<step path>`.

| Step        | GET                                   | POST                                   |
|-------------|---------------------------------------|----------------------------------------|
| shipping    | saved address (prefill)               | validate, save, 303 -> payment         |
| payment     | 303 -> shipping without an address    | validate, save, 303 -> placeorder      |
| placeorder  | 303 -> payment without a method;      | submit the order, clear cart lines,    |
|             | summary or empty-cart notice          | 303 -> /orders/{id}; 502 on failure    |

"Back" is the `back` path in each GET body; going back keeps every saved value.

The summary and the placed order price every line from the catalog, not from
the cookie; a line whose book is gone answers `422`.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from bookstore.config import Settings, get_db, get_settings
from bookstore.core.auth import get_optional_principal
from bookstore.core.cart_cookie import get_cart_store, see_other
from bookstore.core.errors import CheckoutValidationError, SubmissionFailure
from bookstore.repositories import orders as orders_repo
from bookstore.repositories import products as products_repo
from bookstore.schemas.principal import Principal
from bookstore.services import checkout as seq
from bookstore.services.cart_store import CartStore, SavePaymentMethod, SaveShippingAddress
from bookstore.services.checkout import CheckoutStep
from bookstore.services.order_submission import current_lines, submit_order
from bookstore.services.pricing import calc_totals

logger = logging.getLogger("bookstore.checkout")

router = APIRouter(prefix="/checkout", tags=["Checkout"])


class ShippingForm(BaseModel):
    full_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class PaymentForm(BaseModel):
    payment_method: Optional[str] = None


def _login_redirect(step: CheckoutStep, settings: Settings):
    return see_other(f"{settings.login_url}?redirect={quote(step.path, safe='/')}")


def _step_body(step: CheckoutStep, **data: Any) -> Dict[str, Any]:
    back = seq.previous_step(step)
    return {
        "step": step.value,
        "progress": step.progress,
        "steps": seq.PROGRESS_STEPS,
        "back": back.path if back else "/cart",
        **data,
    }


def _invalid(e: CheckoutValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=e.errors)


def _catalog(db):
    return lambda product_id: products_repo.get(db, product_id)


# ---------- shipping ----------
@router.get("/shipping")
def shipping_step(
    store: CartStore = Depends(get_cart_store),
    principal: Optional[Principal] = Depends(get_optional_principal),
    settings: Settings = Depends(get_settings),
):
    if principal is None:
        return _login_redirect(CheckoutStep.SHIPPING, settings)
    return _step_body(CheckoutStep.SHIPPING, shipping_address=store.cart.shipping_address)


@router.post("/shipping")
def save_shipping(
    form: ShippingForm,
    response: Response,
    store: CartStore = Depends(get_cart_store),
    principal: Optional[Principal] = Depends(get_optional_principal),
    settings: Settings = Depends(get_settings),
):
    if principal is None:
        return _login_redirect(CheckoutStep.SHIPPING, settings)
    try:
        address = seq.validate_shipping_address(form.model_dump())
    except CheckoutValidationError as e:
        raise _invalid(e)
    store.dispatch(SaveShippingAddress(address))
    return see_other(CheckoutStep.PAYMENT.path, response)


# ---------- payment ----------
@router.get("/payment")
def payment_step(
    store: CartStore = Depends(get_cart_store),
    principal: Optional[Principal] = Depends(get_optional_principal),
    settings: Settings = Depends(get_settings),
):
    if principal is None:
        return _login_redirect(CheckoutStep.PAYMENT, settings)
    redirect_to = seq.guard(CheckoutStep.PAYMENT, store.cart)
    if redirect_to:
        return see_other(redirect_to.path)
    return _step_body(
        CheckoutStep.PAYMENT,
        payment_methods=seq.PAYMENT_METHODS,
        payment_method=store.cart.payment_method,
    )


@router.post("/payment")
def save_payment(
    form: PaymentForm,
    response: Response,
    store: CartStore = Depends(get_cart_store),
    principal: Optional[Principal] = Depends(get_optional_principal),
    settings: Settings = Depends(get_settings),
):
    if principal is None:
        return _login_redirect(CheckoutStep.PAYMENT, settings)
    try:
        method = seq.validate_payment_method(form.payment_method)
    except CheckoutValidationError as e:
        raise _invalid(e)
    store.dispatch(SavePaymentMethod(method))
    return see_other(CheckoutStep.PLACE_ORDER.path, response)


# ---------- place order ----------
@router.get("/placeorder")
def place_order_step(
    store: CartStore = Depends(get_cart_store),
    principal: Optional[Principal] = Depends(get_optional_principal),
    settings: Settings = Depends(get_settings),
    db=Depends(get_db),
):
    if principal is None:
        return _login_redirect(CheckoutStep.PLACE_ORDER, settings)
    redirect_to = seq.guard(CheckoutStep.PLACE_ORDER, store.cart)
    if redirect_to:
        return see_other(redirect_to.path)

    cart = store.cart
    if not cart.cart_items:
        return _step_body(
            CheckoutStep.PLACE_ORDER,
            notice=seq.EMPTY_CART_NOTICE,
            can_place_order=False,
        )
    try:
        items = current_lines(cart.cart_items, _catalog(db))
    except CheckoutValidationError as e:
        raise _invalid(e)
    return _step_body(
        CheckoutStep.PLACE_ORDER,
        cart_items=items,
        shipping_address=cart.shipping_address,
        payment_method=cart.payment_method,
        totals=calc_totals(items),
        can_place_order=True,
    )


@router.post("/placeorder")
def place_order(
    response: Response,
    store: CartStore = Depends(get_cart_store),
    principal: Optional[Principal] = Depends(get_optional_principal),
    settings: Settings = Depends(get_settings),
    db=Depends(get_db),
):
    if principal is None:
        return _login_redirect(CheckoutStep.PLACE_ORDER, settings)
    redirect_to = seq.guard(CheckoutStep.PLACE_ORDER, store.cart)
    if redirect_to:
        return see_other(redirect_to.path)

    try:
        order_id = submit_order(
            store,
            lambda payload: orders_repo.create(db, principal.uid, payload),
            _catalog(db),
        )
    except CheckoutValidationError as e:
        raise _invalid(e)
    except SubmissionFailure as e:
        raise HTTPException(status_code=502, detail=str(e))

    logger.info("Order %s placed by %s", order_id, principal.uid)
    return see_other(f"/orders/{order_id}", response)
