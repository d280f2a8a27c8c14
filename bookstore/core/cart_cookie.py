# bookstore/core/cart_cookie.py
"""
Cart persistence in the client's `cart` cookie.

The cart is stored as URL-quoted JSON; JSON punctuation that is legal in a
cookie value (`{}[]:@`) is left as is. An unreadable cookie is treated as no
cart at all, so a corrupt value never locks a client out of the shop. Browsers
drop cookies above about 4 KB without telling anyone, so oversized carts are
logged.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote, unquote

from fastapi import Depends, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from bookstore.config import Settings, get_settings
from bookstore.schemas.cart import Cart
from bookstore.services.cart_store import CartStore

logger = logging.getLogger("bookstore.cart")

COOKIE_SAFE_CHARS = "{}[]:@"
MAX_COOKIE_BYTES = 4096


def encode_cart(cart: Cart) -> str:
    return quote(cart.model_dump_json(), safe=COOKIE_SAFE_CHARS)


def decode_cart(raw: Optional[str]) -> Optional[Cart]:
    if not raw:
        return None
    try:
        return Cart.model_validate_json(unquote(raw))
    except ValidationError:
        logger.warning("Ignoring unreadable cart cookie")
        return None


class CookieCartStorage:
    """Reads the cart from the request and writes it onto `response`."""

    def __init__(self, request: Request, response: Response, settings: Settings):
        self.request = request
        self.response = response
        self.settings = settings

    def load(self) -> Optional[Cart]:
        return decode_cart(self.request.cookies.get(self.settings.cart_cookie_name))

    def save(self, cart: Cart) -> None:
        value = encode_cart(cart)
        if len(value) > MAX_COOKIE_BYTES:
            logger.warning(
                "Cart cookie is %d bytes (%d lines); browsers may drop it",
                len(value), len(cart.cart_items),
            )
        self.response.set_cookie(
            self.settings.cart_cookie_name,
            value,
            max_age=self.settings.cart_cookie_max_age,
            path="/",
            samesite="lax",
        )


def get_cart_store(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
) -> CartStore:
    """FastAPI dependency: the caller's cart, persisted on the route's response."""
    return CartStore(CookieCartStorage(request, response, settings))


def see_other(url: str, response: Optional[Response] = None) -> RedirectResponse:
    """
    303 redirect carrying any cookies already set on `response`.
    FastAPI drops the injected response's headers when a Response is returned directly.
    """
    redirect = RedirectResponse(url, status_code=303)
    if response is not None:
        for value in response.headers.getlist("set-cookie"):
            redirect.headers.append("set-cookie", value)
    return redirect
