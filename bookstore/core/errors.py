"""
bookstore/core/errors.py
Domain errors raised by the cart, checkout and order services.
Routers translate them into HTTPException responses.
"""
from typing import Dict, Optional


class StorefrontError(Exception):
    """Base class for recoverable storefront errors."""


class CheckoutValidationError(StorefrontError):
    """A checkout field is missing or malformed. `errors` maps field -> message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class StockInsufficient(StorefrontError):
    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__("Sorry, Product is out of stock now")


class ProductNotFound(StorefrontError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__("No Book Found")


class SubmissionFailure(StorefrontError):
    """Order placement failed; the cart is left untouched so the user can retry."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class UnknownCartAction(TypeError):
    """A cart transition was dispatched with an unrecognized command (programming error)."""
