# bookstore/services/stock.py
from __future__ import annotations

import enum
import logging
from typing import Callable

from bookstore.core.errors import StockInsufficient

logger = logging.getLogger("bookstore.stock")

# product_id -> authoritative available quantity (raises ProductNotFound)
StockFetcher = Callable[[str], int]


class StockDecision(str, enum.Enum):
    ACCEPT = "accept"
    REJECT = "reject"


def validate_quantity(requested_qty: int, available_qty: int) -> StockDecision:
    if int(available_qty) < int(requested_qty):
        return StockDecision.REJECT
    return StockDecision.ACCEPT


def ensure_in_stock(fetch_product_stock: StockFetcher, product_id: str, requested_qty: int) -> int:
    """
    Fetches fresh stock for `product_id` and checks `requested_qty` against it.
    Returns the available quantity; raises StockInsufficient on reject.
    Must run before every quantity-changing cart mutation.
    """
    available = fetch_product_stock(product_id)
    if validate_quantity(requested_qty, available) is StockDecision.REJECT:
        logger.warning(
            "Stock rejected for product %s: requested=%s available=%s",
            product_id, requested_qty, available,
        )
        raise StockInsufficient(product_id, requested_qty, available)
    return available
