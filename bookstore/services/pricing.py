# bookstore/services/pricing.py
"""
Order totals.

    items_price    = round2(sum(price * quantity))
    shipping_price = 0 if items_price > 200 else 15
    tax_price      = round2(items_price * 0.15)
    total_price    = round2(items_price + shipping_price + tax_price)

Tax is derived from the already rounded items price and the final sum is rounded
again; changing that order changes some totals by a cent.

All arithmetic is binary floating point, and round2 rounds half up on the float
value after adding one machine epsilon. Totals therefore follow the float
result: 1.005 rounds to 1.00 and a tax of 1.50 * 0.15 (0.22499999999999998)
rounds to 0.22.
"""
from __future__ import annotations

import math
import sys
from typing import Any, Iterable

from bookstore.schemas.order import OrderTotals

FREE_SHIPPING_THRESHOLD = 200
FLAT_SHIPPING = 15
TAX_RATE = 0.15


def round2(value: float) -> float:
    """Currency rounding: floor(x * 100 + epsilon + 0.5) / 100."""
    return math.floor(float(value) * 100 + sys.float_info.epsilon + 0.5) / 100


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name, 0)
    return getattr(item, name, 0)


def items_subtotal(items: Iterable[Any]) -> float:
    """Unrounded sum of quantity * price over cart lines (models or dicts), in line order."""
    total = 0.0
    for it in items:
        total = total + int(_field(it, "quantity") or 0) * float(_field(it, "price") or 0)
    return total


def shipping_for(items_price: float) -> float:
    return 0.0 if items_price > FREE_SHIPPING_THRESHOLD else float(FLAT_SHIPPING)


def calc_totals(items: Iterable[Any]) -> OrderTotals:
    items_price = round2(items_subtotal(items))
    shipping_price = shipping_for(items_price)
    tax_price = round2(items_price * TAX_RATE)
    total_price = round2(items_price + shipping_price + tax_price)
    return OrderTotals(
        items_price=items_price,
        tax_price=tax_price,
        shipping_price=shipping_price,
        total_price=total_price,
    )
