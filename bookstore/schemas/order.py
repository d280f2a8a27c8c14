# bookstore/schemas/order.py
from __future__ import annotations

from typing import Optional, List, Any, Dict
from datetime import datetime
from pydantic import BaseModel, Field

from bookstore.schemas.cart import ShippingAddress


# keep extra fields (response must not trim them)
class _Base(BaseModel):
    class Config:
        extra = "allow"


class OrderTotals(_Base):
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float


# Order line: snapshot of the cart line at placement time
class OrderItem(_Base):
    slug: str
    product_id: Optional[str] = None
    name: str
    quantity: int = Field(1, ge=1)
    price: float = Field(..., ge=0)
    image: Optional[str] = None


# (Input) order creation payload
class OrderCreate(_Base):
    order_items: List[OrderItem] = Field(..., min_length=1)
    shipping_address: ShippingAddress
    payment_method: str = Field(..., min_length=1)
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float


# (Output) persisted order
class OrderOut(_Base):
    id: str
    user_id: str
    order_items: List[OrderItem] = Field(default_factory=list)
    shipping_address: ShippingAddress
    payment_method: str
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float
    is_paid: bool = False
    is_delivered: bool = False
    paid_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # admin listing attaches {"name", "email"} of the owner
    user: Optional[Dict[str, Any]] = None
