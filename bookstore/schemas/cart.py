"""
bookstore/schemas/cart.py - Pydantic models for the cookie-persisted Cart.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class CartLineItem(BaseModel):
    slug: str = Field(..., description="Product slug; unique within a cart")
    product_id: str = Field(..., description="Product document ID used for stock lookups")
    name: str = Field(..., description="Name of the book")
    price: float = Field(..., ge=0, description="Unit price at the time of adding to cart")
    quantity: int = Field(..., ge=1, description="Quantity of the book in the cart")
    stock_quantity: Optional[int] = Field(None, description="Last known available stock")
    image: Optional[str] = None


class ShippingAddress(BaseModel):
    full_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class Cart(BaseModel):
    cart_items: List[CartLineItem] = Field(default_factory=list)
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress)
    payment_method: str = ""


# ---------- request / response bodies ----------
class AddItemBody(BaseModel):
    """Add to cart by product ID. Without a quantity the current quantity is increased by one."""
    product_id: str = Field(..., min_length=1, description="Product ID (the same 'id' you see in /products).")
    quantity: Optional[int] = Field(None, ge=1, le=10000)


class UpdateQuantityBody(BaseModel):
    quantity: int = Field(..., ge=1, le=10000)


class CartOut(Cart):
    total_quantity: int = 0
    subtotal: float = 0.0
