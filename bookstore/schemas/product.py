"""
# `bookstore/schemas/product.py` - Product (book) schemas

## Input

### `ProductIn`
Admin create/update body. Every field is optional at the schema level so that the
router can answer a missing field with the storefront's own
`400 All fields are required` message instead of a generic 422.

| Field          | Type    | Description |
|----------------|---------|-------------|
| name           | `str`   | Title of the book (the slug is derived from it) |
| author         | `str`   | Author |
| description    | `str`   | Description |
| category       | `str`   | Category label |
| price          | `float` | Unit price |
| count_in_stock | `int`   | Available stock |
| image          | `str`   | Image URL (optional) |

## Output

### `ProductOut`
Listing / detail response; `id` is the Firestore document ID.
"""
from typing import Optional

from pydantic import BaseModel, Field


class ProductIn(BaseModel):
    name: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    count_in_stock: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None


class ProductOut(BaseModel):
    id: str
    name: str
    author: str = ""
    description: str = ""
    image: Optional[str] = None
    slug: str
    category: str = ""
    price: float
    rating: float = 0
    num_reviews: int = 0
    count_in_stock: int = 0

    model_config = {"from_attributes": True}


class StockOut(BaseModel):
    """`GET /product/{id}` body: `{"book": {...}}`."""
    book: ProductOut
