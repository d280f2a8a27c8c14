"""
# `bookstore/routers/products.py` - Catalog and admin product management

## Public endpoints

### `GET /products`
Lists every book. Optional `category` query filter.

### `GET /products/{slug}`
Book detail by slug. `404 No Book Found` when missing.

### `GET /product/{product_id}`
Stock lookup used before every cart quantity change. Answers `{"book": {...}}`
with the current `count_in_stock`.

## Admin endpoints (prefix `/admin`)

### `GET /admin/products`, `POST /admin/products`
### `GET|PUT|DELETE /admin/products/{product_id}`
- `name`, `author`, `description`, `category`, `price`, `count_in_stock` are required
  (`400 All fields are required`).
- The slug is generated from the name; a slug used by another book answers
  `400 Product with this name already exists`.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bookstore.config import get_db
from bookstore.core.auth import get_current_admin
from bookstore.repositories import products as products_repo
from bookstore.schemas.product import ProductIn, ProductOut, StockOut

logger = logging.getLogger("bookstore.products")

router = APIRouter(prefix="/products", tags=["Products"])
stock_router = APIRouter(prefix="/product", tags=["Products"])


@router.get("", response_model=List[ProductOut], summary="List Products")
def list_products(
    category: Optional[str] = Query(None, description="Category (optional)"),
    db=Depends(get_db),
):
    return products_repo.list_all(db, category=category)


@router.get("/{slug}", response_model=ProductOut, summary="Get Product")
def get_product(slug: str, db=Depends(get_db)):
    product = products_repo.get_by_slug(db, slug)
    if not product:
        raise HTTPException(status_code=404, detail="No Book Found")
    return product


@stock_router.get("/{product_id}", response_model=StockOut, summary="Get Product Stock")
def get_product_stock(product_id: str, db=Depends(get_db)):
    product = products_repo.get(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="No Book Found")
    return StockOut(book=product)


# Admin sub-router for product management
admin_router = APIRouter(
    prefix="/products",
    tags=["Admin Products"],
    dependencies=[Depends(get_current_admin)],
)


_REQUIRED = ("name", "author", "description", "category", "price")


def _validated_fields(payload: ProductIn) -> Dict[str, Any]:
    data = payload.model_dump()
    # a zero price counts as missing; a zero stock does not
    if not all(data[k] for k in _REQUIRED) or data["count_in_stock"] is None:
        raise HTTPException(status_code=400, detail="All fields are required")
    data["slug"] = products_repo.slugify(data["name"])
    if not data["slug"]:
        raise HTTPException(status_code=400, detail="All fields are required")
    if data.get("image") is None:
        data.pop("image")
    return data


@admin_router.get("", response_model=List[ProductOut])
def admin_list_products(db=Depends(get_db)):
    return products_repo.list_all(db)


@admin_router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def admin_create_product(payload: ProductIn, db=Depends(get_db)):
    data = _validated_fields(payload)
    if products_repo.get_by_slug(db, data["slug"]):
        raise HTTPException(status_code=400, detail="Product with this name already exists")
    product = products_repo.create(db, data)
    logger.info("Product %s created (%s)", product.id, product.slug)
    return product


@admin_router.get("/{product_id}", response_model=ProductOut)
def admin_get_product(product_id: str, db=Depends(get_db)):
    product = products_repo.get(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@admin_router.put("/{product_id}", response_model=ProductOut)
def admin_update_product(product_id: str, payload: ProductIn, db=Depends(get_db)):
    data = _validated_fields(payload)
    if not products_repo.get(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    if products_repo.get_by_slug(db, data["slug"], exclude_id=product_id):
        raise HTTPException(status_code=400, detail="Product with this name already exists")
    return products_repo.update(db, product_id, data)


@admin_router.delete("/{product_id}")
def admin_delete_product(product_id: str, db=Depends(get_db)):
    if not products_repo.get(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    products_repo.delete(db, product_id)
    logger.info("Product %s deleted", product_id)
    return {"message": "Product deleted successfully"}
