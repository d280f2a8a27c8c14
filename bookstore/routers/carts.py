"""
bookstore/routers/carts.py
Cart endpoints. The cart lives in the client's `cart` cookie; every response
carries the updated cookie.

Behavior
- Every quantity change (add, increase, decrease) first fetches the book's current
  stock from Firestore. The stock number cached in the cookie never decides.
- Add without a quantity means "one more than what is in the cart".
- Add with an existing slug replaces the line with the requested quantity.
- Clearing keeps the saved shipping address and payment method.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from bookstore.config import get_db
from bookstore.core.cart_cookie import get_cart_store
from bookstore.core.errors import ProductNotFound, StockInsufficient
from bookstore.repositories import products as products_repo
from bookstore.schemas.cart import AddItemBody, CartLineItem, CartOut, UpdateQuantityBody
from bookstore.services.cart_store import AddItem, CartStore, ClearItems, RemoveItem
from bookstore.services.pricing import items_subtotal
from bookstore.services.stock import ensure_in_stock

router = APIRouter(prefix="/cart", tags=["Cart"])


def _cart_out(store: CartStore) -> CartOut:
    cart = store.cart
    return CartOut(
        **cart.model_dump(),
        total_quantity=store.total_quantity,
        subtotal=items_subtotal(cart.cart_items),
    )


def _checked_stock(db, product_id: str, quantity: int) -> int:
    try:
        return ensure_in_stock(lambda pid: products_repo.fetch_product_stock(db, pid), product_id, quantity)
    except ProductNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StockInsufficient as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("", response_model=CartOut)
def get_cart(store: CartStore = Depends(get_cart_store)):
    return _cart_out(store)


@router.post("/items", response_model=CartOut)
def add_to_cart(
    payload: AddItemBody,
    store: CartStore = Depends(get_cart_store),
    db=Depends(get_db),
):
    product = products_repo.get(db, payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="No Book Found")

    quantity: Optional[int] = payload.quantity
    if quantity is None:
        in_cart = store.find(product.slug)
        quantity = in_cart.quantity + 1 if in_cart else 1

    available = _checked_stock(db, product.id, quantity)
    store.dispatch(AddItem(CartLineItem(
        slug=product.slug,
        product_id=product.id,
        name=product.name,
        price=product.price,
        quantity=quantity,
        stock_quantity=available,
        image=product.image,
    )))
    return _cart_out(store)


@router.put("/items/{slug}", response_model=CartOut)
def update_cart_item(
    slug: str,
    payload: UpdateQuantityBody,
    store: CartStore = Depends(get_cart_store),
    db=Depends(get_db),
):
    item = store.find(slug)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found in cart.")

    available = _checked_stock(db, item.product_id, payload.quantity)
    store.dispatch(AddItem(item.model_copy(update={
        "quantity": payload.quantity,
        "stock_quantity": available,
    })))
    return _cart_out(store)


@router.delete("/items/{slug}", response_model=CartOut)
def remove_cart_item(slug: str, store: CartStore = Depends(get_cart_store)):
    store.dispatch(RemoveItem(slug))
    return _cart_out(store)


@router.delete("/items", response_model=CartOut)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    store.dispatch(ClearItems())
    return _cart_out(store)
