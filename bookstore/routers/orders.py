from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from bookstore.config import get_db
from bookstore.core.auth import get_current_admin, get_principal
from bookstore.repositories import orders as orders_repo
from bookstore.repositories import users as users_repo
from bookstore.schemas.order import OrderCreate, OrderOut
from bookstore.schemas.principal import Principal

logger = logging.getLogger("bookstore.orders")

router = APIRouter(prefix="/orders", tags=["Orders"])
admin_router = APIRouter(prefix="/orders", tags=["Admin Orders"])


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
):
    """Persists the order for the caller. Totals are stored as sent."""
    try:
        order_id = orders_repo.create(db, principal.uid, payload)
    except Exception as e:
        logger.exception("Order creation error")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to create order")
    logger.info("Order %s created for %s", order_id, principal.uid)
    return orders_repo.get(db, order_id)


@router.get("/history", response_model=List[OrderOut])
def order_history(principal: Principal = Depends(get_principal), db=Depends(get_db)):
    return orders_repo.list_for_user(db, principal.uid)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, principal: Principal = Depends(get_principal), db=Depends(get_db)):
    """Order confirmation/detail. Owners see their own orders, admins see all."""
    order = orders_repo.get(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.get("user_id") != principal.uid and not principal.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to view this order")
    return order


@admin_router.get("", response_model=List[OrderOut], dependencies=[Depends(get_current_admin)])
def admin_list_orders(db=Depends(get_db)):
    """Every order, newest first, with the owner's name and email attached."""
    owners = {}
    out = []
    for order in orders_repo.list_all(db):
        uid = order.get("user_id")
        if uid not in owners:
            profile = users_repo.get(db, uid) or {}
            owners[uid] = {"name": profile.get("name"), "email": profile.get("email")}
        out.append({**order, "user": owners[uid]})
    return out
