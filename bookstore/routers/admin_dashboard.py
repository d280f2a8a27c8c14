"""
Admin Dashboard Router
Handles admin dashboard statistics and overview data
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from bookstore.config import get_db
from bookstore.core.auth import get_current_admin
from bookstore.repositories import orders as orders_repo
from bookstore.repositories import products as products_repo
from bookstore.repositories import users as users_repo
from bookstore.services.pricing import round2

router = APIRouter(tags=["Admin Dashboard"], dependencies=[Depends(get_current_admin)])


@router.get("/dashboard/stats")
def get_dashboard_stats(db=Depends(get_db)) -> Dict[str, Any]:
    """
    Overview counts plus revenue over all orders (sum of stored total_price)
    and the five most recent orders.
    """
    orders = orders_repo.list_all(db)
    revenue = round2(sum(float(o.get("total_price", 0) or 0) for o in orders))
    return {
        "total_products": products_repo.count(db),
        "total_orders": len(orders),
        "total_users": users_repo.count(db),
        "paid_orders": sum(1 for o in orders if o.get("is_paid")),
        "delivered_orders": sum(1 for o in orders if o.get("is_delivered")),
        "revenue": revenue,
        "recent_orders": [
            {"id": o["id"], "user_id": o.get("user_id"), "total_price": o.get("total_price")}
            for o in orders[:5]
        ],
    }
