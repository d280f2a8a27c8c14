"""
bookstore/repositories/orders.py
Firestore access for the `orders` collection.
"""
import uuid
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from bookstore.schemas.order import OrderCreate

COL = "orders"


def order_doc_to_out(snap) -> Dict[str, Any]:
    d = snap.to_dict() or {}
    d["id"] = snap.id
    return d


def create(db, uid: str, payload: OrderCreate) -> str:
    order_id = str(uuid.uuid4())
    doc = payload.model_dump()
    doc.update({
        "user_id": uid,
        "is_paid": False,
        "is_delivered": False,
        "created_at": SERVER_TIMESTAMP,
        "updated_at": SERVER_TIMESTAMP,
    })
    db.collection(COL).document(order_id).set(doc)
    return order_id


def get(db, order_id: str) -> Optional[Dict[str, Any]]:
    snap = db.collection(COL).document(order_id).get()
    return order_doc_to_out(snap) if snap.exists else None


def _created_key(order: Dict[str, Any]):
    return order.get("created_at") is not None, order.get("created_at")


def list_for_user(db, uid: str) -> List[Dict[str, Any]]:
    """Newest first. Sorted in Python so no composite index is needed."""
    q = db.collection(COL).where(filter=FieldFilter("user_id", "==", uid)).stream()
    docs = [order_doc_to_out(snap) for snap in q]
    return sorted(docs, key=_created_key, reverse=True)


def list_all(db) -> List[Dict[str, Any]]:
    q = (
        db.collection(COL)
          .order_by("created_at", direction=firestore.Query.DESCENDING)
          .stream()
    )
    return [order_doc_to_out(snap) for snap in q]
