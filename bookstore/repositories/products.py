"""
bookstore/repositories/products.py
Firestore access for the `products` collection (books).
"""
import re
from typing import Any, Dict, List, Optional

from google.cloud import firestore as gcf
from google.cloud.firestore_v1 import FieldFilter

from bookstore.core.errors import ProductNotFound
from bookstore.schemas.product import ProductOut

COL = "products"


def slugify(name: str) -> str:
    """'The Alchemist!' -> 'the-alchemist'"""
    return re.sub(r"(^-|-$)", "", re.sub(r"[^a-z0-9]+", "-", name.lower()))


def doc_to_out(snap) -> ProductOut:
    src = snap.to_dict() or {}
    return ProductOut(
        id=snap.id,
        name=src.get("name", ""),
        author=src.get("author", "") or "",
        description=src.get("description", "") or "",
        image=src.get("image"),
        slug=src.get("slug", ""),
        category=src.get("category", "") or "",
        price=float(src.get("price", 0) or 0),
        rating=float(src.get("rating", 0) or 0),
        num_reviews=int(src.get("num_reviews", 0) or 0),
        count_in_stock=int(src.get("count_in_stock", 0) or 0),
    )


def get(db, product_id: str) -> Optional[ProductOut]:
    snap = db.collection(COL).document(product_id).get()
    return doc_to_out(snap) if snap.exists else None


def get_by_slug(db, slug: str, exclude_id: Optional[str] = None) -> Optional[ProductOut]:
    q = db.collection(COL).where(filter=FieldFilter("slug", "==", slug))
    for snap in q.stream():
        if snap.id != exclude_id:
            return doc_to_out(snap)
    return None


def list_all(db, category: Optional[str] = None) -> List[ProductOut]:
    q = db.collection(COL)
    if category:
        q = q.where(filter=FieldFilter("category", "==", category))
    return [doc_to_out(snap) for snap in q.stream()]


def fetch_product_stock(db, product_id: str) -> int:
    """Authoritative available quantity; raises ProductNotFound."""
    product = get(db, product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product.count_in_stock


def create(db, data: Dict[str, Any]) -> ProductOut:
    ref = db.collection(COL).document()
    ref.set({
        **data,
        "rating": 0,
        "num_reviews": 0,
        "created_at": gcf.SERVER_TIMESTAMP,
        "updated_at": gcf.SERVER_TIMESTAMP,
    })
    return doc_to_out(ref.get())


def update(db, product_id: str, patch: Dict[str, Any]) -> ProductOut:
    ref = db.collection(COL).document(product_id)
    ref.update({**patch, "updated_at": gcf.SERVER_TIMESTAMP})
    return doc_to_out(ref.get())


def delete(db, product_id: str) -> None:
    db.collection(COL).document(product_id).delete()


def count(db) -> int:
    return sum(1 for _ in db.collection(COL).stream())
