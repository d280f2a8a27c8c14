from typing import Optional, Dict, Any
from google.cloud import firestore as gcf

COL = "users"


def get(db, uid: str) -> Optional[Dict[str, Any]]:
    doc = db.collection(COL).document(uid).get()
    return doc.to_dict() if doc.exists else None


def create(db, uid: str, name: str, email: str, is_admin: bool = False) -> Dict[str, Any]:
    data = {
        "name": name,
        "email": email,
        "is_admin": is_admin,
        "created_at": gcf.SERVER_TIMESTAMP,
    }
    db.collection(COL).document(uid).set(data)
    return data


def update(db, uid: str, patch: Dict[str, Any]) -> None:
    db.collection(COL).document(uid).update({**patch, "updated_at": gcf.SERVER_TIMESTAMP})


def count(db) -> int:
    return sum(1 for _ in db.collection(COL).stream())
