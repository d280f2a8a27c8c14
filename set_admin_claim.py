#!/usr/bin/env python3
"""
Grants (or with --revoke, removes) the `admin` custom claim for a bookstore
account and mirrors it on the Firestore profile's `is_admin` flag.

    python set_admin_claim.py manager@bookshop.io
    python set_admin_claim.py manager@bookshop.io --revoke

The user has to sign in again before the new claim shows up in their token.
"""
import argparse
import sys

from firebase_admin import auth

from bookstore.config import get_db, get_firebase_app
from bookstore.repositories import users as users_repo


def apply_admin_claim(email: str, is_admin: bool) -> dict:
    """Returns the user's custom claims after the change."""
    user = auth.get_user_by_email(email)
    claims = dict(user.custom_claims or {})
    if is_admin:
        claims["admin"] = True
    else:
        claims.pop("admin", None)
    auth.set_custom_user_claims(user.uid, claims or None)

    db = get_db()
    if users_repo.get(db, user.uid) is None:
        users_repo.create(db, user.uid, name=user.display_name or "", email=user.email or email, is_admin=is_admin)
    else:
        users_repo.update(db, user.uid, {"is_admin": is_admin})
    return auth.get_user(user.uid).custom_claims or {}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke the admin custom claim.")
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="remove the admin claim instead")
    args = parser.parse_args(argv)

    get_firebase_app()
    try:
        claims = apply_admin_claim(args.email, is_admin=not args.revoke)
    except auth.UserNotFoundError:
        print(f"User not found: {args.email}")
        return 1

    print(f"Custom claims for {args.email}: {claims}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
