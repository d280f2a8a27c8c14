"""
# `bookstore/core/auth.py` - Caller identity

Callers send `Authorization: Bearer <Firebase ID token>`. The token is verified
with the Admin SDK (revocation checked) and turned into a `Principal`; the
`admin` custom claim makes the caller an admin.

Development builds may set `ALLOW_MOCK_TOKENS=true` to accept
`mock_jwt_token_<uid>` tokens without Firebase. UIDs starting with `admin`
then carry the admin claim.

| Dependency               | No token          | Bad token | Not admin |
|--------------------------|-------------------|-----------|-----------|
| `get_optional_principal` | `None`            | 401       | -         |
| `get_principal`          | 401               | 401       | -         |
| `get_current_admin`      | 401               | 401       | 403       |
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as fb_auth

from bookstore.config import Settings, get_settings
from bookstore.schemas.principal import Principal

MOCK_TOKEN_PREFIX = "mock_jwt_token_"

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _mock_claims(token: str) -> dict:
    uid = token[len(MOCK_TOKEN_PREFIX):]
    if not uid:
        raise _unauthorized("Invalid mock token format")
    return {"uid": uid, "email": f"{uid}@example.com", "name": uid, "admin": uid.startswith("admin")}


def verify_token(token: str, settings: Settings) -> dict:
    """Returns the decoded claims or raises 401."""
    if settings.allow_mock_tokens and token.startswith(MOCK_TOKEN_PREFIX):
        return _mock_claims(token)
    try:
        return fb_auth.verify_id_token(token, check_revoked=True)
    except fb_auth.ExpiredIdTokenError:
        raise _unauthorized("Token expired")
    except fb_auth.RevokedIdTokenError:
        raise _unauthorized("Session revoked")
    except Exception:
        raise _unauthorized("Invalid authentication token")


def principal_from_claims(claims: dict) -> Principal:
    uid = claims.get("uid") or claims.get("user_id")
    if not uid:
        raise _unauthorized("Invalid token payload")
    return Principal(
        uid=uid,
        role="admin" if claims.get("admin") is True else "user",
        email=claims.get("email"),
        display_name=claims.get("name"),
    )


# --------- FastAPI Dependencies --------- #

def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[Principal]:
    """Checkout steps use this and redirect to login on None instead of failing."""
    if not credentials or not credentials.credentials:
        return None
    return principal_from_claims(verify_token(credentials.credentials, settings))


def get_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    if principal is None:
        raise _unauthorized("Authentication required")
    return principal


def get_current_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
