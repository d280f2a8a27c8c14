"""
# `bookstore/routers/auth.py` - Authentication

Identity is Firebase Authentication; Firestore keeps the `users/{uid}` profile.

### `POST /auth/register`
Creates the Firebase user (Admin SDK) and the Firestore profile. `201`.
An e-mail already registered answers `400`.

### `POST /auth/login`
Proxies e-mail + password to Firebase `signInWithPassword` and returns
`id_token` / `refresh_token`. Wrong credentials answer `401`.

### `POST /auth/update`
Updates the caller's name, e-mail and (optionally) password.
- name required, e-mail must contain `@`, password when given at least 5 characters,
  otherwise `422 Validation error`.
- `404 User not found` when the profile document is missing.
"""
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from firebase_admin import auth as firebase_auth

from bookstore.config import Settings, get_db, get_settings
from bookstore.core.auth import get_principal
from bookstore.repositories import users as users_repo
from bookstore.schemas.principal import Principal
from bookstore.schemas.user import (
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    RegisterResponse,
    UserCreate,
    UserProfile,
)

logger = logging.getLogger("bookstore.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])

FIREBASE_SIGNIN_ENDPOINT = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
PASSWORD_MIN_LENGTH_ON_UPDATE = 5


def identity_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=10)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db=Depends(get_db)):
    try:
        user = firebase_auth.create_user(
            email=payload.email, password=payload.password, display_name=payload.name
        )
    except firebase_auth.EmailAlreadyExistsError:
        raise HTTPException(status_code=400, detail="User exists already")
    except Exception as exc:
        logger.exception("Firebase user creation failed")
        raise HTTPException(status_code=400, detail=f"Firebase user creation error: {exc}")

    users_repo.create(db, user.uid, name=payload.name, email=payload.email)
    logger.info("User %s registered", user.uid)
    return RegisterResponse(
        user_id=user.uid,
        user=UserProfile(id=user.uid, name=payload.name, email=payload.email),
    )


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, settings: Settings = Depends(get_settings)):
    """Proxies to Firebase; returns id_token + refresh_token."""
    if not settings.firebase_web_api_key:
        raise HTTPException(status_code=500, detail="Server misconfigured: missing FIREBASE_WEB_API_KEY")

    body = {"email": payload.email, "password": payload.password, "returnSecureToken": True}
    try:
        async with identity_client() as client:
            resp = await client.post(
                FIREBASE_SIGNIN_ENDPOINT,
                params={"key": settings.firebase_web_api_key},
                json=body,
            )
    except httpx.HTTPError as e:
        logger.exception("signInWithPassword failed")
        raise HTTPException(status_code=502, detail=f"Login service error: {e}")

    data = resp.json()
    if resp.status_code != 200:
        message = data.get("error", {}).get("message", "Invalid email or password")
        logger.warning("Firebase login failed: %s", message)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=message)

    return LoginResponse(
        id_token=data["idToken"],
        refresh_token=data["refreshToken"],
        expires_in=int(data["expiresIn"]),
        user_id=data["localId"],
    )


@router.post("/update")
def update_profile(
    payload: ProfileUpdate,
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
):
    name = (payload.name or "").strip()
    email = (payload.email or "").strip()
    password = payload.password
    if (
        not name
        or not email
        or "@" not in email
        or (password and len(password.strip()) < PASSWORD_MIN_LENGTH_ON_UPDATE)
    ):
        raise HTTPException(status_code=422, detail="Validation error")

    if users_repo.get(db, principal.uid) is None:
        raise HTTPException(status_code=404, detail="User not found")

    changes = {"display_name": name, "email": email}
    if password:
        changes["password"] = password
    try:
        firebase_auth.update_user(principal.uid, **changes)
    except Exception as e:
        logger.exception("Firebase profile update failed")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to update user")

    users_repo.update(db, principal.uid, {"name": name, "email": email})
    return {"message": "User updated"}
