"""
# `bookstore/schemas/user.py` - User and auth schemas

* `UserCreate`: registration body (`name`, `email`, `password` >= 6 chars).
* `LoginRequest` / `LoginResponse`: email + password proxied to Firebase.
* `ProfileUpdate`: profile edit. Validation happens in the router so that every
  failure answers with the same `422 Validation error` body.
* `UserProfile`: the Firestore `users/{uid}` document.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class UserCreate(BaseModel):
    name: NameStr = Field(..., description="Full name")
    email: EmailStr = Field(..., description="E-mail")
    password: Annotated[str, Field(min_length=6)] = Field(..., description="Password (>= 6 chars)")


class UserProfile(BaseModel):
    id: str = Field(..., description="User unique ID (UID from Firebase)")
    name: str = ""
    email: str = ""
    is_admin: bool = False
    created_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="E-mail")
    password: Annotated[str, Field(min_length=6)] = Field(..., description="Password (>= 6 chars)")


class LoginResponse(BaseModel):
    id_token: str
    refresh_token: str
    expires_in: int         # seconds
    user_id: str


class RegisterResponse(BaseModel):
    user_id: str
    user: UserProfile
