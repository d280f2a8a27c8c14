"""
bookstore/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and lazily initializes the Firebase Admin SDK (Firestore client) using the provided credentials.
Routers receive the Firestore client through the `get_db` dependency.
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    project_name: str = "Bookstore API"
    project_version: str = "1.0.0"

    firebase_cred_file: str = "firebase_service_account.json"
    firebase_project_id: Optional[str] = None
    firebase_web_api_key: str = ""

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_token_uri: str = "https://oauth2.googleapis.com/token"

    debug: bool = False
    allowed_origins: str = "*"  # Comma-separated list or '*' for all
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Checkout redirects here when no identity is present
    login_url: str = "/login"

    cart_cookie_name: str = "cart"
    cart_cookie_max_age: int = 60 * 60 * 24 * 30

    # Development only: accept "mock_jwt_token_<uid>" bearer tokens
    allow_mock_tokens: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def origins(self) -> list[str]:
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    return Settings()


def _credentials(settings: Settings) -> credentials.Base:
    if all([
        settings.firebase_private_key_id,
        settings.firebase_private_key,
        settings.firebase_client_email,
        settings.firebase_client_id,
    ]):
        return credentials.Certificate({
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "private_key_id": settings.firebase_private_key_id,
            # Cloud Run keeps newlines escaped in env values
            "private_key": settings.firebase_private_key.replace("\\n", "\n"),
            "client_email": settings.firebase_client_email,
            "client_id": settings.firebase_client_id,
            "token_uri": settings.firebase_token_uri,
        })
    return credentials.Certificate(settings.firebase_cred_file)


@lru_cache
def get_firebase_app() -> firebase_admin.App:
    settings = get_settings()
    try:
        return firebase_admin.initialize_app(
            _credentials(settings),
            {"projectId": settings.firebase_project_id},
        )
    except ValueError as e:
        if "already exists" in str(e):
            return firebase_admin.get_app()
        raise


def get_db():
    """FastAPI dependency returning the shared Firestore client."""
    return firestore.client(get_firebase_app())
