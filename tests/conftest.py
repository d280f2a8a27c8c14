import os

# must be set before bookstore.config caches its Settings
os.environ.setdefault("ALLOW_MOCK_TOKENS", "true")
os.environ.setdefault("FIREBASE_WEB_API_KEY", "test-web-api-key")
os.environ.setdefault("LOGIN_URL", "/login")

import pytest
from fastapi.testclient import TestClient

from bookstore.config import get_db
from bookstore.main import app
from firestore_double import InMemoryFirestore


@pytest.fixture()
def db():
    return InMemoryFirestore()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
