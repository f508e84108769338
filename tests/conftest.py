import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

# The app factory reads the signing key from the environment when no store is injected.
os.environ.setdefault("COOKIEAUTH_SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from cookieauth.app import create_app
from cookieauth.auth.credentials import CredentialStore
from cookieauth.auth.session import CookieSessionStore


@pytest.fixture()
def credentials() -> CredentialStore:
    return CredentialStore({"user1": "password", "user2": "password", "alice": "s3cret"})


@pytest.fixture()
def store() -> CookieSessionStore:
    return CookieSessionStore("unit-test-key", salt="tests.session")


@pytest.fixture()
def client(credentials, store) -> TestClient:
    return TestClient(create_app(credentials=credentials, store=store))


@pytest.fixture()
def login(client):
    def _login(username: str, password: str):
        return client.post("/login", data={"username": username, "password": password})

    return _login


@pytest.fixture()
def anyio_backend():
    return "asyncio"
