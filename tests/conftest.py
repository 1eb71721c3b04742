"""
tests/conftest.py -- Shared test fixtures for Chirp.

This module provides:
  - settings / token_issuer / session_cookie: auth collaborators built from an
    injected secret, never from the real environment
  - store: empty in-memory UserStore for unit tests
  - client: TestClient over the real app with a patched lifespan that wires an
    isolated store and the test collaborators into app.state
  - signup(): helper that registers a user through the API

Design: the client fixture uses a named shared-memory SQLite URI (not plain
:memory:) because TestClient runs sync route handlers in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. Each test gets its own DB name so state never leaks between
tests.

Environment must be set before any api/ or core/ import: get_settings() is
cached and api/main.py reads it at import to configure middleware.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before importing the app.
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-chars")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
# Tests log in far more often than a real client would.
os.environ.setdefault("LOGIN_RATE_LIMIT", "10000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.cookies import SessionCookie
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import Settings

TEST_SECRET = "unit-test-secret-0123456789abcdef0123456789"


@pytest.fixture
def settings() -> Settings:
    return Settings(app_env="development", secret_key=TEST_SECRET, token_expire_days=15)


@pytest.fixture
def token_issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


@pytest.fixture
def session_cookie(settings: Settings) -> SessionCookie:
    return SessionCookie.from_settings(settings)


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    """Empty in-memory store, single-threaded use only."""
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


def _patch_lifespan(settings: Settings, user_store: UserStore, token_issuer: TokenIssuer, session_cookie: SessionCookie):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.user_store = user_store
        app.state.token_issuer = token_issuer
        app.state.session_cookie = session_cookie
        yield

    return test_lifespan


@pytest.fixture
def app_store() -> Generator[UserStore, None, None]:
    """Isolated store shared between the test body and the app's worker threads."""
    url = f"sqlite:///file:test_auth_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"
    s = UserStore(url)
    yield s
    s.close()


@pytest.fixture
def client(
    settings: Settings,
    app_store: UserStore,
    token_issuer: TokenIssuer,
    session_cookie: SessionCookie,
) -> Generator[TestClient, None, None]:
    """TestClient over the real app. The cookie jar persists across requests within one test."""
    original = app.router.lifespan_context
    app.router.lifespan_context = _patch_lifespan(settings, app_store, token_issuer, session_cookie)
    try:
        with TestClient(app, raise_server_exceptions=True) as c:
            yield c
    finally:
        app.router.lifespan_context = original


def signup(client: TestClient, username: str = "alice", email: str | None = None, password: str = "secret123"):
    """Register a user through the API and return the response."""
    return client.post(
        "/api/auth/signup",
        json={
            "fullName": f"{username.title()} Example",
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        },
    )
