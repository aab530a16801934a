"""
tests/conftest.py -- Shared test fixtures for RoleGate.

This module provides:
  - settings: explicit test Settings (fixed secret, bcrypt cost 4 for speed)
  - user_store: isolated in-memory UserStore per test
  - hasher / token_service: collaborators matching what the app builds
  - client: TestClient over create_app(settings, user_store)
  - make_user / auth_header: seed users directly and mint their tokens

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.
A uuid in the name keeps every test's database separate.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from auth.models import User
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import Settings

TEST_SECRET = "test-secret-key-0123456789abcdef0123456789"


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        database_url="sqlite://",
    )


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore(f"sqlite:///file:test_auth_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")
    yield store
    store.close()


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(
        settings.secret_key,
        ttl_seconds=settings.token_expire_seconds,
        subject=settings.token_subject,
    )


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


@pytest.fixture
def client(settings: Settings, user_store: UserStore) -> Generator[TestClient, None, None]:
    """TestClient over a fresh app wired to the test store.

    Entering the context runs the lifespan, so app.state is populated.
    """
    app = create_app(settings=settings, user_store=user_store)
    with TestClient(app, raise_server_exceptions=True) as test_client:
        yield test_client


@pytest.fixture
def make_user(user_store: UserStore, hasher: PasswordHasher) -> Callable[..., User]:
    """Create a user straight in the store (bypassing the register route)."""

    def _make(role: str = "member", password: str = "secret", email: str | None = None) -> User:
        email = email or f"{role}-{uuid.uuid4().hex[:8]}@example.com"
        return user_store.create(role.title(), email, hasher.hash(password), role)

    return _make


@pytest.fixture
def auth_header(token_service: TokenService) -> Callable[[User], dict[str, str]]:
    """Return an Authorization header carrying a fresh token for the given user."""

    def _header(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_service.issue(user.id)}"}

    return _header
