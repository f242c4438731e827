"""
tests/conftest.py -- Shared test fixtures for CarStock integration tests.

This module provides:
  - test_settings: immutable Settings pointing at an in-memory database
  - _seeded_lifespan(): wraps the real lifespan and inserts test dealers
  - client: TestClient over a fresh app per test, seeded with two dealers
  - issue_token / auth_headers: helpers for acting as a given dealer

Design: every test gets its own app from create_app() and its own
sqlite+aiosqlite:///:memory: database. The aiosqlite dialect uses a StaticPool
for in-memory URLs, so the dealer and car stores share one connection and one
schema for the lifetime of the client.

The TestClient talks to https://testserver because the jwt cookie is Secure;
an http:// base URL would never send it back.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import create_app, lifespan
from auth.models import Dealer
from auth.tokens import hash_password
from core.config import Settings

# Hashed once per session -- bcrypt is deliberately slow.
DEALERS = {
    1001: "password123",
    1002: "otherpass456",
}
_HASHES = {dealer_id: hash_password(pw) for dealer_id, pw in DEALERS.items()}

TEST_KEY = "test-signing-key-0123456789abcdef0123456789"
TEST_ISSUER = "carstock-test"
TEST_AUDIENCE = "carstock-test-clients"


def make_settings(**overrides) -> Settings:
    values = {
        "jwt_key": TEST_KEY,
        "jwt_issuer": TEST_ISSUER,
        "jwt_audience": TEST_AUDIENCE,
        "database_url": "sqlite+aiosqlite:///:memory:",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _seeded_lifespan():
    """Return a lifespan that runs the real startup, then inserts test dealers."""

    @asynccontextmanager
    async def test_lifespan(app):
        async with lifespan(app):
            for dealer_id, hashed in _HASHES.items():
                await app.state.dealer_store.create_dealer(Dealer(dealer_id=dealer_id, hashed_password=hashed))
            yield

    return test_lifespan


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Yield a TestClient bound to a fresh, seeded app.

    The shared slowapi limiter is reset first so login counts from earlier
    tests do not leak into this one.
    """
    limiter.reset()
    app = create_app(test_settings)
    app.router.lifespan_context = _seeded_lifespan()
    with TestClient(app, base_url="https://testserver", raise_server_exceptions=True) as c:
        yield c


def issue_token(client: TestClient, dealer_id: int) -> str:
    """Issue a token with the app's own TokenService, skipping the login round-trip."""
    return client.app.state.token_service.issue(dealer_id)


def auth_headers(token: str) -> dict[str, str]:
    """Send token as the jwt cookie, overriding anything in the client's cookie jar."""
    return {"Cookie": f"jwt={token}"}
