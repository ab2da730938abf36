"""
AuthGate Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── hasher:          Low-cost bcrypt hasher (rounds=4) so tests stay fast
    ├── settings:        Settings pointing at a per-test SQLite file
    ├── app:             create_app(settings) with tables created
    └── test_client:     HTTPX AsyncClient routed straight into the app
"""

import os
from http.cookies import SimpleCookie
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set before any authgate import: authgate.main builds a module-level app from
# the environment, and it must never point at a real database.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./authgate_import.db"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from authgate.config import Settings  # noqa: E402
from authgate.main import create_app  # noqa: E402
from authgate.services import PasswordHasher  # noqa: E402

TEST_JWT_SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'authgate_test.db'}",
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app over ASGITransport.

    https base URL: the auth cookie is Secure and the cookie jar honors that.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as client:
        yield client


def _cookie_from(response, name: str = "access_token") -> Optional[str]:
    header = response.headers.get("set-cookie")
    if not header:
        return None
    jar = SimpleCookie()
    jar.load(header)
    morsel = jar.get(name)
    return morsel.value if morsel else None


@pytest.fixture
def cookie_from():
    """Reads a cookie value straight from a response's Set-Cookie header."""
    return _cookie_from
