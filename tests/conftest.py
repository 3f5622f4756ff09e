"""Pytest fixtures for Farm Time tests.

This module provides test fixtures that ensure:
1. No external calls are made (Google OAuth is replaced per test)
2. Every test gets its own SQLite database file
3. Isolated test environment with controlled configuration
"""

import os
from typing import AsyncGenerator, Awaitable, Callable

import httpx
import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from farm_time.api import create_app
from farm_time.auth.google import GoogleOAuth, get_google_oauth
from farm_time.auth.identity import resolve_or_create_user
from farm_time.auth.session import SessionStore
from farm_time.config import Settings, get_settings
from farm_time.database.connection import close_db, create_tables, get_db, init_db
from farm_time.database.models import User

LoginFn = Callable[[str, str, str], Awaitable[httpx.AsyncClient]]


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings pointing at a fresh SQLite file for this test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'farm.db'}")
    monkeypatch.delenv("EVENT_TIMEZONE", raising=False)
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[None, None]:
    """Initialized database with all tables created."""
    await init_db(settings)
    await create_tables()
    yield
    await close_db()


@pytest.fixture
async def db(database):
    """A database session for service-level tests."""
    async with get_db() as session:
        yield session


# =============================================================================
# Google OAuth
# =============================================================================


@pytest.fixture
def google_oauth(settings: Settings) -> GoogleOAuth:
    """A configured client. Tests stub `exchange_code`/`get_user_info`."""
    return GoogleOAuth(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="http://testserver/auth/google/callback",
    )


# =============================================================================
# HTTP Clients
# =============================================================================


@pytest.fixture
def app(settings: Settings, database, google_oauth: GoogleOAuth):
    """The FastAPI app. The database is opened by the `database` fixture."""
    app = create_app(settings)
    app.dependency_overrides[get_google_oauth] = lambda: google_oauth
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Anonymous client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client


@pytest.fixture
async def login(app, settings: Settings) -> AsyncGenerator[LoginFn, None]:
    """Factory for clients logged in as a given Google identity."""
    clients: list[httpx.AsyncClient] = []

    async def _login(google_id: str, email: str, name: str) -> httpx.AsyncClient:
        async with get_db() as session:
            user = await resolve_or_create_user(session, google_id, email, name, None)
            token = await SessionStore(session).create_session(user.id)

        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://testserver",
            cookies={settings.session_cookie_name: token},
        )
        clients.append(client)
        return client

    yield _login

    for client in clients:
        await client.aclose()


@pytest.fixture
async def admin_client(login: LoginFn) -> httpx.AsyncClient:
    """Logged in as the first user, who is an admin."""
    return await login("google-admin", "admin@example.com", "Ada Admin")


@pytest.fixture
async def member_client(admin_client, login: LoginFn) -> httpx.AsyncClient:
    """Logged in as a regular user (created after the admin)."""
    return await login("google-member", "member@example.com", "Max Member")


# =============================================================================
# Sample Data
# =============================================================================


@pytest.fixture
async def sample_user(db) -> User:
    return await resolve_or_create_user(
        db, "google-sample", "sample@example.com", "Sam Sample", None
    )


@pytest.fixture
def weekend_event() -> dict:
    """Friday 14:00 to Sunday 10:00."""
    return {
        "title": "Spring Work Weekend",
        "description": "Fence repairs and planting",
        "location": "North pasture",
        "start_time": "2024-06-14T14:00:00+00:00",
        "end_time": "2024-06-16T10:00:00+00:00",
    }


@pytest.fixture
def afternoon_event() -> dict:
    """Same-day 14:00 to 17:00: no meals are generated."""
    return {
        "title": "Barn Cleanup",
        "start_time": "2024-06-15T14:00:00+00:00",
        "end_time": "2024-06-15T17:00:00+00:00",
    }
