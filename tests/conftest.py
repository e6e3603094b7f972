"""Pytest fixtures for fleet console tests.

Client-side tests talk to the reference backend in-process through
``httpx.ASGITransport``; each test gets its own SQLite file database.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fleet_console.client.preferences import MemoryPreferences
from fleet_console.config import Settings
from fleet_console.console.app import AdminConsole
from fleet_console.server.app import create_app
from fleet_console.server.database import Database
from fleet_console.server.seed import seed_demo_data

ADMIN_TOKEN = "test-admin"
CLIENT_TOKEN = "test-client"
SESSION_COOKIE = "fleet_session"
BASE_URL = "http://fleet.test"


def make_settings(**overrides) -> Settings:
    """Settings for tests, independent of the environment."""
    values = dict(
        api_base_url=BASE_URL,
        session_cookie=SESSION_COOKIE,
        session_token=ADMIN_TOKEN,
        preferences_path="",
        default_page_size=10,
        http_timeout=5.0,
        database_url="sqlite+aiosqlite:///:memory:",
        dev_admin_token=ADMIN_TOKEN,
        dev_client_token=CLIENT_TOKEN,
        host="127.0.0.1",
        port=8000,
        debug=False,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test settings with a per-test database file."""
    return make_settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'fleet.db'}")


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Create test database with all tables."""
    db = Database(settings.database_url)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def seeded_db(database: Database) -> Database:
    """Database with the demo cars, employees and rates."""
    async with database.session() as session:
        await seed_demo_data(session)
    return database


@pytest.fixture
def app(settings: Settings, database: Database):
    """Reference backend bound to the test database."""
    return create_app(settings, database)


def _client(app, token: str | None) -> AsyncClient:
    cookies = {SESSION_COOKIE: token} if token else None
    return AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL, cookies=cookies)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client signed in as admin."""
    async with _client(app, ADMIN_TOKEN) as ac:
        yield ac


@pytest_asyncio.fixture
async def client_role_client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client signed in as a car owner."""
    async with _client(app, CLIENT_TOKEN) as ac:
        yield ac


@pytest_asyncio.fixture
async def anonymous_client(app) -> AsyncGenerator[AsyncClient, None]:
    async with _client(app, None) as ac:
        yield ac


@pytest.fixture
def preferences() -> MemoryPreferences:
    return MemoryPreferences()


@pytest_asyncio.fixture
async def console(
    settings: Settings,
    seeded_db: Database,
    client: AsyncClient,
    preferences: MemoryPreferences,
) -> AsyncGenerator[AdminConsole, None]:
    """Admin console wired to the seeded reference backend."""
    async with AdminConsole(settings, http=client, preferences=preferences) as c:
        yield c


@pytest_asyncio.fixture
async def client_console(
    settings: Settings,
    seeded_db: Database,
    client_role_client: AsyncClient,
    preferences: MemoryPreferences,
) -> AsyncGenerator[AdminConsole, None]:
    """Console session of a car owner."""
    async with AdminConsole(settings, http=client_role_client, preferences=preferences) as c:
        yield c
