"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file, created with the same engine
setup the application uses (foreign keys on, BEGIN IMMEDIATE transactions).
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.portal.api.dependencies import get_clock, get_db_session
from src.portal.core.db import create_engine_for_url, get_session_factory
from src.portal.main import create_app
from src.portal.models import Event, User
from tests.factories import EventFactory, UserFactory
from tests.helpers import FrozenClock, persist


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Fresh database file with every table created."""
    test_engine = create_engine_for_url(sqlite_url(tmp_path / "portal.db"), poolclass=NullPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for seeding data and calling services.

    Services commit or roll back themselves. Seed data must be committed
    explicitly (see ``tests.helpers.persist``).
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
async def service_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session handed to the service under test.

    Kept apart from the seeding session: a service rollback expires every
    object in its session, and seeded fixtures must stay readable.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
async def fresh_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """A third session for reading back committed state.

    Every read opens a write transaction on SQLite; use ``tests.helpers.read``
    so it is closed straight away.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
async def admin(db_session: AsyncSession) -> User:
    user = UserFactory.admin(email="admin@example.com")
    await persist(db_session, user)
    return user


@pytest.fixture
async def resident(db_session: AsyncSession) -> User:
    user = UserFactory.build(name="Asha Rao", email="asha@example.com", flat_number="402")
    await persist(db_session, user)
    return user


@pytest.fixture
async def open_event(db_session: AsyncSession) -> Event:
    """Published individual event whose registration is open at BASE_TIME."""
    event = EventFactory.build()
    await persist(db_session, event)
    return event


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession], clock: FrozenClock
) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the app, bound to the test database and clock."""
    app = create_app()

    async def _db_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _db_session
    app.dependency_overrides[get_clock] = lambda: clock

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
