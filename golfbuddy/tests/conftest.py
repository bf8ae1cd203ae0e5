"""
Shared pytest configuration for backend tests.

Uses an in-memory SQLite database by default. Set TEST_DATABASE_URL to run
against PostgreSQL instead.

SAFETY: a non-SQLite TEST_DATABASE_URL must name a database containing the
substring "test", since every test drops the schema on teardown.
"""

import os
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from golfbuddy.database.db import Base, is_sqlite_url, configure_sqlite_engine
from golfbuddy.database.models import User


def _resolve_test_database_url() -> str:
    """Build the test database URL with safety checks.

    Raises ``RuntimeError`` if a server database URL does not point to a
    database whose name contains "test".
    """
    url = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    if is_sqlite_url(url):
        return url

    db_name = url.rsplit("/", 1)[-1].split("?")[0]  # strip query params
    if "test" not in db_name.lower():
        raise RuntimeError(
            f"SAFETY: Refusing to run tests against database '{db_name}'. "
            f"Set TEST_DATABASE_URL to a database whose name contains 'test'."
        )
    return url


TEST_DATABASE_URL = _resolve_test_database_url()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine with a fresh schema."""
    if is_sqlite_url(TEST_DATABASE_URL):
        # One shared connection so every session sees the same in-memory database
        engine = create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        configure_sqlite_engine(engine)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """Database session for a single test."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def create_test_user(
    db_session,
    username,
    location="San Francisco",
    skill_level="intermediate",
    handicap=None,
):
    """Helper: insert a user directly and return its id."""
    user = User(
        email=f"{username}@example.com",
        username=username,
        full_name=username.title(),
        skill_level=skill_level,
        handicap=handicap,
        location=location,
    )
    db_session.add(user)
    await db_session.flush()
    return user.id


@pytest_asyncio.fixture
async def users(db_session):
    """Create four golfers."""
    alice = await create_test_user(db_session, "alice", handicap=12)
    bob = await create_test_user(db_session, "bob", handicap=8)
    carol = await create_test_user(db_session, "carol", location="Portland", handicap=20)
    dave = await create_test_user(db_session, "dave", skill_level="beginner")
    return {"alice": alice, "bob": bob, "carol": carol, "dave": dave}


@pytest_asyncio.fixture
async def make_user(db_session):
    """Factory fixture wrapping create_test_user for tests that need custom golfers."""

    async def _make(username, **kwargs):
        return await create_test_user(db_session, username, **kwargs)

    return _make
