"""Pytest configuration and shared fixtures."""

import fnmatch
import os
from typing import Dict, Optional

# Settings are read at import time; point them at SQLite before importing stackit
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from stackit.core.context import SessionContext
from stackit.dependencies import get_db
from stackit.main import app
from stackit.models import Base, Profile, User
from stackit.services.cache_service import CacheService, get_cache


class InMemoryCache(CacheService):
    """Dict-backed stand-in for Redis. TTLs are recorded but not enforced."""

    def __init__(self):
        super().__init__("redis://unused")
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl: int = 300) -> bool:
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete_pattern(self, pattern: str) -> int:
        keys = [k for k in self.store if fnmatch.fnmatch(k, pattern)]
        for k in keys:
            del self.store[k]
        return len(keys)

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest_asyncio.fixture
async def session_factory():
    """In-memory SQLite database shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(session_factory):
    """A single database session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


async def make_user(db: AsyncSession, email: str) -> User:
    user = User(
        email=email,
        hashed_password="not-a-real-hash",
        profile=Profile(email=email),
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def alice(test_db: AsyncSession) -> User:
    return await make_user(test_db, "alice@example.com")


@pytest_asyncio.fixture
async def bob(test_db: AsyncSession) -> User:
    return await make_user(test_db, "bob@example.com")


@pytest.fixture
def alice_ctx(alice: User) -> SessionContext:
    return SessionContext(user=alice, token_id="alice-token")


@pytest.fixture
def bob_ctx(bob: User) -> SessionContext:
    return SessionContext(user=bob, token_id="bob-token")


@pytest.fixture
def anon_ctx() -> SessionContext:
    return SessionContext.anonymous()


@pytest_asyncio.fixture
async def client(session_factory, cache):
    """HTTP client wired to the test database and the in-memory cache."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
