"""
Pytest configuration and fixtures for testing.
"""
import os

# Settings are read at import time, so the environment must be prepared first
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./weddinghub_test.db")
os.environ["CACHE_ENABLED"] = "false"
os.environ["EVENTS_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["START_WORKER"] = "false"

import fnmatch
import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from weddinghub.main import app
from weddinghub.db.session import Base, get_session
from weddinghub.core.security import hash_password, create_access_token, create_refresh_token
from weddinghub.db.models.admin_user import AdminUser, AppRoleEnum
from weddinghub.db.models.guest import Guest
from weddinghub.db.models.wedding_setting import WeddingSetting
from weddinghub.cache.redis_client import cache
from weddinghub.services import rsvp_service


# Test database URL - use environment variable if available (e.g. a PostgreSQL container)
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", os.environ["DATABASE_URL"])

ADMIN_PASSWORD = "Test123!@#"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
)


# Create test session factory
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.
    Tables are dropped and recreated around every test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    
    async with TestSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
    
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.
    Overrides the database session dependency.
    """
    async def override_get_session():
        yield db_session
    
    app.dependency_overrides[get_session] = override_get_session
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> AdminUser:
    admin = AdminUser(
        email="admin@example.com",
        hashed_password=hash_password(ADMIN_PASSWORD),
        full_name="Test Admin",
        role=AppRoleEnum.admin
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture
def admin_token(test_admin: AdminUser) -> str:
    """Generate a valid access token for test_admin."""
    return create_access_token({"sub": str(test_admin.id), "role": test_admin.role.value})


@pytest.fixture
def admin_refresh_token(test_admin: AdminUser) -> str:
    return create_refresh_token({"sub": str(test_admin.id), "role": test_admin.role.value})


@pytest.fixture
def auth_headers(admin_token: str) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest_asyncio.fixture
async def test_guest(db_session: AsyncSession) -> Guest:
    """A guest who may bring a plus-one."""
    guest = Guest(name="Thandi Mokoena", email="thandi@example.com", invite_code="abc123", plus_one_allowed=True)
    db_session.add(guest)
    await db_session.commit()
    await db_session.refresh(guest)
    return guest


@pytest_asyncio.fixture
async def solo_guest(db_session: AsyncSession) -> Guest:
    """A guest invited without a plus-one."""
    guest = Guest(name="Pieter van Wyk", invite_code="solo42", plus_one_allowed=False)
    db_session.add(guest)
    await db_session.commit()
    await db_session.refresh(guest)
    return guest


@pytest.fixture
def make_settings(db_session: AsyncSession):
    """Store wedding settings directly, bypassing the admin API."""
    async def _make(**values):
        for key, value in values.items():
            db_session.add(WeddingSetting(key=key, value=value))
        await db_session.commit()
    return _make


class FakeRedis:
    """In-memory stand-in for the handful of async redis commands the cache uses."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, expire, value):
        self.store[key] = value

    async def delete(self, *keys):
        return sum(self.store.pop(key, None) is not None for key in keys)

    async def scan_iter(self, match="*"):
        for key in list(self.store):
            if fnmatch.fnmatch(key, match):
                yield key

    async def exists(self, key):
        return int(key in self.store)


@pytest.fixture
def fake_redis(monkeypatch) -> FakeRedis:
    """Switch the cache on, backed by an in-memory fake instead of a server."""
    fake = FakeRedis()
    monkeypatch.setattr(cache, "enabled", True)
    monkeypatch.setattr(cache, "_get_client", lambda: fake)
    return fake


@pytest.fixture(autouse=True)
def fresh_submission_guard(monkeypatch):
    """Give every test its own in-flight submission registry."""
    guard = rsvp_service.SubmissionGuard()
    monkeypatch.setattr(rsvp_service, "submission_guard", guard)
    return guard


@pytest.fixture(autouse=True)
def mock_password_hashing(monkeypatch):
    """
    Mock bcrypt password hashing for testing environments where bcrypt cannot be installed.
    This fixture is autouse, so it applies to all tests automatically.
    """
    class MockPasswordContext:
        """Mock password context that doesn't require bcrypt."""
        def hash(self, password: str) -> str:
            return f"$2b$12$mockedhash{password}"
        
        def verify(self, plain: str, hashed: str) -> bool:
            expected_hash = f"$2b$12$mockedhash{plain}"
            return hashed == expected_hash
    
    from weddinghub.core import security
    monkeypatch.setattr(security, "pwd_context", MockPasswordContext())


@pytest.fixture
def published_events(monkeypatch) -> list:
    """Capture published events instead of sending them to RabbitMQ."""
    events = []

    async def mock_publish(routing_key, payload):
        events.append((routing_key, payload))
    
    from weddinghub.events import publisher
    monkeypatch.setattr(publisher, "publish_event", mock_publish)
    return events
