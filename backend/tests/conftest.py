"""
Users API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_repository: AsyncMock standing in for UserRepository
    ├── mock_hasher: MagicMock standing in for PasswordHasher
    ├── make_user: Factory for transient User instances
    ├── db_engine: Async engine on a fresh SQLite file with the schema created
    ├── db_session: Session on db_engine
    └── test_client: HTTPX AsyncClient wired to the app and db_engine
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any users_api import: settings are read at import time
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="users_api_test_"), "test.db")
)
os.environ["LOG_LEVEL"] = "WARNING"
# pbkdf2 is much faster than bcrypt; bcrypt is covered in test_credentials.py
os.environ["PASSWORD_HASH_SCHEME"] = "pbkdf2_sha256"

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from users_api import database  # noqa: E402
from users_api.models.user import User  # noqa: E402
from users_api.services.credentials import PasswordHasher  # noqa: E402
from users_api.services.user_repository import UserRepository  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_repository():
    """
    Provides a mock UserRepository.

    Every coroutine method is an AsyncMock; reads default to "not found"
    so each test states the records it needs.
    """
    repository = AsyncMock(spec=UserRepository)
    repository.find_all.return_value = []
    repository.find_by_id.return_value = None
    repository.find_by_email.return_value = None
    return repository


@pytest.fixture
def mock_hasher():
    hasher = MagicMock(spec=PasswordHasher)
    hasher.hash.return_value = "hashed_password"
    hasher.verify.return_value = True
    return hasher


@pytest.fixture
def make_user():
    """Factory for transient User instances (never added to a session)."""
    def _make_user(**overrides) -> User:
        fields = {
            "id": 1,
            "name": "John Wick",
            "email": "johnwick1@gmail.com",
            "age": 57,
            "dob": datetime(1966, 9, 2, tzinfo=timezone.utc),
            "password": "hashed_password123",
        }
        fields.update(overrides)
        return User(**fields)
    return _make_user


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Async engine on an empty SQLite file with the users table created."""
    engine = database.build_engine(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    await database.create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine, monkeypatch):
    """
    Provides an async HTTP test client for endpoint testing.

    The app's session dependency is overridden to use db_engine, and the
    module-level engine is swapped so /health probes the same database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/v1/users")
    """
    from users_api.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    monkeypatch.setattr(database, "engine", db_engine)
    app.dependency_overrides[database.get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
