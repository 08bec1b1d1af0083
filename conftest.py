import os

# Must be set before app.core.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel

import app.models  # noqa: F401
from app.main import app as fastapi_app
from app.db.database import get_db
from app.core.security import create_access_token, get_password_hash
from app.core.ws_manager import NotificationManager
from app.models.user import User

TEST_PASSWORD = "password123"

# bcrypt is slow; hash once for every factory-built user
_TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest_asyncio.fixture(scope="function")
async def async_test_engine():
    """Fresh in-memory database for each test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(async_test_engine):
    return sessionmaker(
        bind=async_test_engine,
        class_=AsyncSessionSQLModel,
        expire_on_commit=False,
        autoflush=False
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    """Session for calling CRUD functions directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """HTTP client with get_db bound to the test database, one session per request."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def ws_manager(monkeypatch):
    """Isolated push manager so queued notifications do not leak between tests."""
    fresh = NotificationManager()
    monkeypatch.setattr("app.crud.notification.manager", fresh)
    monkeypatch.setattr("app.api.notification.manager", fresh)
    return fresh


@pytest.fixture
def create_user(db_session):
    """Factory inserting users with the shared test password."""
    counter = {"n": 0}

    async def _create_user(name: str = None, email: str = None, is_active: bool = True) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            hashed_password=_TEST_PASSWORD_HASH,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create_user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def headers_for():
    return auth_headers
