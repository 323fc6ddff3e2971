import os
import uuid

# Settings are required at import time; give the test run its own
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RUN_MIGRATIONS", "false")

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token, hash_password
from app.main import create_app
from app.core import models
from app.core.analysis.scoring import get_scoring_engine
from app.core.database import Base, get_db
from app.core.config import Settings

# In-memory SQLite shared by every connection of one test
TEST_DATABASE_URL = "sqlite+aiosqlite://"

test_settings = Settings(
    DATABASE_URL=TEST_DATABASE_URL,
    SECRET_KEY="test-secret-key",
    RUN_MIGRATIONS=False,
)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Fresh schema for every test, dropped once it is done
@pytest_asyncio.fixture(scope="function")
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# Create session and rollback once it is done
@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    TestingSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()
        await session.close()


@pytest_asyncio.fixture(scope="function")
async def app():
    application = create_app(test_settings)
    yield application
    application.dependency_overrides.clear()
    await application.state.engine.dispose()


# Client
@pytest_asyncio.fixture(scope="function")
async def client(app, db_session: AsyncSession):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


# Swap the scoring engine of the app under test
@pytest_asyncio.fixture(scope="function")
async def use_engine(app):
    def _use(engine):
        app.dependency_overrides[get_scoring_engine] = lambda: engine

    return _use


async def _make_user(db_session: AsyncSession, prefix: str) -> models.User:
    # Generate unique email for each test to avoid duplicates
    unique_email = f"{prefix}_{uuid.uuid4().hex[:8]}@gmail.com"
    hashed_pwd = hash_password("password123")  # Make sure to hash the password

    user = models.User(email=unique_email, password=hashed_pwd)

    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


# User
@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession):
    return await _make_user(db_session, "test")


# Somebody else, to check ownership rules
@pytest_asyncio.fixture(scope="function")
async def other_user(db_session: AsyncSession):
    return await _make_user(db_session, "other")


# Token for user
@pytest_asyncio.fixture(scope="function")
async def auth_headers_user(test_user):
    token = create_access_token({"user_id": str(test_user.id)}, test_settings)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def auth_headers_other(other_user):
    token = create_access_token({"user_id": str(other_user.id)}, test_settings)
    return {"Authorization": f"Bearer {token}"}


# Hotel with nothing attached yet
@pytest_asyncio.fixture(scope="function")
async def test_hotel(db_session: AsyncSession, test_user):
    hotel = models.Hotel(
        url="https://example.com",
        name=f"Test Hotel {uuid.uuid4().hex[:8]}",
        location="Paris, France",
        accessibility_score=7.5,
        user_id=test_user.id,
    )
    db_session.add(hotel)
    await db_session.commit()
    await db_session.refresh(hotel)
    return hotel
