import os
import tempfile
from typing import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./marketplace_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="marketplace-uploads-"))

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config import settings
from app.database import Base, get_db
from app.main import app

TEST_DATABASE_URL = settings.DATABASE_URL

# Each test runs on its own event loop; pooled connections would outlive it
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_async_session_maker = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with test_async_session_maker() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient) -> dict:
    user_data = {
        "email": "test@example.com",
        "password": "testpassword123",
    }
    response = await client.post("/api/v1/auth/register", json=user_data)
    return {**user_data, "response": response.json()}


@pytest_asyncio.fixture
async def auth_token(client: AsyncClient, registered_user: dict) -> str:
    response = await client.post(
        "/api/v1/auth/login",
        data={
            "username": registered_user["email"],
            "password": registered_user["password"],
        },
    )
    return response.json()["access_token"]


@pytest_asyncio.fixture
async def make_user(client: AsyncClient):
    """Register and log in a user; returns {"id", "email", "headers"}."""

    async def _make_user(email: str, password: str = "testpassword123") -> dict:
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password},
        )
        assert response.status_code == 201
        user_id = response.json()["id"]

        response = await client.post(
            "/api/v1/auth/login",
            data={"username": email, "password": password},
        )
        token = response.json()["access_token"]
        return {
            "id": user_id,
            "email": email,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make_user


@pytest_asyncio.fixture
async def seller(make_user) -> dict:
    return await make_user("seller@example.com")


@pytest_asyncio.fixture
async def buyer(make_user) -> dict:
    return await make_user("buyer@example.com")


@pytest_asyncio.fixture
async def listing(client: AsyncClient, seller: dict) -> dict:
    response = await client.post(
        "/api/v1/announcements/",
        json={
            "title": "Road bike",
            "description": "Aluminium frame, 54cm, recently serviced",
            "price": "250.00",
            "category": "Sports",
        },
        headers=seller["headers"],
    )
    assert response.status_code == 201
    return response.json()
