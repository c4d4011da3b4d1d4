import os

# Settings are read at import time, so the environment must be set first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.v1 import deps  # noqa: E402
from app.db import models  # noqa: E402,F401
from app.db.base_class import Base  # noqa: E402
from app.db.database import get_async_db  # noqa: E402
from app.main import app  # noqa: E402

API = "/api/v1"
TODAY = date(2024, 6, 15)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_async_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_db] = override_get_async_db
    app.dependency_overrides[deps.get_today] = lambda: TODAY
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register(client, email="ann@example.com", name="Ann", password="secret123"):
    response = await client.post(f"{API}/auth/register", json={"email": email, "name": name, "password": password})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def auth_headers(client):
    return await register(client)


@pytest_asyncio.fixture
async def categories(client, auth_headers):
    """The registered user's seeded categories keyed by name."""
    response = await client.get(f"{API}/categories/", headers=auth_headers)
    assert response.status_code == 200
    return {c["name"]: c for c in response.json()}


async def add_transaction(client, headers, category, amount, day, type_="expense", description=None):
    payload = {
        "amount": amount,
        "date": day.isoformat(),
        "type": type_,
        "categoryId": category["id"],
        "description": description,
    }
    response = await client.post(f"{API}/transactions/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
