"""
Shared fixtures: an in-memory SQLite database per test, fakeredis in place
of the session store, and an httpx client bound to the ASGI app.
"""
import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from dentalbill.core.redis import redis_client
from dentalbill.core.security import get_password_hash
from dentalbill.db.models import ClinicProfile, Dentist
from dentalbill.db.session import get_session
from dentalbill.main import app
from dentalbill.services.tenant_service import TenantContext


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    monkeypatch.setattr(redis_client, "redis", fake)
    return fake


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_dentist(session: AsyncSession, email: str, name: str = "Dr. Test") -> Dentist:
    dentist = Dentist(name=name, email=email, password_hash=get_password_hash("secret123"))
    session.add(dentist)
    await session.flush()
    session.add(ClinicProfile(dentist_id=dentist.id))
    await session.commit()
    await session.refresh(dentist)
    return dentist


@pytest_asyncio.fixture
async def dentist(session) -> Dentist:
    return await create_dentist(session, "asha.clinic@example.com")


@pytest_asyncio.fixture
async def other_dentist(session) -> Dentist:
    return await create_dentist(session, "second.clinic@example.com", name="Dr. Other")


@pytest.fixture
def ctx(dentist) -> TenantContext:
    return TenantContext.from_session(dentist.id)


@pytest_asyncio.fixture
async def auth_client(client):
    """Client holding a real session for a freshly signed-up dentist."""
    response = await client.post("/api/v1/auth/signup", json={
        "name": "Dr. Asha",
        "email": "dr.asha@example.com",
        "password": "secret123",
    })
    assert response.status_code == 200
    data = response.json()
    client.headers["Authorization"] = f"Bearer {data['access_token']}"
    return client
