from typing import Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401 (registers table metadata)
from config import ApplicationConfig
from src.app.services.identity_provider import Principal
from src.depends import get_payment_gateway, get_principal, get_session
from tests.fixtures.payment_gateway import FakePaymentGateway


class IntegrationTestConfig(ApplicationConfig):
    STRIPE_SECRET_KEY = "sk_test_123"
    APP_URL = "https://app.example.com"
    API_PREFIX = "/api"
    AUTO_CREATE_SCHEMA = False
    RATE_LIMIT_ENABLED = False
    ENABLE_SENTRY = 0
    ENABLE_LOGGING_MIDDLEWARE = True
    CORS_ORIGINS = []


class AuthState:
    """Who the test client is signed in as"""

    def __init__(self):
        self.principal: Optional[Principal] = Principal(user_id="user_1", email="ada@example.com")

    def sign_in(self, user_id: str, email: Optional[str] = None) -> None:
        self.principal = Principal(user_id=user_id, email=email)

    def sign_out(self) -> None:
        self.principal = None


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'billing_test.db'}", echo=False, future=True
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def fake_gateway():
    return FakePaymentGateway()


@pytest_asyncio.fixture
async def auth():
    return AuthState()


@pytest_asyncio.fixture
async def app(session_factory, fake_gateway, auth):
    """Application with database, gateway and identity overridden"""
    from src.api.app import create_app

    app = create_app(IntegrationTestConfig)

    # Each request gets its own session, as in production
    async def override_get_session():
        async with session_factory() as session:
            yield session

    async def override_get_principal():
        return auth.principal

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    app.dependency_overrides[get_principal] = override_get_principal
    yield app

    await app.state.payment_gateway.aclose()
    await app.state.redis.aclose()


@pytest_asyncio.fixture
async def client(app):
    """Create test client; ASGITransport does not run the lifespan"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
