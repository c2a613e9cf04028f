"""Shared test fixtures."""

from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.gateways.base import StaticGatewayConfig
from app.gateways.mollie import MollieGateway
from app.models.payment import Base, Payment
from tests.fakes import MOLLIE_API, FakeMollie, InMemoryPaymentStore


@pytest.fixture
def mollie() -> FakeMollie:
    return FakeMollie()


@pytest_asyncio.fixture
async def http_client(mollie: FakeMollie):
    async with httpx.AsyncClient(transport=httpx.MockTransport(mollie.handler)) as client:
        yield client


@pytest.fixture
def store() -> InMemoryPaymentStore:
    return InMemoryPaymentStore()


@pytest.fixture
def gateway_config() -> StaticGatewayConfig:
    return StaticGatewayConfig({"api_key": "test_dHar4XY7LxsDOtmnkVtjNVWXLSlXsM"})


@pytest.fixture
def gateway(http_client, store, gateway_config) -> MollieGateway:
    return MollieGateway(http_client, store, gateway_config, api_base=MOLLIE_API)


@pytest_asyncio.fixture
async def db_session():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_session(db_session: AsyncSession):
    """Database session pre-loaded with a pending payment."""
    db_session.add(Payment(
        id="PAY-001",
        gateway="mollie",
        currency="EUR",
        amount=Decimal("12.99"),
        description="Order #1001",
        success_redirect="https://shop.test/orders/1001/thanks",
        cancel_redirect="https://shop.test/orders/1001/cancelled",
    ))
    await db_session.commit()

    yield db_session
