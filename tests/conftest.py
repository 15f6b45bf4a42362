"""
Pytest configuration and fixtures for Message Dispatcher tests.
"""

from datetime import datetime
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.message import Base, Message, MessageStatus


# Use a separate in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def test_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def message_a() -> Message:
    """An unsent message with a valid recipient."""
    return Message(
        id="msg-a",
        phone_number="+905551234567",
        content="Your order has shipped",
        status=MessageStatus.UNSENT,
        created_at=datetime(2024, 5, 1, 12, 0, 0),
    )


@pytest.fixture
def message_b() -> Message:
    """A second unsent message, created after message_a."""
    return Message(
        id="msg-b",
        phone_number="+905559876543",
        content="Your code is 4821",
        status=MessageStatus.UNSENT,
        created_at=datetime(2024, 5, 1, 12, 5, 0),
    )


@pytest.fixture
def sent_message() -> Message:
    """A message that was already delivered."""
    return Message(
        id="msg-sent",
        phone_number="+905550001122",
        content="Welcome aboard",
        status=MessageStatus.SENT,
        delivery_id="67f2f8a8-ea58-4ed0-a6f9-ff217df4d849",
        sent_at=datetime(2024, 5, 1, 11, 0, 0),
        created_at=datetime(2024, 5, 1, 10, 0, 0),
    )


@pytest.fixture
def mock_store():
    """Message store double."""
    store = MagicMock()
    store.fetch_by_status = AsyncMock(return_value=[])
    store.mark_sent = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_delivery_client():
    """Delivery client double that accepts every message."""
    client = MagicMock()
    client.send = AsyncMock(return_value="w1")
    return client


@pytest.fixture
def mock_cache():
    """Cache double."""
    cache = MagicMock()
    cache.set_with_ttl = AsyncMock(return_value=None)
    return cache
