"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("MANIFEST_BASE_URL", "https://manifest.test/v1")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import (
    AirplayPayment,
    Artist,
    ArtistDiscovery,
    Base,
    DiscoveryStatus,
    ListenerPlayback,
    ListenerReferral,
    Scout,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs explicit BEGIN for SAVEPOINT to behave
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session matching the application's session settings."""
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_payment_processor():
    """Payment processor returning a payout ID per scout."""
    processor = AsyncMock()

    async def create_scout_payout(scout, amount, period):
        return f"po_{scout.id}_{period}"

    processor.create_scout_payout = AsyncMock(side_effect=create_scout_payout)
    return processor


@pytest.fixture
def mock_notifier():
    """Scout notifier mock."""
    notifier = AsyncMock()
    notifier.notify_scout_earnings = AsyncMock()
    return notifier


class DataFactory:
    """Creates persisted domain records for integration tests."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _add(self, entity):
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def scout(self, name: str = "Scout", **data) -> Scout:
        data.setdefault("payout_account_id", f"acct_{name.lower()}")
        data.setdefault("email", f"{name.lower()}@example.com")
        return await self._add(Scout(name=name, **data))

    async def artist(
        self, name: str = "Artist", tier: str = "TIER_20", **data
    ) -> Artist:
        return await self._add(Artist(name=name, airplay_tier=tier, **data))

    async def discovery(
        self,
        scout: Scout,
        artist: Artist,
        converted_at: datetime | None = datetime(2024, 12, 15, tzinfo=UTC),
        is_prepurchase: bool = False,
        status: str = DiscoveryStatus.CONVERTED.value,
    ) -> ArtistDiscovery:
        return await self._add(
            ArtistDiscovery(
                scout_id=scout.id,
                artist_id=artist.id,
                status=status,
                has_converted=converted_at is not None,
                converted_at=converted_at,
                is_prepurchase=is_prepurchase,
            )
        )

    async def payment(
        self, artist: Artist, tier: str, period: str, created_at: datetime
    ) -> AirplayPayment:
        return await self._add(
            AirplayPayment(
                artist_id=artist.id,
                tier=tier,
                period=period,
                amount=Decimal("0"),
                created_at=created_at,
            )
        )

    async def referral(self, scout: Scout, listener_id: int) -> ListenerReferral:
        return await self._add(
            ListenerReferral(scout_id=scout.id, listener_id=listener_id)
        )

    async def playback(
        self, listener_id: int, artist: Artist, played_at: datetime
    ) -> ListenerPlayback:
        return await self._add(
            ListenerPlayback(
                listener_id=listener_id,
                artist_id=artist.id,
                track_title="Track",
                played_at=played_at,
            )
        )


@pytest.fixture
def factory(db_session) -> DataFactory:
    """Domain record factory bound to the test session."""
    return DataFactory(db_session)
