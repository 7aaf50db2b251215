"""
Shared test fixtures for autotrader backend tests.

Provides reusable fixtures for:
- Async database engine and session maker (in-memory SQLite)
- TradeStore bound to the test database
- Mock execution gateway and news calendar
- Price series factories for strategy tests
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from autotrader.gateways.base import AccountInfo, BrokerGateway, OrderResult, SymbolQuote
from autotrader.services.event_bus import EventBus


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def async_engine():
    """Create an in-memory async SQLite engine for testing."""
    from autotrader.models import Base

    # StaticPool keeps one connection so every session sees the same in-memory DB
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(async_engine):
    return async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def trade_store(session_maker):
    from autotrader.services.trade_store import TradeStore

    return TradeStore(session_maker)


@pytest.fixture
async def account(trade_store):
    """A demo account with default bot settings trading EURUSD."""
    acct = await trade_store.create_account({
        "id": "acct-1",
        "broker_name": "Demo Broker",
        "account_number": "1001",
        "server_name": "Demo-Server",
        "is_demo": True,
    })
    await trade_store.upsert_bot_settings("acct-1", {
        "strategy": "ma_crossover",
        "risk_per_trade": 0.01,
        "trading_symbols": ["EURUSD"],
        "news_avoidance_minutes": 30,
        "strategy_params": {},
    })
    return acct


# ---------------------------------------------------------------------------
# Collaborator mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_gateway():
    """Mock execution gateway that is connected and fills every order."""
    gateway = MagicMock(spec=BrokerGateway)
    gateway.is_connected = AsyncMock(return_value=True)
    gateway.get_account_info = AsyncMock(return_value=AccountInfo(balance=100000.0, equity=100000.0))
    gateway.get_symbol_price = AsyncMock(return_value=SymbolQuote("EURUSD", 1.1000, 1.1002))
    gateway.submit_order = AsyncMock(
        return_value=OrderResult(ticket="T-1", fill_price=1.1002, fill_volume=1.0)
    )
    gateway.close_position = AsyncMock()
    gateway.close = AsyncMock()
    return gateway


@pytest.fixture
def mock_news():
    """News calendar with no upcoming high-impact events."""
    news = MagicMock()
    news.has_high_impact_event = AsyncMock(return_value=False)
    return news


@pytest.fixture
def bus():
    """Isolated event bus recording every published event in bus.events."""
    event_bus = EventBus()
    event_bus.events = []
    event_bus.subscribe(event_bus.events.append)
    return event_bus


# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------


def make_crossover_prices(final_price=1.1000, length=60, direction="up"):
    """
    Flat history then a single jump on the last point, which moves the fast
    SMA past the slow SMA (previous point had them equal).

    The flat base is exactly representable (1.0 or 1.25) so the previous
    fast and slow SMAs compare equal without float noise.
    """
    base = 1.0 if direction == "up" else 1.25
    return [base] * (length - 1) + [final_price]


@pytest.fixture
def crossover_prices():
    """Factory fixture for MA crossover price series."""
    return make_crossover_prices
