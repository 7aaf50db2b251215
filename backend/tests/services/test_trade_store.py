"""
Tests for backend/autotrader/services/trade_store.py
"""

from datetime import datetime, timedelta

import pydantic
import pytest

from autotrader.exceptions import ConfigurationError, ConflictError, NotFoundError
from autotrader.schemas.bot_settings import BotConfig


def _trade_record(**overrides):
    record = {
        "account_id": "acct-1",
        "ticket": "T-1",
        "symbol": "EURUSD",
        "type": "BUY",
        "volume": 1.0,
        "entry_price": 1.1002,
        "status": "open",
        "open_time": datetime(2024, 1, 8, 12, 0),
        "is_manual": False,
    }
    record.update(overrides)
    return record


class TestAccounts:
    @pytest.mark.asyncio
    async def test_create_and_get(self, account, trade_store):
        fetched = await trade_store.get_account("acct-1")
        assert fetched.broker_name == "Demo Broker"
        assert [a.id for a in await trade_store.list_accounts()] == ["acct-1"]

    @pytest.mark.asyncio
    async def test_duplicate_account_conflicts(self, account, trade_store):
        with pytest.raises(ConflictError):
            await trade_store.create_account({
                "id": "acct-1", "broker_name": "x", "account_number": "1", "server_name": "s",
            })

    @pytest.mark.asyncio
    async def test_missing_account_is_none(self, trade_store):
        assert await trade_store.get_account("nope") is None


class TestBotSettings:
    @pytest.mark.asyncio
    async def test_get_returns_frozen_snapshot(self, account, trade_store):
        config = await trade_store.get_bot_settings("acct-1")

        assert isinstance(config, BotConfig)
        assert config.account_id == "acct-1"
        assert config.risk_per_trade == 0.01
        with pytest.raises(pydantic.ValidationError):
            config.risk_per_trade = 0.5

    @pytest.mark.asyncio
    async def test_get_unconfigured_is_none(self, trade_store):
        assert await trade_store.get_bot_settings("acct-1") is None

    @pytest.mark.asyncio
    async def test_update_applies_patch(self, account, trade_store):
        config = await trade_store.update_bot_settings(
            "acct-1", {"risk_per_trade": 0.02, "strategy_params": {"fast_ma": 5}}
        )
        assert config.risk_per_trade == 0.02
        assert config.strategy_params == {"fast_ma": 5}
        assert config.trading_symbols == ["EURUSD"]

    @pytest.mark.asyncio
    async def test_update_ignores_unknown_fields(self, account, trade_store):
        config = await trade_store.update_bot_settings("acct-1", {"account_id": "other", "id": 99})
        assert config.account_id == "acct-1"

    @pytest.mark.asyncio
    async def test_update_without_settings(self, trade_store):
        with pytest.raises(ConfigurationError):
            await trade_store.update_bot_settings("acct-1", {"risk_per_trade": 0.02})

    @pytest.mark.asyncio
    async def test_upsert_requires_account(self, trade_store):
        with pytest.raises(NotFoundError):
            await trade_store.upsert_bot_settings("ghost", {"strategy": "rsi_strategy"})

    @pytest.mark.asyncio
    async def test_upsert_overwrites_existing(self, account, trade_store):
        row = await trade_store.upsert_bot_settings("acct-1", {"strategy": "rsi_strategy"})
        assert row.strategy == "rsi_strategy"
        assert (await trade_store.get_bot_settings("acct-1")).strategy == "rsi_strategy"


class TestTrades:
    @pytest.mark.asyncio
    async def test_list_newest_first_and_filter(self, account, trade_store):
        first = await trade_store.create_trade(_trade_record())
        second = await trade_store.create_trade(
            _trade_record(ticket="T-2", open_time=datetime(2024, 1, 8, 13, 0), status="closed")
        )

        assert [t.id for t in await trade_store.list_trades("acct-1")] == [second.id, first.id]
        assert [t.id for t in await trade_store.list_trades("acct-1", status="open")] == [first.id]
        assert [t.id for t in await trade_store.list_trades("acct-1", limit=1)] == [second.id]

    @pytest.mark.asyncio
    async def test_open_trades_filters(self, account, trade_store):
        auto = await trade_store.create_trade(_trade_record())
        await trade_store.create_trade(_trade_record(ticket="T-2", is_manual=True))
        await trade_store.create_trade(_trade_record(ticket="T-3", symbol="GBPUSD"))

        result = await trade_store.list_open_trades("acct-1", symbol="EURUSD", is_manual=False)
        assert [t.id for t in result] == [auto.id]

    @pytest.mark.asyncio
    async def test_mark_closed(self, account, trade_store):
        trade = await trade_store.create_trade(_trade_record())
        close_time = trade.open_time + timedelta(hours=2)

        closed = await trade_store.mark_trade_closed(trade.id, exit_price=1.1050, profit=480.0, close_time=close_time)

        assert closed.status == "closed"
        assert closed.exit_price == 1.1050
        assert closed.profit == 480.0
        assert closed.close_time == close_time

    @pytest.mark.asyncio
    async def test_mark_closed_unknown(self, trade_store):
        with pytest.raises(NotFoundError):
            await trade_store.mark_trade_closed(1, exit_price=1.0, profit=0.0)
