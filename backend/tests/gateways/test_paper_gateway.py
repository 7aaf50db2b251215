"""
Tests for backend/autotrader/gateways/paper_gateway.py

Covers:
- Quotes: known/unknown symbols, random walk stays in bounds
- Orders: fill at ask/bid, volume and direction validation
- Close: realized P&L into balance, unknown ticket
- Disconnected gateway
"""

import pytest

from autotrader.exceptions import ConnectivityError, ExecutionError
from autotrader.gateways.factory import create_gateway
from autotrader.gateways.mt5_bridge_gateway import MT5BridgeGateway
from autotrader.gateways.paper_gateway import DEFAULT_SYMBOLS, PaperBrokerGateway


@pytest.fixture
def paper():
    return PaperBrokerGateway(starting_balance=10000.0, seed=7)


class TestQuotes:
    @pytest.mark.asyncio
    async def test_quote_has_spread(self, paper):
        quote = await paper.get_symbol_price("EURUSD")
        assert quote.ask > quote.bid
        assert quote.bid == DEFAULT_SYMBOLS["EURUSD"][0]

    @pytest.mark.asyncio
    async def test_unknown_symbol(self, paper):
        with pytest.raises(ConnectivityError, match="XAUUSD"):
            await paper.get_symbol_price("XAUUSD")

    @pytest.mark.asyncio
    async def test_random_walk_stays_in_bounds(self, paper):
        floor, ceiling = DEFAULT_SYMBOLS["GBPUSD"][3]
        for _ in range(500):
            quote = await paper.get_symbol_price("GBPUSD")
            assert floor <= quote.bid <= ceiling

    @pytest.mark.asyncio
    async def test_same_seed_same_walk(self):
        a = PaperBrokerGateway(seed=1)
        b = PaperBrokerGateway(seed=1)
        for _ in range(10):
            assert await a.get_symbol_price("USDJPY") == await b.get_symbol_price("USDJPY")


class TestOrders:
    @pytest.mark.asyncio
    async def test_buy_fills_at_ask(self, paper):
        quote = paper._quote("EURUSD")
        result = await paper.submit_order("EURUSD", "BUY", 0.5)

        assert result.fill_price == quote.ask
        assert result.fill_volume == 0.5
        assert result.ticket in paper.positions

    @pytest.mark.asyncio
    async def test_sell_fills_at_bid(self, paper):
        quote = paper._quote("EURUSD")
        result = await paper.submit_order("EURUSD", "sell", 0.5)
        assert result.fill_price == quote.bid

    @pytest.mark.asyncio
    async def test_zero_volume_rejected(self, paper):
        with pytest.raises(ExecutionError, match="Invalid volume"):
            await paper.submit_order("EURUSD", "BUY", 0.0)
        assert paper.positions == {}

    @pytest.mark.asyncio
    async def test_unknown_direction_rejected(self, paper):
        with pytest.raises(ExecutionError):
            await paper.submit_order("EURUSD", "HOLD", 1.0)

    @pytest.mark.asyncio
    async def test_unknown_symbol_rejected(self, paper):
        with pytest.raises(ExecutionError):
            await paper.submit_order("XAUUSD", "BUY", 1.0)


class TestClose:
    @pytest.mark.asyncio
    async def test_close_realizes_profit(self, paper):
        result = await paper.submit_order("EURUSD", "BUY", 1.0)
        paper._bids["EURUSD"] = result.fill_price + 0.0010

        closed = await paper.close_position(result.ticket)

        assert closed.price == pytest.approx(result.fill_price + 0.0010)
        assert closed.profit == pytest.approx(100.0)
        assert paper.balance == pytest.approx(10100.0)
        assert result.ticket not in paper.positions

    @pytest.mark.asyncio
    async def test_equity_includes_floating_pnl(self, paper):
        result = await paper.submit_order("EURUSD", "SELL", 1.0)
        spread = DEFAULT_SYMBOLS["EURUSD"][1]
        paper._bids["EURUSD"] = result.fill_price - 0.0020 - spread

        info = await paper.get_account_info()
        assert info.balance == 10000.0
        assert info.equity == pytest.approx(10200.0)

    @pytest.mark.asyncio
    async def test_close_unknown_ticket(self, paper):
        with pytest.raises(ExecutionError, match="not found"):
            await paper.close_position("nope")


class TestDisconnected:
    @pytest.mark.asyncio
    async def test_calls_fail_when_disconnected(self, paper):
        paper.set_connected(False)

        assert await paper.is_connected() is False
        with pytest.raises(ConnectivityError):
            await paper.get_symbol_price("EURUSD")
        with pytest.raises(ConnectivityError):
            await paper.get_account_info()


class TestFactory:
    def test_paper(self):
        assert isinstance(create_gateway("paper"), PaperBrokerGateway)

    def test_mt5_bridge(self):
        assert isinstance(create_gateway("MT5_BRIDGE"), MT5BridgeGateway)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown gateway type"):
            create_gateway("fix")
