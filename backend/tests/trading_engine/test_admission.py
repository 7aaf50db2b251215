"""
Tests for backend/autotrader/trading_engine/admission.py

Covers:
- extract_currencies for 6-char and short symbols
- News gate (blocks, queries both currencies, skips short symbols)
- Cooldown (5 minutes from the last admitted signal, not from discards)
- Confidence floor
- Cooldown never admits twice within the window for any signal sequence
"""

import asyncio
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from autotrader.exceptions import ConnectivityError
from autotrader.strategies import SignalAction, TradingSignal
from autotrader.trading_engine.admission import (
    REJECT_CONFIDENCE,
    REJECT_COOLDOWN,
    REJECT_NEWS,
    AdmissionController,
    extract_currencies,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def _make_signal(symbol="EURUSD", confidence=0.7, action=SignalAction.BUY):
    return TradingSignal(symbol=symbol, action=action, confidence=confidence, reason="test", price=1.1)


def _make_controller(has_news=False, clock=None):
    news = MagicMock()
    news.has_high_impact_event = AsyncMock(return_value=has_news)
    return AdmissionController(news, clock=clock or FakeClock()), news


class TestExtractCurrencies:
    def test_six_char_symbol(self):
        assert extract_currencies("EURUSD") == ("EUR", "USD")

    def test_suffix_ignored(self):
        assert extract_currencies("GBPJPYm") == ("GBP", "JPY")

    def test_short_symbol_has_none(self):
        assert extract_currencies("XAU") == ()


class TestNewsGate:
    @pytest.mark.asyncio
    async def test_high_impact_news_rejects(self):
        controller, news = _make_controller(has_news=True)
        decision = await controller.evaluate(_make_signal(), news_avoidance_minutes=30)

        assert decision.admitted is False
        assert decision.rejected_by == REJECT_NEWS
        assert decision.news_paused is True
        news.has_high_impact_event.assert_awaited_once_with(["EUR", "USD"], 30)

    @pytest.mark.asyncio
    async def test_news_rejection_does_not_start_cooldown(self):
        controller, news = _make_controller(has_news=True)
        await controller.evaluate(_make_signal(), 30)
        assert controller.last_admitted_at("EURUSD") is None

        news.has_high_impact_event.return_value = False
        decision = await controller.evaluate(_make_signal(), 30)
        assert decision.admitted is True

    @pytest.mark.asyncio
    async def test_short_symbol_skips_news_query(self):
        controller, news = _make_controller(has_news=True)
        decision = await controller.evaluate(_make_signal(symbol="GOLD"), 30)

        assert decision.admitted is True
        news.has_high_impact_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_news_query_timeout_is_connectivity_error(self):
        news = MagicMock()

        async def _slow(*args):
            await asyncio.sleep(1)
            return False

        news.has_high_impact_event = _slow
        controller = AdmissionController(news, call_timeout=0.01)

        with pytest.raises(ConnectivityError):
            await controller.evaluate(_make_signal(), 30)
        assert controller.last_admitted_at("EURUSD") is None


class TestCooldown:
    @pytest.mark.asyncio
    async def test_second_signal_within_five_minutes_rejected(self):
        clock = FakeClock()
        controller, _ = _make_controller(clock=clock)

        assert (await controller.evaluate(_make_signal(), 30)).admitted is True
        clock.advance(299)
        decision = await controller.evaluate(_make_signal(confidence=0.99), 30)

        assert decision.admitted is False
        assert decision.rejected_by == REJECT_COOLDOWN

    @pytest.mark.asyncio
    async def test_admitted_again_after_five_minutes(self):
        clock = FakeClock()
        controller, _ = _make_controller(clock=clock)

        await controller.evaluate(_make_signal(), 30)
        clock.advance(300)
        assert (await controller.evaluate(_make_signal(), 30)).admitted is True

    @pytest.mark.asyncio
    async def test_cooldown_is_per_symbol(self):
        controller, _ = _make_controller()
        await controller.evaluate(_make_signal("EURUSD"), 30)
        assert (await controller.evaluate(_make_signal("GBPUSD"), 30)).admitted is True

    @pytest.mark.asyncio
    async def test_rejected_signal_does_not_extend_cooldown(self):
        clock = FakeClock()
        controller, _ = _make_controller(clock=clock)

        await controller.evaluate(_make_signal(), 30)
        first = controller.last_admitted_at("EURUSD")
        clock.advance(200)
        await controller.evaluate(_make_signal(), 30)

        assert controller.last_admitted_at("EURUSD") == first

    @pytest.mark.asyncio
    async def test_never_admits_twice_within_window(self):
        """Random confidences and gaps: admitted signals are always >= 300s apart."""
        rng = random.Random(42)
        clock = FakeClock()
        controller, _ = _make_controller(clock=clock)
        admitted_at = []

        for _ in range(500):
            clock.advance(rng.uniform(0, 120))
            decision = await controller.evaluate(_make_signal(confidence=rng.random()), 30)
            if decision.admitted:
                admitted_at.append(clock.now)

        assert len(admitted_at) > 1
        gaps = [b - a for a, b in zip(admitted_at, admitted_at[1:])]
        assert min(gaps) >= 300

    @pytest.mark.asyncio
    async def test_concurrent_evaluations_admit_once(self):
        controller, _ = _make_controller()
        decisions = await asyncio.gather(*[controller.evaluate(_make_signal(), 30) for _ in range(5)])
        assert sum(d.admitted for d in decisions) == 1


class TestConfidenceFloor:
    @pytest.mark.asyncio
    async def test_low_confidence_rejected(self):
        controller, _ = _make_controller()
        decision = await controller.evaluate(_make_signal(confidence=0.49), 30)

        assert decision.rejected_by == REJECT_CONFIDENCE
        assert controller.last_admitted_at("EURUSD") is None

    @pytest.mark.asyncio
    async def test_floor_is_inclusive(self):
        controller, _ = _make_controller()
        assert (await controller.evaluate(_make_signal(confidence=0.5), 30)).admitted is True
