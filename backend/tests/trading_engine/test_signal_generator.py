"""
Tests for backend/autotrader/trading_engine/signal_generator.py
"""

from unittest.mock import MagicMock

import pytest

from autotrader.strategies import MovingAverageCrossover, RsiThreshold, SignalAction
from autotrader.trading_engine.signal_generator import generate_signal


class TestGenerateSignal:
    @pytest.mark.parametrize("length", [0, 1, 20, 49])
    def test_fewer_than_50_prices_never_signals(self, length, crossover_prices):
        """The 50-point guard applies even when the strategy's lookback is shorter."""
        prices = crossover_prices(length=length) if length else []
        strategy = MovingAverageCrossover(fast_ma=2, slow_ma=3)
        assert generate_signal("EURUSD", prices, strategy) is None

    def test_short_rsi_series_never_signals(self):
        prices = [1.2 - i * 0.001 for i in range(49)]
        assert generate_signal("EURUSD", prices, RsiThreshold(14, 70.0, 30.0)) is None

    def test_exactly_50_prices_can_signal(self, crossover_prices):
        signal = generate_signal("EURUSD", crossover_prices(length=50), MovingAverageCrossover(10, 20))
        assert signal.action == SignalAction.BUY

    def test_strategy_arithmetic_error_yields_none(self):
        strategy = MagicMock()
        strategy.kind = "broken"
        strategy.evaluate.side_effect = ZeroDivisionError("division by zero")
        assert generate_signal("EURUSD", [1.0] * 60, strategy) is None
