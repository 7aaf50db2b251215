"""
Tests for strategy resolution in backend/autotrader/strategies/__init__.py
"""

from autotrader.strategies import (
    MovingAverageCrossover,
    RsiThreshold,
    list_strategies,
    resolve_strategy,
)


class TestResolveStrategy:
    def test_ma_crossover_by_name(self):
        strategy = resolve_strategy("ma_crossover", {"fast_ma": 5, "slow_ma": 15})
        assert strategy == MovingAverageCrossover(fast_ma=5, slow_ma=15)

    def test_rsi_by_name(self):
        strategy = resolve_strategy("rsi_strategy", {"rsi_period": 7})
        assert isinstance(strategy, RsiThreshold)
        assert strategy.rsi_period == 7

    def test_unknown_name_falls_back_to_ma_crossover(self):
        strategy = resolve_strategy("bollinger_squeeze", {})
        assert isinstance(strategy, MovingAverageCrossover)

    def test_missing_name_and_params(self):
        assert resolve_strategy(None, None) == MovingAverageCrossover(fast_ma=10, slow_ma=20)

    def test_ignores_params_of_other_strategies(self):
        strategy = resolve_strategy("ma_crossover", {"rsi_period": 9, "fast_ma": 8})
        assert strategy == MovingAverageCrossover(fast_ma=8, slow_ma=20)


def test_list_strategies():
    ids = [definition.id for definition in list_strategies()]
    assert ids == ["ma_crossover", "rsi_strategy"]
