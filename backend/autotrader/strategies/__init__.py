"""
Signal Strategies

A strategy is a small frozen value built from a bot's strategy name and
parameters. Resolution happens once per evaluation tick; after that the
engine just calls strategy.evaluate(symbol, prices).

Unknown strategy names resolve to the moving-average crossover.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from autotrader.constants import DEFAULT_STRATEGY, STRATEGY_MA_CROSSOVER, STRATEGY_RSI
from autotrader.strategies import ma_crossover, rsi
from autotrader.strategies.base import (
    SignalAction,
    StrategyDefinition,
    StrategyParameter,
    TradingSignal,
)
from autotrader.strategies.ma_crossover import MovingAverageCrossover
from autotrader.strategies.rsi import RsiThreshold

logger = logging.getLogger(__name__)

Strategy = Union[MovingAverageCrossover, RsiThreshold]

_STRATEGIES = {
    STRATEGY_MA_CROSSOVER: (MovingAverageCrossover, ma_crossover.DEFINITION),
    STRATEGY_RSI: (RsiThreshold, rsi.DEFINITION),
}


def resolve_strategy(name: Optional[str], params: Optional[Dict[str, Any]] = None) -> Strategy:
    """
    Build the strategy variant for a bot's configuration.

    Raises:
        ConfigurationError: a parameter is invalid for the selected strategy
    """
    strategy_id = name or DEFAULT_STRATEGY
    if strategy_id not in _STRATEGIES:
        logger.warning(f"Unknown strategy '{strategy_id}', falling back to {DEFAULT_STRATEGY}")
        strategy_id = DEFAULT_STRATEGY

    strategy_class, _definition = _STRATEGIES[strategy_id]
    return strategy_class.from_params(params or {})


def list_strategies() -> List[StrategyDefinition]:
    """Get list of all available strategies"""
    return [definition for _cls, definition in _STRATEGIES.values()]


__all__ = [
    "MovingAverageCrossover",
    "RsiThreshold",
    "SignalAction",
    "Strategy",
    "StrategyDefinition",
    "StrategyParameter",
    "TradingSignal",
    "list_strategies",
    "resolve_strategy",
]
