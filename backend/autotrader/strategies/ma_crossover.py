"""
Moving Average Crossover Strategy

BUY when the fast SMA crosses above the slow SMA, SELL when it crosses below.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from autotrader.constants import (
    DEFAULT_STRATEGY_PARAMS,
    MA_CROSSOVER_CONFIDENCE,
    STRATEGY_MA_CROSSOVER,
)
from autotrader.indicators import simple_moving_average
from autotrader.strategies.base import (
    SignalAction,
    StrategyDefinition,
    StrategyParameter,
    TradingSignal,
    coerce_params,
)

DEFINITION = StrategyDefinition(
    id=STRATEGY_MA_CROSSOVER,
    name="MA Crossover",
    description="Buys on a bullish fast/slow SMA crossover, sells on a bearish one.",
    parameters=[
        StrategyParameter(
            name="fast_ma",
            display_name="Fast MA Period",
            description="Number of prices in the fast moving average",
            type="int",
            default=DEFAULT_STRATEGY_PARAMS["fast_ma"],
            min_value=2,
            max_value=100,
        ),
        StrategyParameter(
            name="slow_ma",
            display_name="Slow MA Period",
            description="Number of prices in the slow moving average",
            type="int",
            default=DEFAULT_STRATEGY_PARAMS["slow_ma"],
            min_value=3,
            max_value=200,
        ),
    ],
)


@dataclass(frozen=True)
class MovingAverageCrossover:
    fast_ma: int
    slow_ma: int

    kind = STRATEGY_MA_CROSSOVER

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "MovingAverageCrossover":
        values = coerce_params(DEFINITION, params)
        return cls(fast_ma=values["fast_ma"], slow_ma=values["slow_ma"])

    def evaluate(self, symbol: str, prices: Sequence[float]) -> Optional[TradingSignal]:
        """Compare the SMAs on the latest price against the SMAs one price earlier."""
        if len(prices) < self.slow_ma:
            return None

        previous = prices[:-1]
        fast = simple_moving_average(prices, self.fast_ma)
        slow = simple_moving_average(prices, self.slow_ma)
        prev_fast = simple_moving_average(previous, self.fast_ma)
        prev_slow = simple_moving_average(previous, self.slow_ma)

        current_price = prices[-1]

        if prev_fast <= prev_slow and fast > slow:
            return TradingSignal(
                symbol=symbol,
                action=SignalAction.BUY,
                confidence=MA_CROSSOVER_CONFIDENCE,
                reason="MA Bullish Crossover",
                price=current_price,
                stop_loss=current_price * 0.995,  # 0.5% SL
                take_profit=current_price * 1.01,  # 1% TP
            )
        if prev_fast >= prev_slow and fast < slow:
            return TradingSignal(
                symbol=symbol,
                action=SignalAction.SELL,
                confidence=MA_CROSSOVER_CONFIDENCE,
                reason="MA Bearish Crossover",
                price=current_price,
                stop_loss=current_price * 1.005,
                take_profit=current_price * 0.99,
            )
        return None
