"""
RSI Threshold Strategy

Buys when RSI indicates oversold conditions, sells when it indicates overbought.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from autotrader.constants import (
    DEFAULT_STRATEGY_PARAMS,
    RSI_THRESHOLD_CONFIDENCE,
    STRATEGY_RSI,
)
from autotrader.exceptions import ConfigurationError
from autotrader.indicators import relative_strength_index
from autotrader.strategies.base import (
    SignalAction,
    StrategyDefinition,
    StrategyParameter,
    TradingSignal,
    coerce_params,
)

DEFINITION = StrategyDefinition(
    id=STRATEGY_RSI,
    name="RSI Threshold",
    description="Buys when RSI is below the oversold level, sells when above the overbought level.",
    parameters=[
        StrategyParameter(
            name="rsi_period",
            display_name="RSI Period",
            description="Number of price changes in the RSI window",
            type="int",
            default=DEFAULT_STRATEGY_PARAMS["rsi_period"],
            min_value=2,
            max_value=100,
        ),
        StrategyParameter(
            name="rsi_overbought",
            display_name="Overbought Threshold",
            description="RSI level above which to sell",
            type="float",
            default=DEFAULT_STRATEGY_PARAMS["rsi_overbought"],
            min_value=50.0,
            max_value=100.0,
        ),
        StrategyParameter(
            name="rsi_oversold",
            display_name="Oversold Threshold",
            description="RSI level below which to buy",
            type="float",
            default=DEFAULT_STRATEGY_PARAMS["rsi_oversold"],
            min_value=0.0,
            max_value=50.0,
        ),
    ],
)


@dataclass(frozen=True)
class RsiThreshold:
    rsi_period: int
    rsi_overbought: float
    rsi_oversold: float

    kind = STRATEGY_RSI

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "RsiThreshold":
        values = coerce_params(DEFINITION, params)
        if values["rsi_oversold"] >= values["rsi_overbought"]:
            raise ConfigurationError("Oversold Threshold must be below Overbought Threshold")
        return cls(
            rsi_period=values["rsi_period"],
            rsi_overbought=values["rsi_overbought"],
            rsi_oversold=values["rsi_oversold"],
        )

    def evaluate(self, symbol: str, prices: Sequence[float]) -> Optional[TradingSignal]:
        if len(prices) < self.rsi_period + 1:
            return None

        rsi = relative_strength_index(prices, self.rsi_period)
        current_price = prices[-1]

        if rsi < self.rsi_oversold:
            return TradingSignal(
                symbol=symbol,
                action=SignalAction.BUY,
                confidence=RSI_THRESHOLD_CONFIDENCE,
                reason=f"RSI Oversold ({rsi:.2f})",
                price=current_price,
                stop_loss=current_price * 0.995,
                take_profit=current_price * 1.015,
            )
        if rsi > self.rsi_overbought:
            return TradingSignal(
                symbol=symbol,
                action=SignalAction.SELL,
                confidence=RSI_THRESHOLD_CONFIDENCE,
                reason=f"RSI Overbought ({rsi:.2f})",
                price=current_price,
                stop_loss=current_price * 1.005,
                take_profit=current_price * 0.985,
            )
        return None
