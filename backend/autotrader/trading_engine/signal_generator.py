"""
Signal Generator

Applies the minimum-data guard and delegates to the resolved strategy.
"""

import logging
from typing import Optional, Sequence

from autotrader.constants import MIN_PRICES_FOR_SIGNAL
from autotrader.strategies import Strategy, TradingSignal

logger = logging.getLogger(__name__)


def generate_signal(symbol: str, prices: Sequence[float], strategy: Strategy) -> Optional[TradingSignal]:
    """
    Produce at most one signal for a symbol.

    Returns None with fewer than MIN_PRICES_FOR_SIGNAL prices, whatever the
    strategy's own lookback. Numeric failures inside a strategy also yield
    None; they are logged, never raised.
    """
    if len(prices) < MIN_PRICES_FOR_SIGNAL:
        return None

    try:
        return strategy.evaluate(symbol, prices)
    except (ArithmeticError, ValueError) as e:
        logger.warning(f"{strategy.kind} failed to evaluate {symbol}: {e}")
        return None
