"""
Technical Indicator Functions

Pure functions over an ordered price sequence (oldest first):
- SMA (Simple Moving Average)
- RSI (Relative Strength Index)

Neither function raises on short input. They return a neutral or
degenerate value instead, and callers that need a full window must check
the series length themselves.
"""

from typing import Sequence


def simple_moving_average(prices: Sequence[float], period: int) -> float:
    """
    Average of the last `period` prices.

    With fewer than `period` prices the average covers what is available.
    An empty series yields 0.0.
    """
    if period <= 0 or not prices:
        return 0.0

    window = list(prices[-period:])
    return sum(window) / len(window)


def relative_strength_index(prices: Sequence[float], period: int = 14) -> float:
    """
    RSI over the last `period` price changes.

    RS is the mean gain divided by the mean loss across those changes and
    RSI = 100 - 100 / (1 + RS).

    Returns:
        50.0 when there are fewer than period + 1 prices or the window is flat,
        100.0 when the window has gains but no losses,
        otherwise a value in [0, 100].
    """
    if period <= 0 or len(prices) < period + 1:
        return 50.0

    window = list(prices[-(period + 1):])
    changes = [window[i] - window[i - 1] for i in range(1, len(window))]

    avg_gain = sum(c for c in changes if c > 0) / period
    avg_loss = sum(-c for c in changes if c < 0) / period

    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))
