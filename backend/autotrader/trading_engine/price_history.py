"""Bounded per-symbol bid history."""

from collections import deque
from typing import Deque, Dict, List

from autotrader.constants import PRICE_HISTORY_CAP


class PriceHistory:
    """Ordered bid prices per symbol, oldest evicted first once the cap is reached."""

    def __init__(self, cap: int = PRICE_HISTORY_CAP):
        self.cap = cap
        self._prices: Dict[str, Deque[float]] = {}

    def record(self, symbol: str, price: float):
        if symbol not in self._prices:
            self._prices[symbol] = deque(maxlen=self.cap)
        self._prices[symbol].append(price)

    def get(self, symbol: str) -> List[float]:
        """Copy of the recorded prices, oldest first. Empty if never recorded."""
        return list(self._prices.get(symbol, ()))

    def clear(self):
        self._prices.clear()

    def __len__(self):
        return len(self._prices)
