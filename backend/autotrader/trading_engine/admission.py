"""
Admission Controller

Decides whether a generated signal is acted upon. Three independent gates,
checked in order:

1. News gate: a high-impact event is due for either currency of the pair
2. Cooldown: a signal for the symbol was admitted less than 5 minutes ago
3. Confidence floor: confidence below 0.5

A rejected signal changes nothing. The per-symbol cooldown timestamp is
written only on admission, in the same synchronous step as the final
check, so no two evaluations of one symbol can both admit.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from autotrader.constants import MIN_SIGNAL_CONFIDENCE, SIGNAL_COOLDOWN_SECONDS
from autotrader.strategies import TradingSignal
from autotrader.trading_engine.external_calls import call_with_timeout

logger = logging.getLogger(__name__)

REJECT_NEWS = "news"
REJECT_COOLDOWN = "cooldown"
REJECT_CONFIDENCE = "confidence"


class NewsCalendar(Protocol):
    async def has_high_impact_event(self, currencies: List[str], within_minutes: float) -> bool:
        ...


def extract_currencies(symbol: str) -> Tuple[str, ...]:
    """EURUSD -> ("EUR", "USD"). Symbols shorter than 6 characters have no currencies."""
    if len(symbol) < 6:
        return ()
    return symbol[0:3], symbol[3:6]


@dataclass(frozen=True)
class AdmissionDecision:
    admitted: bool
    rejected_by: Optional[str] = None
    currencies: Tuple[str, ...] = ()

    @property
    def news_paused(self) -> bool:
        return self.rejected_by == REJECT_NEWS


class AdmissionController:
    def __init__(
        self,
        news: NewsCalendar,
        cooldown_seconds: float = SIGNAL_COOLDOWN_SECONDS,
        min_confidence: float = MIN_SIGNAL_CONFIDENCE,
        clock: Callable[[], float] = time.monotonic,
        call_timeout: Optional[float] = None,
    ):
        self.news = news
        self.cooldown_seconds = cooldown_seconds
        self.min_confidence = min_confidence
        self._clock = clock
        self._call_timeout = call_timeout
        self._last_admitted: Dict[str, float] = {}

    def last_admitted_at(self, symbol: str) -> Optional[float]:
        return self._last_admitted.get(symbol)

    async def evaluate(self, signal: TradingSignal, news_avoidance_minutes: float) -> AdmissionDecision:
        currencies = extract_currencies(signal.symbol)

        if currencies:
            blocked = await call_with_timeout(
                self.news.has_high_impact_event(list(currencies), news_avoidance_minutes),
                f"News query for {signal.symbol}",
                self._call_timeout,
            )
            if blocked:
                logger.info(f"Signal for {signal.symbol} paused: high-impact news for {'/'.join(currencies)}")
                return AdmissionDecision(admitted=False, rejected_by=REJECT_NEWS, currencies=currencies)

        # No awaits below this point
        now = self._clock()
        last = self._last_admitted.get(signal.symbol)
        if last is not None and now - last < self.cooldown_seconds:
            logger.debug(f"Signal for {signal.symbol} skipped: cooldown ({now - last:.0f}s since last)")
            return AdmissionDecision(admitted=False, rejected_by=REJECT_COOLDOWN, currencies=currencies)

        if signal.confidence < self.min_confidence:
            logger.debug(f"Signal for {signal.symbol} skipped: confidence {signal.confidence} < {self.min_confidence}")
            return AdmissionDecision(admitted=False, rejected_by=REJECT_CONFIDENCE, currencies=currencies)

        self._last_admitted[signal.symbol] = now if last is None else max(now, last)
        return AdmissionDecision(admitted=True, currencies=currencies)
