"""
Paper Broker Gateway

Simulates a forex broker in-process for paper trading and local development.
Quotes follow a small bounded random walk that advances on every price
request; orders fill immediately at the ask (BUY) or bid (SELL).
"""

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

from autotrader.constants import UNITS_PER_LOT
from autotrader.exceptions import ConnectivityError, ExecutionError
from autotrader.gateways.base import (
    AccountInfo,
    BrokerGateway,
    CloseResult,
    OrderResult,
    SymbolQuote,
)

logger = logging.getLogger(__name__)

# symbol -> (starting bid, spread, per-step volatility, (floor, ceiling))
DEFAULT_SYMBOLS: Dict[str, Tuple[float, float, float, Tuple[float, float]]] = {
    "EURUSD": (1.08675, 0.00010, 0.00010, (1.05, 1.15)),
    "GBPUSD": (1.25450, 0.00015, 0.00012, (1.20, 1.32)),
    "USDJPY": (149.125, 0.010, 0.010, (140.0, 158.0)),
    "USDCHF": (0.89250, 0.00015, 0.00010, (0.85, 0.95)),
    "AUDUSD": (0.66520, 0.00015, 0.00010, (0.62, 0.70)),
    "USDCAD": (1.35780, 0.00015, 0.00010, (1.30, 1.40)),
}


@dataclass
class PaperPosition:
    ticket: str
    symbol: str
    direction: str
    volume: float
    open_price: float
    opened_at: datetime


class PaperBrokerGateway(BrokerGateway):
    """
    Simulated broker with a virtual balance.

    Balance changes only when positions are closed (realized P&L);
    equity adds the floating P&L of open positions at the last quote.
    """

    def __init__(self, starting_balance: float = 100000.0, seed: Optional[int] = None):
        self.balance = starting_balance
        self.connected = True
        self._rng = random.Random(seed)
        self._bids: Dict[str, float] = {symbol: spec[0] for symbol, spec in DEFAULT_SYMBOLS.items()}
        self.positions: Dict[str, PaperPosition] = {}
        self._lock = asyncio.Lock()
        logger.info(f"Initialized paper broker gateway (balance={starting_balance:.2f})")

    def set_connected(self, connected: bool):
        self.connected = connected

    def _ensure_connected(self):
        if not self.connected:
            raise ConnectivityError("Paper broker disconnected")

    def _quote(self, symbol: str) -> SymbolQuote:
        if symbol not in self._bids:
            raise ConnectivityError(f"Symbol {symbol} not found")
        _start, spread, _vol, _bounds = DEFAULT_SYMBOLS[symbol]
        bid = self._bids[symbol]
        return SymbolQuote(symbol=symbol, bid=bid, ask=bid + spread)

    def _step(self, symbol: str):
        _start, _spread, volatility, (floor, ceiling) = DEFAULT_SYMBOLS[symbol]
        change = (self._rng.random() - 0.5) * 2 * volatility
        self._bids[symbol] = max(floor, min(ceiling, self._bids[symbol] + change))

    def _floating_profit(self, position: PaperPosition) -> float:
        quote = self._quote(position.symbol)
        if position.direction == "BUY":
            diff = quote.bid - position.open_price
        else:
            diff = position.open_price - quote.ask
        return diff * position.volume * UNITS_PER_LOT

    async def is_connected(self) -> bool:
        return self.connected

    async def get_account_info(self) -> AccountInfo:
        self._ensure_connected()
        async with self._lock:
            floating = sum(self._floating_profit(p) for p in self.positions.values())
        return AccountInfo(
            balance=self.balance,
            equity=self.balance + floating,
            free_margin=self.balance + floating,
            login="paper",
            server="Paper-Demo",
        )

    async def get_symbol_price(self, symbol: str) -> SymbolQuote:
        self._ensure_connected()
        async with self._lock:
            quote = self._quote(symbol)
            self._step(symbol)
        return quote

    async def submit_order(
        self,
        symbol: str,
        direction: str,
        volume: float,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
        comment: str = "",
    ) -> OrderResult:
        self._ensure_connected()
        direction = direction.upper()
        if direction not in ("BUY", "SELL"):
            raise ExecutionError(f"Unsupported order direction: {direction}")
        if volume <= 0:
            raise ExecutionError(f"Invalid volume {volume} for {symbol}")

        async with self._lock:
            try:
                quote = self._quote(symbol)
            except ConnectivityError as e:
                raise ExecutionError(str(e))
            fill_price = quote.ask if direction == "BUY" else quote.bid
            ticket = uuid.uuid4().hex[:12]
            self.positions[ticket] = PaperPosition(
                ticket=ticket,
                symbol=symbol,
                direction=direction,
                volume=volume,
                open_price=fill_price,
                opened_at=datetime.utcnow(),
            )

        logger.info(f"Paper fill: {direction} {volume:.2f} {symbol} @ {fill_price:.5f} (ticket {ticket}, {comment})")
        return OrderResult(ticket=ticket, fill_price=fill_price, fill_volume=volume)

    async def close_position(self, ticket: str) -> CloseResult:
        self._ensure_connected()
        async with self._lock:
            position = self.positions.get(ticket)
            if position is None:
                raise ExecutionError(f"Position {ticket} not found")

            quote = self._quote(position.symbol)
            close_price = quote.bid if position.direction == "BUY" else quote.ask
            profit = round(self._floating_profit(position), 2)
            del self.positions[ticket]
            self.balance += profit

        logger.info(f"Paper close: ticket {ticket} @ {close_price:.5f}, profit {profit:.2f}")
        return CloseResult(price=close_price, profit=profit)
