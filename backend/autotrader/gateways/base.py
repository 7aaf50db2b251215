"""
BrokerGateway Abstract Base Class

Defines the interface every execution gateway must implement. The engine
treats a gateway as a stateless request/response boundary: it never holds
a lock across a gateway call and wraps every call in a timeout.

Error contract:
- ConnectivityError: gateway unreachable, disconnected, or symbol unknown
- ExecutionError: order rejected or close failed
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AccountInfo:
    balance: float
    equity: float
    margin: float = 0.0
    free_margin: float = 0.0
    currency: str = "USD"
    login: str = ""
    server: str = ""


@dataclass(frozen=True)
class SymbolQuote:
    symbol: str
    bid: float
    ask: float


@dataclass(frozen=True)
class OrderResult:
    ticket: str
    fill_price: float
    fill_volume: float


@dataclass(frozen=True)
class CloseResult:
    price: float
    profit: float


class BrokerGateway(ABC):
    """
    Abstract base class for all execution gateways.

    Design Philosophy:
    - Methods return small frozen dataclasses rather than raw broker payloads
    - Prices are floats in the symbol's quote currency, volumes are lots
    - Tickets are broker-specific strings
    """

    @abstractmethod
    async def is_connected(self) -> bool:
        """Whether the broker terminal is reachable and logged in."""
        pass

    @abstractmethod
    async def get_account_info(self) -> AccountInfo:
        """Current balance/equity snapshot for the connected account."""
        pass

    @abstractmethod
    async def get_symbol_price(self, symbol: str) -> SymbolQuote:
        """
        Current bid/ask for a symbol.

        Raises:
            ConnectivityError: gateway unavailable or symbol unknown
        """
        pass

    @abstractmethod
    async def submit_order(
        self,
        symbol: str,
        direction: str,
        volume: float,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
        comment: str = "",
    ) -> OrderResult:
        """
        Submit a market order.

        Args:
            symbol: Broker symbol, e.g. "EURUSD"
            direction: "BUY" or "SELL"
            volume: Lots, already rounded to the broker's step

        Raises:
            ExecutionError: the broker rejected the order
            ConnectivityError: gateway unavailable
        """
        pass

    @abstractmethod
    async def close_position(self, ticket: str) -> CloseResult:
        """
        Close an open position by ticket.

        Raises:
            ExecutionError: unknown ticket or close rejected
        """
        pass

    async def close(self):
        """Release any held connections. No-op by default."""
        pass
