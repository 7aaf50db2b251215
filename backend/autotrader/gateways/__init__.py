"""
Execution Gateway Abstraction Layer

The trading engine talks to a broker only through the BrokerGateway
abstract base class, so the same decision loop runs against a simulated
paper broker or a live MetaTrader 5 terminal.

Supported gateways:
- paper: in-process simulated broker (PaperBrokerGateway)
- mt5_bridge: HTTP JSON bridge to an MT5 Expert Advisor (MT5BridgeGateway)

Usage:
    from autotrader.gateways.factory import create_gateway

    gateway = create_gateway("paper")
"""

from autotrader.gateways.base import (
    AccountInfo,
    BrokerGateway,
    CloseResult,
    OrderResult,
    SymbolQuote,
)

__all__ = ["AccountInfo", "BrokerGateway", "CloseResult", "OrderResult", "SymbolQuote"]
