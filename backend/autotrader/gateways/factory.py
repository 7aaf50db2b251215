"""
Gateway Factory

Creates the execution gateway selected by configuration.
"""

from typing import Optional

from autotrader.config import settings
from autotrader.gateways.base import BrokerGateway
from autotrader.gateways.mt5_bridge_gateway import MT5BridgeGateway
from autotrader.gateways.paper_gateway import PaperBrokerGateway


def create_gateway(gateway_type: Optional[str] = None) -> BrokerGateway:
    """
    Factory function to create the appropriate execution gateway.

    Args:
        gateway_type: "paper" or "mt5_bridge" (defaults to settings.gateway_type)

    Raises:
        ValueError: If gateway_type is invalid
    """
    gateway_type = (gateway_type or settings.gateway_type).lower()

    if gateway_type == "paper":
        return PaperBrokerGateway(starting_balance=settings.paper_starting_balance)

    elif gateway_type == "mt5_bridge":
        if not settings.mt5_bridge_url:
            raise ValueError("mt5_bridge gateway requires MT5_BRIDGE_URL")
        return MT5BridgeGateway(
            bridge_url=settings.mt5_bridge_url,
            magic_number=settings.mt5_magic_number,
            deviation=settings.mt5_deviation,
            timeout=settings.external_call_timeout_seconds,
        )

    else:
        raise ValueError(f"Unknown gateway type: {gateway_type}. Must be 'paper' or 'mt5_bridge'.")
