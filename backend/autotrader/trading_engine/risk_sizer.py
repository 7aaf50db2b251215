"""
Risk Sizer

Converts an admitted signal into an order volume in lots:

    risk_amount   = balance * risk_per_trade
    stop_distance = |price - stop_loss|  (or 0.5% of price without a stop)
    volume        = min(risk_amount / (stop_distance * 100000), 1.0)

The 100000 factor is a one-standard-lot pip value approximation applied to
every instrument.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from autotrader.constants import DEFAULT_STOP_DISTANCE_PCT, MAX_LOT_SIZE, UNITS_PER_LOT
from autotrader.exceptions import DataError


def round_lots(volume: float) -> float:
    """Round to the 0.01 lot step (half-up)."""
    return float(Decimal(str(volume)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def stop_distance(price: float, stop_loss: Optional[float] = None) -> float:
    if stop_loss is not None:
        distance = abs(price - stop_loss)
        if distance > 0:
            return distance
    return price * DEFAULT_STOP_DISTANCE_PCT


def calculate_volume(
    balance: float,
    risk_per_trade: float,
    price: float,
    stop_loss: Optional[float] = None,
) -> float:
    """
    Position size in lots, capped at MAX_LOT_SIZE and rounded to 2 decimals.

    A result of 0.0 is returned as-is; the gateway is expected to reject it.

    Raises:
        DataError: price is not positive
    """
    if price <= 0:
        raise DataError(f"Cannot size a position at non-positive price {price}")

    risk_amount = balance * risk_per_trade
    volume = min(risk_amount / (stop_distance(price, stop_loss) * UNITS_PER_LOT), MAX_LOT_SIZE)
    return round_lots(max(volume, 0.0))
