"""
Strategy building blocks shared by every signal strategy.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from autotrader.exceptions import ConfigurationError


class SignalAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    CLOSE = "CLOSE"


@dataclass(frozen=True)
class TradingSignal:
    """A directional decision for one symbol, consumed immediately by admission control."""

    symbol: str
    action: SignalAction
    confidence: float  # 0..1
    reason: str
    price: float  # Bid the signal was generated against
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None


class StrategyParameter(BaseModel):
    """Definition of a strategy parameter"""

    name: str
    display_name: str
    description: str
    type: str  # "float", "int"
    default: Any
    min_value: Optional[float] = None
    max_value: Optional[float] = None


class StrategyDefinition(BaseModel):
    """Metadata about a strategy"""

    id: str  # Unique identifier (e.g., "ma_crossover")
    name: str  # Display name
    description: str
    parameters: List[StrategyParameter]


def coerce_params(definition: StrategyDefinition, params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill defaults for missing parameters, cast to the declared type and check ranges.

    Raises:
        ConfigurationError: a value is not numeric or is out of range
    """
    resolved = {}
    for param in definition.parameters:
        raw = params.get(param.name, param.default)
        try:
            value = int(raw) if param.type == "int" else float(raw)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{param.display_name} must be a number, got {raw!r}")

        if param.min_value is not None and value < param.min_value:
            raise ConfigurationError(f"{param.display_name} must be >= {param.min_value}")
        if param.max_value is not None and value > param.max_value:
            raise ConfigurationError(f"{param.display_name} must be <= {param.max_value}")
        resolved[param.name] = value
    return resolved
