"""
Bot settings schemas.

BotConfig is the immutable snapshot the trading engine works from; the
update/create schemas validate patches coming from the API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autotrader.constants import DEFAULT_STRATEGY


def _normalize_symbols(symbols: List[str]) -> List[str]:
    cleaned = [s.strip().upper() for s in symbols if s and s.strip()]
    if not cleaned:
        raise ValueError("At least one trading symbol is required")
    # Preserve order, drop duplicates
    return list(dict.fromkeys(cleaned))


class BotConfig(BaseModel):
    """Per-account configuration snapshot held by a running bot."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    account_id: str
    strategy: str = DEFAULT_STRATEGY
    risk_per_trade: float = 0.01
    max_daily_loss: float = 0.05
    trading_symbols: List[str] = Field(default_factory=lambda: ["EURUSD"])
    news_avoidance_minutes: int = 30
    strategy_params: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = False


class BotSettingsUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""

    strategy: Optional[str] = None
    risk_per_trade: Optional[float] = Field(default=None, gt=0, le=1)
    max_daily_loss: Optional[float] = Field(default=None, gt=0, le=1)
    trading_symbols: Optional[List[str]] = None
    news_avoidance_minutes: Optional[int] = Field(default=None, ge=0, le=24 * 60)
    strategy_params: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

    @field_validator("trading_symbols")
    @classmethod
    def normalize_symbols(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return _normalize_symbols(v)


class BotSettingsCreate(BaseModel):
    strategy: str = DEFAULT_STRATEGY
    risk_per_trade: float = Field(default=0.01, gt=0, le=1)
    max_daily_loss: float = Field(default=0.05, gt=0, le=1)
    trading_symbols: List[str] = Field(default_factory=lambda: ["EURUSD"])
    news_avoidance_minutes: int = Field(default=30, ge=0, le=24 * 60)
    strategy_params: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = False

    @field_validator("trading_symbols")
    @classmethod
    def normalize_symbols(cls, v: List[str]) -> List[str]:
        return _normalize_symbols(v)


class BotSettingsResponse(BotConfig):
    id: int
    last_update: Optional[datetime] = None


class BotStatusResponse(BaseModel):
    account_id: str
    status: str
    is_running: bool
    error_message: Optional[str] = None
