from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccountCreate(BaseModel):
    id: str
    broker_name: str
    account_number: str
    server_name: str
    is_demo: bool = True


class AccountResponse(AccountCreate):
    model_config = ConfigDict(from_attributes=True)

    balance: float = 0.0
    equity: float = 0.0
    last_update: Optional[datetime] = None


class TradeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: str
    ticket: str
    symbol: str
    type: str
    volume: float
    entry_price: float
    exit_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    profit: Optional[float] = 0.0
    status: str
    open_time: datetime
    close_time: Optional[datetime] = None
    comment: Optional[str] = None
    is_manual: bool


class ManualTradeRequest(BaseModel):
    account_id: str
    symbol: str
    type: str
    volume: float = Field(gt=0, le=100)
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        v = v.upper()
        if v not in ("BUY", "SELL"):
            raise ValueError("type must be BUY or SELL")
        return v

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()


class NewsEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    currency: str
    impact: str
    event_time: datetime
    actual: Optional[str] = None
    forecast: Optional[str] = None
    previous: Optional[str] = None
    country: Optional[str] = None
