"""Trading models: accounts, bot settings, trades."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from autotrader.database import Base


class Account(Base):
    """
    Brokerage account being traded.

    Balance/equity columns are a cached snapshot for display only; the
    trading engine always reads live figures from the execution gateway.
    """
    __tablename__ = "accounts"

    id = Column(String, primary_key=True, index=True)  # Broker-facing account identifier
    broker_name = Column(String, nullable=False)
    account_number = Column(String, nullable=False)
    server_name = Column(String, nullable=False)
    is_demo = Column(Boolean, default=True)

    balance = Column(Float, default=0.0)
    equity = Column(Float, default=0.0)
    last_update = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    trades = relationship("Trade", back_populates="account")
    bot_settings = relationship("BotSettings", back_populates="account", uselist=False)


class BotSettings(Base):
    """
    Per-account automated trading configuration.

    risk_per_trade and max_daily_loss are fractions of balance
    (0.01 = 1%). max_daily_loss is advisory only; the engine does not enforce it.
    """
    __tablename__ = "bot_settings"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=False, unique=True, index=True)
    is_active = Column(Boolean, default=False)
    strategy = Column(String, nullable=False, default="ma_crossover")
    risk_per_trade = Column(Float, nullable=False, default=0.01)
    max_daily_loss = Column(Float, nullable=False, default=0.05)
    trading_symbols = Column(JSON, nullable=False, default=lambda: ["EURUSD"])
    news_avoidance_minutes = Column(Integer, nullable=False, default=30)
    strategy_params = Column(JSON, nullable=False, default=dict)
    last_update = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    account = relationship("Account", back_populates="bot_settings")


class Trade(Base):
    """
    A broker order recorded by the engine (is_manual=False) or by a user.

    Trades are never deleted; closing sets exit_price, profit, close_time
    and flips status to "closed".
    """
    __tablename__ = "trades"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=False, index=True)
    ticket = Column(String, nullable=False, index=True)  # Broker ticket
    symbol = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)  # BUY or SELL
    volume = Column(Float, nullable=False)  # Lots
    entry_price = Column(Float, nullable=False)
    exit_price = Column(Float, nullable=True)
    stop_loss = Column(Float, nullable=True)
    take_profit = Column(Float, nullable=True)
    profit = Column(Float, default=0.0)
    commission = Column(Float, default=0.0)
    swap = Column(Float, default=0.0)
    status = Column(String, nullable=False, default="open")  # open, closed, pending
    open_time = Column(DateTime, nullable=False, default=datetime.utcnow)
    close_time = Column(DateTime, nullable=True)
    comment = Column(Text, nullable=True)
    is_manual = Column(Boolean, nullable=False, default=False)

    account = relationship("Account", back_populates="trades")
