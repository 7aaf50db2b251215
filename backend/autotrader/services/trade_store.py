"""
Trade Store

Persistence for accounts, bot settings and trade records. Each call runs
in its own short-lived session so the trading loop never holds a session
across external broker calls.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from autotrader.constants import TRADE_STATUS_CLOSED, TRADE_STATUS_OPEN
from autotrader.database import async_session_maker
from autotrader.exceptions import ConfigurationError, ConflictError, NotFoundError
from autotrader.models import Account, BotSettings, Trade
from autotrader.schemas.bot_settings import BotConfig

logger = logging.getLogger(__name__)

_SETTINGS_FIELDS = (
    "strategy",
    "risk_per_trade",
    "max_daily_loss",
    "trading_symbols",
    "news_avoidance_minutes",
    "strategy_params",
    "is_active",
)


class TradeStore:
    """Persistence collaborator used by the trading engine and the API layer."""

    def __init__(self, session_maker: async_sessionmaker = async_session_maker):
        self._session_maker = session_maker

    # =============================================================================
    # Accounts
    # =============================================================================

    async def create_account(self, data: Dict[str, Any]) -> Account:
        async with self._session_maker() as db:
            if await db.get(Account, data["id"]):
                raise ConflictError(f"Account {data['id']} already exists")
            account = Account(**data)
            db.add(account)
            await db.commit()
            await db.refresh(account)
            return account

    async def get_account(self, account_id: str) -> Optional[Account]:
        async with self._session_maker() as db:
            return await db.get(Account, account_id)

    async def list_accounts(self) -> List[Account]:
        async with self._session_maker() as db:
            result = await db.execute(select(Account).order_by(Account.id))
            return list(result.scalars().all())

    # =============================================================================
    # Bot settings
    # =============================================================================

    @staticmethod
    async def _load_settings_row(db: AsyncSession, account_id: str) -> Optional[BotSettings]:
        result = await db.execute(select(BotSettings).where(BotSettings.account_id == account_id))
        return result.scalars().first()

    async def get_bot_settings(self, account_id: str) -> Optional[BotConfig]:
        """Snapshot of an account's bot settings, or None if never configured."""
        async with self._session_maker() as db:
            row = await self._load_settings_row(db, account_id)
            if row is None:
                return None
            return BotConfig.model_validate(row)

    async def get_bot_settings_row(self, account_id: str) -> Optional[BotSettings]:
        async with self._session_maker() as db:
            return await self._load_settings_row(db, account_id)

    async def update_bot_settings(self, account_id: str, patch: Dict[str, Any]) -> BotConfig:
        """
        Apply a partial update to existing settings.

        Raises:
            ConfigurationError: no settings exist for the account
        """
        async with self._session_maker() as db:
            row = await self._load_settings_row(db, account_id)
            if row is None:
                raise ConfigurationError(f"Bot settings not found for account {account_id}")

            for key, value in patch.items():
                if key in _SETTINGS_FIELDS:
                    setattr(row, key, value)
            row.last_update = datetime.utcnow()

            await db.commit()
            await db.refresh(row)
            return BotConfig.model_validate(row)

    async def upsert_bot_settings(self, account_id: str, data: Dict[str, Any]) -> BotSettings:
        """
        Create settings for an account or overwrite the existing ones.

        Raises:
            NotFoundError: the account does not exist
        """
        async with self._session_maker() as db:
            if not await db.get(Account, account_id):
                raise NotFoundError(f"Account {account_id} not found")

            row = await self._load_settings_row(db, account_id)
            if row is None:
                row = BotSettings(account_id=account_id)
                db.add(row)

            for key, value in data.items():
                if key in _SETTINGS_FIELDS:
                    setattr(row, key, value)
            row.last_update = datetime.utcnow()

            await db.commit()
            await db.refresh(row)
            return row

    # =============================================================================
    # Trades
    # =============================================================================

    async def create_trade(self, record: Dict[str, Any]) -> Trade:
        async with self._session_maker() as db:
            trade = Trade(**record)
            db.add(trade)
            await db.commit()
            await db.refresh(trade)
            logger.info(f"Recorded trade {trade.id}: {trade.type} {trade.volume} {trade.symbol} (ticket {trade.ticket})")
            return trade

    async def get_trade(self, trade_id: int) -> Optional[Trade]:
        async with self._session_maker() as db:
            return await db.get(Trade, trade_id)

    async def list_trades(self, account_id: str, status: Optional[str] = None, limit: int = 200) -> List[Trade]:
        async with self._session_maker() as db:
            query = select(Trade).where(Trade.account_id == account_id)
            if status:
                query = query.where(Trade.status == status)
            query = query.order_by(Trade.open_time.desc()).limit(limit)
            result = await db.execute(query)
            return list(result.scalars().all())

    async def list_open_trades(
        self, account_id: str, symbol: Optional[str] = None, is_manual: Optional[bool] = None
    ) -> List[Trade]:
        async with self._session_maker() as db:
            query = select(Trade).where(Trade.account_id == account_id, Trade.status == TRADE_STATUS_OPEN)
            if symbol:
                query = query.where(Trade.symbol == symbol)
            if is_manual is not None:
                query = query.where(Trade.is_manual.is_(is_manual))
            result = await db.execute(query.order_by(Trade.open_time))
            return list(result.scalars().all())

    async def mark_trade_closed(
        self, trade_id: int, exit_price: float, profit: float, close_time: Optional[datetime] = None
    ) -> Trade:
        async with self._session_maker() as db:
            trade = await db.get(Trade, trade_id)
            if trade is None:
                raise NotFoundError(f"Trade {trade_id} not found")

            trade.exit_price = exit_price
            trade.profit = profit
            trade.close_time = close_time or datetime.utcnow()
            trade.status = TRADE_STATUS_CLOSED

            await db.commit()
            await db.refresh(trade)
            return trade
