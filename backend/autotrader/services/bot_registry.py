"""
Bot Registry

Holds the TradingBot for every account with a started bot and enforces
one bot per account. The gateway, store and news calendar are shared by
all bots; each bot owns its own price history and cooldown state.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from autotrader.constants import BOT_STATUS_ERROR, BOT_STATUS_RUNNING, BOT_STATUS_STOPPED
from autotrader.exceptions import ConfigurationError, ConflictError
from autotrader.gateways.base import BrokerGateway
from autotrader.schemas.bot_settings import BotConfig, BotStatusResponse
from autotrader.services.event_bus import EventBus, event_bus
from autotrader.services.trade_store import TradeStore
from autotrader.strategies import resolve_strategy
from autotrader.trading_bot import TradingBot
from autotrader.trading_engine.admission import NewsCalendar

logger = logging.getLogger(__name__)


class BotRegistry:
    def __init__(
        self,
        gateway: BrokerGateway,
        store: TradeStore,
        news: NewsCalendar,
        bus: EventBus = event_bus,
        tick_interval: Optional[float] = None,
        call_timeout: Optional[float] = None,
    ):
        self.gateway = gateway
        self.store = store
        self.news = news
        self.bus = bus
        self.tick_interval = tick_interval
        self.call_timeout = call_timeout
        self._bots: Dict[str, TradingBot] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _create_bot(self, account_id: str) -> TradingBot:
        return TradingBot(
            account_id,
            self.gateway,
            self.store,
            self.news,
            bus=self.bus,
            tick_interval=self.tick_interval,
            call_timeout=self.call_timeout,
        )

    def _lock_for(self, account_id: str) -> asyncio.Lock:
        lock = self._locks.get(account_id)
        if lock is None:
            lock = self._locks[account_id] = asyncio.Lock()
        return lock

    def get(self, account_id: str) -> Optional[TradingBot]:
        return self._bots.get(account_id)

    def running_accounts(self) -> List[str]:
        return [account_id for account_id, bot in self._bots.items() if bot.is_running]

    async def start(self, account_id: str) -> TradingBot:
        """
        Start a bot for the account.

        Starts for the same account are serialized, so a second start waits
        for the first and then sees it running. A bot left in the error state
        is dropped before the fresh one starts.

        Raises:
            ConflictError: a bot is already running for the account
            ConfigurationError: no settings for the account
            ConnectivityError: gateway disconnected (bot kept in error state)
        """
        async with self._lock_for(account_id):
            existing = self._bots.get(account_id)
            if existing is not None and existing.is_running:
                raise ConflictError(f"Bot already running for account {account_id}")
            self._bots.pop(account_id, None)

            bot = self._create_bot(account_id)
            try:
                await bot.start()
            finally:
                if bot.state != BOT_STATUS_STOPPED:
                    self._bots[account_id] = bot
            return bot

    async def stop(self, account_id: str):
        """Stop and forget the account's bot. Stopping an unknown account is a no-op."""
        async with self._lock_for(account_id):
            bot = self._bots.pop(account_id, None)
            if bot is not None:
                await bot.stop()

    async def stop_all(self):
        for account_id in list(self._bots):
            try:
                await self.stop(account_id)
            except Exception as e:
                logger.error(f"Error stopping bot for account {account_id}: {e}")
        logger.info("All trading bots stopped")

    def status(self, account_id: str) -> BotStatusResponse:
        bot = self._bots.get(account_id)
        if bot is None:
            return BotStatusResponse(account_id=account_id, status=BOT_STATUS_STOPPED, is_running=False)
        return BotStatusResponse(
            account_id=account_id,
            status=bot.state,
            is_running=bot.state == BOT_STATUS_RUNNING,
            error_message=bot.error_message if bot.state == BOT_STATUS_ERROR else None,
        )

    async def update_settings(self, account_id: str, patch: Dict[str, Any]) -> BotConfig:
        """
        Route a settings patch through the running bot, or straight to the store.

        Raises:
            ConfigurationError: no settings for the account, or the patched strategy params are invalid
        """
        bot = self._bots.get(account_id)
        if bot is not None and bot.is_running:
            return await bot.update_settings(patch)

        current = await self.store.get_bot_settings(account_id)
        if current is None:
            raise ConfigurationError(f"Bot settings not found for account {account_id}")
        candidate = current.model_copy(update=patch)
        resolve_strategy(candidate.strategy, candidate.strategy_params)
        return await self.store.update_bot_settings(account_id, patch)
