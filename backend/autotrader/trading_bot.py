"""
Trading Bot

Lifecycle supervisor for one account's automated trading loop.

States: stopped -> running -> stopped, or -> error on a start-time
connectivity failure or a crashed loop. An account in error stays there
until start() is called again.

Each tick walks the configured symbols one at a time:
price fetch -> history -> signal -> admission -> sizing -> execution.
A failure in one symbol is reported as an error event and the loop moves
on to the next symbol.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

from autotrader.config import settings
from autotrader.constants import BOT_STATUS_ERROR, BOT_STATUS_RUNNING, BOT_STATUS_STOPPED
from autotrader.exceptions import AppError, ConfigurationError, ConnectivityError, DataError
from autotrader.gateways.base import BrokerGateway
from autotrader.schemas.bot_settings import BotConfig
from autotrader.services.event_bus import BotEvent, EventBus, EventType, event_bus
from autotrader.services.trade_store import TradeStore
from autotrader.strategies import Strategy, resolve_strategy
from autotrader.trading_engine.admission import AdmissionController, NewsCalendar
from autotrader.trading_engine.external_calls import call_with_timeout
from autotrader.trading_engine.order_executor import OrderExecutor
from autotrader.trading_engine.price_history import PriceHistory
from autotrader.trading_engine.signal_generator import generate_signal

logger = logging.getLogger(__name__)


class TradingBot:
    """
    Owns one account's price history, cooldown state and loop task.

    The supervisor assumes single ownership of its account; preventing a
    second bot for the same account is BotRegistry's job.
    """

    def __init__(
        self,
        account_id: str,
        gateway: BrokerGateway,
        store: TradeStore,
        news: NewsCalendar,
        bus: EventBus = event_bus,
        tick_interval: Optional[float] = None,
        call_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.account_id = account_id
        self.gateway = gateway
        self.store = store
        self.bus = bus
        self.tick_interval = tick_interval if tick_interval is not None else settings.bot_tick_interval_seconds
        self.call_timeout = call_timeout

        self.price_history = PriceHistory()
        self.admission = AdmissionController(news, clock=clock, call_timeout=call_timeout)
        self.executor = OrderExecutor(gateway, store, bus, call_timeout=call_timeout)

        self.settings: Optional[BotConfig] = None
        self.state = BOT_STATUS_STOPPED
        self.error_message: Optional[str] = None
        self.running = False
        self.task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    @property
    def status(self) -> str:
        return self.state

    @property
    def is_running(self) -> bool:
        return self.state == BOT_STATUS_RUNNING

    def _publish(self, event_type: EventType, data: Dict[str, Any]):
        self.bus.publish(BotEvent(event_type, self.account_id, data))

    def _set_state(self, state: str, message: Optional[str] = None):
        self.state = state
        self.error_message = message
        data = {"status": state}
        if message:
            data["message"] = message
        self._publish(EventType.STATUS_CHANGED, data)

    # =============================================================================
    # Lifecycle
    # =============================================================================

    async def start(self):
        """
        Load settings, check the gateway and begin the periodic tick.

        Raises:
            ConfigurationError: no (or invalid) settings; state stays stopped
            ConnectivityError: gateway disconnected; state becomes error
        """
        if self.running:
            logger.warning(f"[{self.account_id}] Bot already running, ignoring start()")
            return

        config = await call_with_timeout(
            self.store.get_bot_settings(self.account_id), "Settings lookup", self.call_timeout
        )
        if config is None:
            raise ConfigurationError(f"Bot settings not found for account {self.account_id}")
        resolve_strategy(config.strategy, config.strategy_params)

        try:
            connected = await call_with_timeout(self.gateway.is_connected(), "Gateway check", self.call_timeout)
        except ConnectivityError as e:
            self._set_state(BOT_STATUS_ERROR, str(e))
            raise
        if not connected:
            message = "MT5 not connected"
            self._set_state(BOT_STATUS_ERROR, message)
            raise ConnectivityError(message)

        self.settings = config
        self.running = True
        self._stop_event = asyncio.Event()
        self.task = asyncio.create_task(self._run_loop())
        self._set_state(BOT_STATUS_RUNNING)
        logger.info(
            f"[{self.account_id}] Trading bot started ({config.strategy}, symbols={config.trading_symbols})"
        )

    async def stop(self):
        """Stop the loop after the in-flight symbol finishes. Safe to call repeatedly."""
        self.running = False
        self._stop_event.set()

        task, self.task = self.task, None
        if task is not None and task is not asyncio.current_task():
            await task

        self.price_history.clear()
        if self.state != BOT_STATUS_STOPPED:
            self._set_state(BOT_STATUS_STOPPED)
            logger.info(f"[{self.account_id}] Trading bot stopped")

    async def update_settings(self, patch: Dict[str, Any]) -> BotConfig:
        """
        Persist a settings patch and swap in the new snapshot.

        A tick already in progress keeps the snapshot it started with.

        Raises:
            ConfigurationError: settings missing, or the patched strategy params are invalid
        """
        if self.settings is not None:
            candidate = self.settings.model_copy(update=patch)
            resolve_strategy(candidate.strategy, candidate.strategy_params)

        config = await self.store.update_bot_settings(self.account_id, patch)
        self.settings = config
        self._publish(EventType.SETTINGS_UPDATED, config.model_dump())
        logger.info(f"[{self.account_id}] Bot settings updated: {sorted(patch)}")
        return config

    # =============================================================================
    # Loop
    # =============================================================================

    async def _run_loop(self):
        try:
            while self.running:
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.tick_interval)
                except asyncio.TimeoutError:
                    pass
                if not self.running:
                    break
                await self.tick()
        except Exception as e:
            logger.error(f"[{self.account_id}] Trading loop crashed: {e}", exc_info=True)
            self.running = False
            self._set_state(BOT_STATUS_ERROR, f"Trading loop crashed: {e}")

    async def tick(self):
        """Evaluate every configured symbol once, in order."""
        config = self.settings
        if config is None:
            return

        try:
            strategy = resolve_strategy(config.strategy, config.strategy_params)
        except ConfigurationError as e:
            self._report_error(None, e)
            return

        for symbol in config.trading_symbols:
            if not self.running:
                break
            try:
                await self.process_symbol(symbol, config, strategy)
            except AppError as e:
                self._report_error(symbol, e)
            except Exception as e:
                logger.error(f"[{self.account_id}] Unexpected error processing {symbol}: {e}", exc_info=True)
                self._report_error(symbol, e)

    async def process_symbol(self, symbol: str, config: BotConfig, strategy: Strategy):
        quote = await call_with_timeout(
            self.gateway.get_symbol_price(symbol), f"Price fetch for {symbol}", self.call_timeout
        )
        if quote.bid is None or quote.bid <= 0:
            raise DataError(f"Invalid bid {quote.bid!r} for {symbol}")

        self.price_history.record(symbol, quote.bid)
        signal = generate_signal(symbol, self.price_history.get(symbol), strategy)
        if signal is None:
            return

        decision = await self.admission.evaluate(signal, config.news_avoidance_minutes)
        if decision.news_paused:
            self._publish(
                EventType.NEWS_PAUSE,
                {
                    "symbol": symbol,
                    "currencies": list(decision.currencies),
                    "action": signal.action.value,
                    "reason": "High impact news event upcoming",
                },
            )
            return
        if not decision.admitted:
            return

        await self.executor.execute(signal, config)

    def _report_error(self, symbol: Optional[str], error: Exception):
        where = f" {symbol}" if symbol else ""
        logger.warning(f"[{self.account_id}] Error processing{where}: {error}")
        self._publish(
            EventType.ERROR,
            {"symbol": symbol, "error_type": type(error).__name__, "message": str(error)},
        )
