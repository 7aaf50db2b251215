"""
Order Executor

Turns an admitted signal into a broker order and a persisted trade record.

BUY/SELL: read the account balance, size the position, submit the order,
record the trade, publish tradeExecuted.
CLOSE: close every open automated trade for the symbol.

Execution errors are raised to the caller and never retried here.
"""

import logging
from datetime import datetime
from typing import List, Optional

from autotrader.constants import TRADE_STATUS_OPEN
from autotrader.exceptions import ConflictError, NotFoundError
from autotrader.gateways.base import BrokerGateway
from autotrader.models import Trade
from autotrader.schemas.bot_settings import BotConfig
from autotrader.services.event_bus import BotEvent, EventBus, EventType, event_bus
from autotrader.services.trade_store import TradeStore
from autotrader.strategies import SignalAction, TradingSignal
from autotrader.trading_engine.external_calls import call_with_timeout
from autotrader.trading_engine.risk_sizer import calculate_volume

logger = logging.getLogger(__name__)


def _trade_payload(trade: Trade) -> dict:
    return {
        "trade_id": trade.id,
        "ticket": trade.ticket,
        "symbol": trade.symbol,
        "type": trade.type,
        "volume": trade.volume,
        "entry_price": trade.entry_price,
        "exit_price": trade.exit_price,
        "stop_loss": trade.stop_loss,
        "take_profit": trade.take_profit,
        "profit": trade.profit,
        "status": trade.status,
        "is_manual": trade.is_manual,
    }


class OrderExecutor:
    def __init__(
        self,
        gateway: BrokerGateway,
        store: TradeStore,
        bus: EventBus = event_bus,
        call_timeout: Optional[float] = None,
    ):
        self.gateway = gateway
        self.store = store
        self.bus = bus
        self._call_timeout = call_timeout

    async def _call(self, awaitable, description: str):
        return await call_with_timeout(awaitable, description, self._call_timeout)

    async def execute(self, signal: TradingSignal, config: BotConfig) -> List[Trade]:
        """Act on an admitted signal. Returns the trades opened or closed."""
        if signal.action == SignalAction.CLOSE:
            return await self._close_symbol(config.account_id, signal.symbol)

        account = await self._call(self.gateway.get_account_info(), "Account info")
        volume = calculate_volume(account.balance, config.risk_per_trade, signal.price, signal.stop_loss)
        logger.info(
            f"[{config.account_id}] {signal.action.value} {signal.symbol}: {signal.reason} "
            f"(confidence {signal.confidence:.2f}, volume {volume:.2f})"
        )

        trade = await self._open(
            account_id=config.account_id,
            symbol=signal.symbol,
            direction=signal.action.value,
            volume=volume,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
            comment=f"Auto: {signal.reason}",
            is_manual=False,
        )
        return [trade]

    async def submit_manual_order(
        self,
        account_id: str,
        symbol: str,
        direction: str,
        volume: float,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
    ) -> Trade:
        """Place a user-requested order; recorded with is_manual=True."""
        return await self._open(
            account_id=account_id,
            symbol=symbol,
            direction=direction,
            volume=volume,
            stop_loss=stop_loss,
            take_profit=take_profit,
            comment="Manual Trade",
            is_manual=True,
        )

    async def _open(
        self,
        account_id: str,
        symbol: str,
        direction: str,
        volume: float,
        stop_loss: Optional[float],
        take_profit: Optional[float],
        comment: str,
        is_manual: bool,
    ) -> Trade:
        result = await self._call(
            self.gateway.submit_order(symbol, direction, volume, stop_loss, take_profit, comment),
            f"Order submission for {symbol}",
        )

        trade = await self.store.create_trade(
            {
                "account_id": account_id,
                "ticket": result.ticket,
                "symbol": symbol,
                "type": direction,
                "volume": result.fill_volume,
                "entry_price": result.fill_price,
                "stop_loss": stop_loss,
                "take_profit": take_profit,
                "status": TRADE_STATUS_OPEN,
                "open_time": datetime.utcnow(),
                "comment": comment,
                "is_manual": is_manual,
            }
        )
        self.bus.publish(BotEvent(EventType.TRADE_EXECUTED, account_id, _trade_payload(trade)))
        return trade

    async def _close_symbol(self, account_id: str, symbol: str) -> List[Trade]:
        open_trades = await self.store.list_open_trades(account_id, symbol=symbol, is_manual=False)
        if not open_trades:
            logger.info(f"[{account_id}] Close signal for {symbol} with no open automated trades")
        return [await self.close_trade(trade.id) for trade in open_trades]

    async def close_trade(self, trade_id: int) -> Trade:
        """
        Close a trade's broker position and mark the record closed.

        Raises:
            NotFoundError: no such trade
            ConflictError: the trade is not open
            ExecutionError: the broker refused to close the position
        """
        trade = await self.store.get_trade(trade_id)
        if trade is None:
            raise NotFoundError(f"Trade {trade_id} not found")
        if trade.status != TRADE_STATUS_OPEN:
            raise ConflictError(f"Trade {trade_id} is already {trade.status}")

        result = await self._call(self.gateway.close_position(trade.ticket), f"Close of ticket {trade.ticket}")
        closed = await self.store.mark_trade_closed(trade.id, exit_price=result.price, profit=result.profit)
        logger.info(f"[{closed.account_id}] Closed trade {closed.id} ({closed.symbol}) profit {result.profit:.2f}")

        self.bus.publish(BotEvent(EventType.TRADE_CLOSED, closed.account_id, _trade_payload(closed)))
        return closed
