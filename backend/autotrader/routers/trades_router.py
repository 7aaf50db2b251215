"""
Trades Router

Trade history, manual orders and manual close.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from autotrader.dependencies import get_order_executor, get_trade_store
from autotrader.exceptions import NotFoundError
from autotrader.schemas.trading import ManualTradeRequest, TradeResponse
from autotrader.services.trade_store import TradeStore
from autotrader.trading_engine.order_executor import OrderExecutor

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.post("/manual", response_model=TradeResponse)
async def place_manual_trade(
    request: ManualTradeRequest,
    store: TradeStore = Depends(get_trade_store),
    executor: OrderExecutor = Depends(get_order_executor),
):
    if await store.get_account(request.account_id) is None:
        raise NotFoundError(f"Account {request.account_id} not found")

    return await executor.submit_manual_order(
        account_id=request.account_id,
        symbol=request.symbol,
        direction=request.type,
        volume=request.volume,
        stop_loss=request.stop_loss,
        take_profit=request.take_profit,
    )


@router.post("/{trade_id}/close", response_model=TradeResponse)
async def close_trade(trade_id: int, executor: OrderExecutor = Depends(get_order_executor)):
    return await executor.close_trade(trade_id)


@router.get("/{account_id}", response_model=List[TradeResponse])
async def get_trades(
    account_id: str,
    status: Optional[str] = None,
    limit: int = Query(200, ge=1, le=1000),
    store: TradeStore = Depends(get_trade_store),
):
    return await store.list_trades(account_id, status=status, limit=limit)


@router.get("/{account_id}/open", response_model=List[TradeResponse])
async def get_open_trades(account_id: str, store: TradeStore = Depends(get_trade_store)):
    return await store.list_open_trades(account_id)
