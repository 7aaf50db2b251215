"""
Bot Router

Per-account bot settings and lifecycle control (start, stop, status).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from autotrader.dependencies import get_bot_registry, get_trade_store
from autotrader.exceptions import NotFoundError
from autotrader.schemas.bot_settings import (
    BotSettingsCreate,
    BotSettingsResponse,
    BotSettingsUpdate,
    BotStatusResponse,
)
from autotrader.services.bot_registry import BotRegistry
from autotrader.services.trade_store import TradeStore
from autotrader.strategies import StrategyDefinition, list_strategies, resolve_strategy

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/bot", tags=["bot"])


@router.get("/strategies", response_model=List[StrategyDefinition])
async def get_strategies():
    """Available strategies and their parameters"""
    return list_strategies()


@router.get("/{account_id}/settings", response_model=BotSettingsResponse)
async def get_bot_settings(account_id: str, store: TradeStore = Depends(get_trade_store)):
    row = await store.get_bot_settings_row(account_id)
    if row is None:
        raise NotFoundError(f"Bot settings not found for account {account_id}")
    return row


@router.post("/{account_id}/settings", response_model=BotSettingsResponse)
async def save_bot_settings(
    account_id: str,
    update: BotSettingsUpdate,
    store: TradeStore = Depends(get_trade_store),
    registry: BotRegistry = Depends(get_bot_registry),
):
    """Create settings for the account or patch the existing ones"""
    patch = update.model_dump(exclude_unset=True)

    if await store.get_bot_settings_row(account_id) is None:
        create = BotSettingsCreate(**{k: v for k, v in patch.items() if v is not None})
        resolve_strategy(create.strategy, create.strategy_params)
        return await store.upsert_bot_settings(account_id, create.model_dump())

    # A running bot picks the new snapshot up on its next tick
    await registry.update_settings(account_id, patch)
    return await store.get_bot_settings_row(account_id)


@router.post("/{account_id}/start", response_model=BotStatusResponse)
async def start_bot(account_id: str, registry: BotRegistry = Depends(get_bot_registry)):
    await registry.start(account_id)
    logger.info(f"Bot started for account {account_id}")
    return registry.status(account_id)


@router.post("/{account_id}/stop", response_model=BotStatusResponse)
async def stop_bot(account_id: str, registry: BotRegistry = Depends(get_bot_registry)):
    await registry.stop(account_id)
    return registry.status(account_id)


@router.get("/{account_id}/status", response_model=BotStatusResponse)
async def get_bot_status(account_id: str, registry: BotRegistry = Depends(get_bot_registry)):
    return registry.status(account_id)
