"""Accounts Router"""

from typing import List

from fastapi import APIRouter, Depends

from autotrader.dependencies import get_trade_store
from autotrader.exceptions import NotFoundError
from autotrader.schemas.trading import AccountCreate, AccountResponse
from autotrader.services.trade_store import TradeStore

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(account: AccountCreate, store: TradeStore = Depends(get_trade_store)):
    return await store.create_account(account.model_dump())


@router.get("", response_model=List[AccountResponse])
async def list_accounts(store: TradeStore = Depends(get_trade_store)):
    return await store.list_accounts()


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(account_id: str, store: TradeStore = Depends(get_trade_store)):
    account = await store.get_account(account_id)
    if account is None:
        raise NotFoundError(f"Account {account_id} not found")
    return account
