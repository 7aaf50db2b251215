"""
Shared service instances and their FastAPI dependency providers.

Routers receive these through Depends() so tests can swap them with
app.dependency_overrides.
"""

from autotrader.gateways.factory import create_gateway
from autotrader.services.bot_registry import BotRegistry
from autotrader.services.news_calendar_service import NewsCalendarService, NewsRefreshService
from autotrader.services.trade_store import TradeStore
from autotrader.trading_engine.order_executor import OrderExecutor

gateway = create_gateway()
trade_store = TradeStore()
news_calendar = NewsCalendarService()
news_refresh_service = NewsRefreshService(news_calendar)
bot_registry = BotRegistry(gateway, trade_store, news_calendar)
order_executor = OrderExecutor(gateway, trade_store)


def get_trade_store() -> TradeStore:
    return trade_store


def get_news_calendar() -> NewsCalendarService:
    return news_calendar


def get_bot_registry() -> BotRegistry:
    return bot_registry


def get_order_executor() -> OrderExecutor:
    return order_executor
