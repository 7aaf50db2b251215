"""
Database models, organized by domain.

All model classes are re-exported here so imports stay short:
    from autotrader.models import Account, BotSettings, Trade, NewsEvent
"""

from autotrader.database import Base  # noqa: F401  re-exported for tests/conftest.py
from autotrader.models.calendar import NewsEvent
from autotrader.models.trading import Account, BotSettings, Trade

__all__ = [
    "Base",
    # Trading
    "Account", "BotSettings", "Trade",
    # Calendar
    "NewsEvent",
]
