from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite+aiosqlite:///./autotrader.db"
    database_echo: bool = False

    # Security
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Execution gateway
    # Options: paper, mt5_bridge
    gateway_type: str = "paper"
    mt5_bridge_url: str = "http://localhost:5555"
    mt5_magic_number: int = 234000
    mt5_deviation: int = 20  # Max slippage in points accepted by the EA
    paper_starting_balance: float = 100000.0

    # Bot loop
    bot_tick_interval_seconds: float = 10.0
    external_call_timeout_seconds: float = 5.0

    # Economic calendar
    news_calendar_url: str = "https://nfs.faireconomy.media/ff_calendar_thisweek.json"
    news_refresh_interval_minutes: int = 60

    @field_validator("gateway_type")
    @classmethod
    def normalize_gateway_type(cls, v: str) -> str:
        """Accept PAPER / Mt5_Bridge etc. from the environment"""
        return v.strip().lower()

    def get_cors_origins_list(self) -> List[str]:
        return list(self.cors_origins)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
