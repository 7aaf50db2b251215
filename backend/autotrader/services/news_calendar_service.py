"""
News Calendar Service

Keeps a local copy of the economic calendar and answers the trading
engine's question: is a high-impact event due for these currencies soon?

Calendar entries are fetched from the ForexFactory weekly JSON feed and
stored in the news_events table. If the feed is unreachable a small
built-in sample calendar is stored instead so the news gate keeps working
in development.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import aiohttp
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from autotrader.config import settings
from autotrader.constants import COUNTRY_CURRENCY_MAP, IMPACT_HIGH, IMPACT_LOW, IMPACT_MEDIUM
from autotrader.database import async_session_maker
from autotrader.models import NewsEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarEntry:
    title: str
    currency: str
    impact: str
    event_time: datetime  # Naive UTC
    country: str = ""
    forecast: Optional[str] = None
    previous: Optional[str] = None
    actual: Optional[str] = None


# =============================================================================
# Parsing helpers
# =============================================================================


def map_impact_level(impact: Any) -> str:
    """Normalize the feed's impact field ("High", "red", 3, ...) to high/medium/low."""
    if isinstance(impact, bool):
        return IMPACT_LOW
    if isinstance(impact, str):
        lower = impact.lower()
        if "high" in lower or "red" in lower:
            return IMPACT_HIGH
        if "medium" in lower or "orange" in lower:
            return IMPACT_MEDIUM
        return IMPACT_LOW
    if isinstance(impact, (int, float)):
        if impact >= 3:
            return IMPACT_HIGH
        if impact >= 2:
            return IMPACT_MEDIUM
    return IMPACT_LOW


def currency_from_country(country: str) -> str:
    """Calendar feeds use either a currency code (USD) or a country name (United States)."""
    country = (country or "").strip()
    if len(country) == 3 and country.isalpha() and country.isupper():
        return country
    return COUNTRY_CURRENCY_MAP.get(country, country[:3].upper())


def parse_event_time(date: str, time: str = "") -> Optional[datetime]:
    """
    Parse a calendar date (+ optional time) into naive UTC.

    Accepts ISO timestamps with an offset ("2024-01-08T08:30:00-05:00") or a
    date plus an "HH:MM" time interpreted as UTC. Returns None if unparseable.
    """
    if not date:
        return None
    try:
        if "T" in date:
            parsed = datetime.fromisoformat(date.replace("Z", "+00:00"))
        else:
            time_str = time if time and ":" in time else "12:00"
            parsed = datetime.fromisoformat(f"{date}T{time_str}")
    except ValueError:
        logger.warning(f"Failed to parse event date/time: {date!r} {time!r}")
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_calendar(data: Iterable[Dict[str, Any]]) -> List[CalendarEntry]:
    entries = []
    for raw in data:
        event_time = parse_event_time(raw.get("date", ""), raw.get("time", ""))
        if event_time is None or not raw.get("title"):
            continue
        country = raw.get("country", "") or ""
        entries.append(
            CalendarEntry(
                title=raw["title"],
                currency=currency_from_country(country),
                impact=map_impact_level(raw.get("impact")),
                event_time=event_time,
                country=country,
                forecast=raw.get("forecast") or None,
                previous=raw.get("previous") or None,
                actual=raw.get("actual") or None,
            )
        )
    return entries


def sample_calendar(now: Optional[datetime] = None) -> List[CalendarEntry]:
    """Fallback calendar for when the feed cannot be reached."""
    today = (now or datetime.utcnow()).date().isoformat()
    rows = [
        ("Non-Farm Payrolls", "USD", IMPACT_HIGH, "14:30", "190K", "185K"),
        ("Federal Funds Rate Decision", "USD", IMPACT_HIGH, "16:00", "5.50%", "5.25%"),
        ("ECB Interest Rate Decision", "EUR", IMPACT_MEDIUM, "13:45", "4.00%", "4.00%"),
        ("GDP Growth Rate", "GBP", IMPACT_MEDIUM, "10:30", "0.2%", "0.1%"),
        ("CPI Inflation Rate", "JPY", IMPACT_LOW, "23:30", "3.2%", "3.1%"),
    ]
    return [
        CalendarEntry(
            title=title,
            currency=currency,
            impact=impact,
            event_time=parse_event_time(today, hhmm),
            country=currency,
            forecast=forecast,
            previous=previous,
        )
        for title, currency, impact, hhmm, forecast, previous in rows
    ]


# =============================================================================
# Service
# =============================================================================


class NewsCalendarService:
    """News collaborator backed by the news_events table."""

    def __init__(
        self,
        session_maker: async_sessionmaker = async_session_maker,
        calendar_url: Optional[str] = None,
        clock=datetime.utcnow,
    ):
        self._session_maker = session_maker
        self._calendar_url = calendar_url or settings.news_calendar_url
        self._clock = clock

    async def fetch_calendar(self) -> List[CalendarEntry]:
        """Fetch and parse the calendar feed, falling back to the sample calendar."""
        try:
            headers = {"User-Agent": "Autotrader/1.0"}
            timeout = aiohttp.ClientTimeout(total=15)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self._calendar_url, headers=headers) as response:
                    if response.status != 200:
                        raise aiohttp.ClientResponseError(
                            response.request_info, response.history, status=response.status
                        )
                    data = await response.json(content_type=None)
                    if not isinstance(data, list):
                        raise ValueError(f"Unexpected calendar payload: {type(data).__name__}")
            return parse_calendar(data)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Failed to fetch economic calendar: {e}")
            logger.warning("Using built-in sample calendar")
            return sample_calendar(self._clock())

    async def store_events(self, entries: Iterable[CalendarEntry]) -> int:
        """Insert new entries and refresh actual/forecast on known ones. Returns entries written."""
        count = 0
        async with self._session_maker() as db:
            for entry in entries:
                result = await db.execute(
                    select(NewsEvent).where(
                        NewsEvent.title == entry.title,
                        NewsEvent.currency == entry.currency,
                        NewsEvent.event_time == entry.event_time,
                    )
                )
                existing = result.scalars().first()
                if existing:
                    existing.impact = entry.impact
                    existing.actual = entry.actual
                    existing.forecast = entry.forecast
                    existing.previous = entry.previous
                else:
                    db.add(
                        NewsEvent(
                            title=entry.title,
                            currency=entry.currency,
                            impact=entry.impact,
                            event_time=entry.event_time,
                            actual=entry.actual,
                            forecast=entry.forecast,
                            previous=entry.previous,
                            description=f"{entry.title} - {entry.country}",
                            country=entry.country,
                        )
                    )
                count += 1
            await db.commit()
        return count

    async def refresh(self) -> int:
        entries = await self.fetch_calendar()
        count = await self.store_events(entries)
        logger.info(f"Updated {count} news events in database")
        return count

    async def get_upcoming_events(self, hours_ahead: float = 24, impact: Optional[str] = None) -> List[NewsEvent]:
        now = self._clock()
        async with self._session_maker() as db:
            query = select(NewsEvent).where(
                NewsEvent.event_time >= now,
                NewsEvent.event_time <= now + timedelta(hours=hours_ahead),
            )
            if impact:
                query = query.where(NewsEvent.impact == impact)
            result = await db.execute(query.order_by(NewsEvent.event_time))
            return list(result.scalars().all())

    async def get_high_impact_events(self, hours_ahead: float = 24) -> List[NewsEvent]:
        return await self.get_upcoming_events(hours_ahead, impact=IMPACT_HIGH)

    async def has_high_impact_event(self, currencies: List[str], within_minutes: float) -> bool:
        """True if a high-impact event for any of the currencies is due within the window."""
        if not currencies:
            return False
        now = self._clock()
        async with self._session_maker() as db:
            result = await db.execute(
                select(NewsEvent.id)
                .where(
                    NewsEvent.impact == IMPACT_HIGH,
                    NewsEvent.currency.in_(currencies),
                    NewsEvent.event_time >= now,
                    NewsEvent.event_time <= now + timedelta(minutes=within_minutes),
                )
                .limit(1)
            )
            return result.first() is not None


# Seconds to wait after startup before the first refresh
INITIAL_DELAY = 5


class NewsRefreshService:
    """Background service that periodically refreshes the economic calendar."""

    def __init__(self, calendar: NewsCalendarService, interval_minutes: Optional[int] = None):
        self.calendar = calendar
        self.interval_seconds = (interval_minutes or settings.news_refresh_interval_minutes) * 60
        self._task = None
        self._running = False
        self._last_refresh: Optional[datetime] = None

    async def start(self):
        """Start the background refresh task."""
        if self._running:
            logger.warning("News refresh service already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info(f"News refresh service started with {self.interval_seconds // 60} minute update interval")

    async def stop(self):
        """Stop the background refresh task."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("News refresh service stopped")

    async def _refresh_loop(self):
        await asyncio.sleep(INITIAL_DELAY)
        while self._running:
            try:
                await self.calendar.refresh()
                self._last_refresh = datetime.utcnow()
            except Exception as e:
                logger.error(f"News refresh failed: {e}")
            await asyncio.sleep(self.interval_seconds)

    @property
    def status(self) -> dict:
        return {
            "running": self._running,
            "last_refresh": self._last_refresh.isoformat() if self._last_refresh else None,
            "interval_minutes": self.interval_seconds // 60,
        }
