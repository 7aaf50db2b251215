"""
Economic Calendar Router

Upcoming calendar events as stored by the news refresh service.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from autotrader.dependencies import get_news_calendar
from autotrader.schemas.trading import NewsEventResponse
from autotrader.services.news_calendar_service import NewsCalendarService

router = APIRouter(prefix="/api/news", tags=["news"])


@router.get("/upcoming", response_model=List[NewsEventResponse])
async def get_upcoming_events(
    hours: float = Query(24, gt=0, le=24 * 7),
    calendar: NewsCalendarService = Depends(get_news_calendar),
):
    return await calendar.get_upcoming_events(hours)


@router.get("/high-impact", response_model=List[NewsEventResponse])
async def get_high_impact_events(
    hours: float = Query(24, gt=0, le=24 * 7),
    calendar: NewsCalendarService = Depends(get_news_calendar),
):
    return await calendar.get_high_impact_events(hours)


@router.post("/refresh")
async def refresh_calendar(calendar: NewsCalendarService = Depends(get_news_calendar)):
    """Fetch the calendar now instead of waiting for the next scheduled refresh"""
    count = await calendar.refresh()
    return {"message": f"Updated {count} news events", "count": count}
