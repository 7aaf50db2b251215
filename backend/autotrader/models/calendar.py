"""Economic calendar models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from autotrader.database import Base


class NewsEvent(Base):
    """An economic calendar entry, refreshed periodically from the calendar feed."""
    __tablename__ = "news_events"
    __table_args__ = (
        UniqueConstraint("title", "currency", "event_time", name="uq_news_event"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    currency = Column(String, nullable=False, index=True)  # ISO code, e.g. USD
    impact = Column(String, nullable=False)  # high, medium, low
    event_time = Column(DateTime, nullable=False, index=True)  # Naive UTC
    actual = Column(String, nullable=True)
    forecast = Column(String, nullable=True)
    previous = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    country = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
