"""
Event Bus

In-process publish/subscribe for bot lifecycle and trade events.

Publishing is fire-and-forget: publish() never awaits a subscriber, and a
subscriber that raises is logged and otherwise ignored. Async handlers are
scheduled as tasks on the running loop.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    TRADE_EXECUTED = "tradeExecuted"
    TRADE_CLOSED = "tradeClosed"
    STATUS_CHANGED = "statusChanged"
    NEWS_PAUSE = "newsPause"
    SETTINGS_UPDATED = "settingsUpdated"
    ERROR = "error"


@dataclass(frozen=True)
class BotEvent:
    type: EventType
    account_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_message(self) -> Dict[str, Any]:
        """Serializable form for downstream broadcasters."""
        return {
            "type": self.type.value,
            "account_id": self.account_id,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


Handler = Callable[[BotEvent], Any]


class EventBus:
    def __init__(self):
        self._handlers: Dict[Optional[EventType], List[Handler]] = {}
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, handler: Handler, event_type: Optional[EventType] = None):
        """Register a handler for one event type, or for every event when event_type is None."""
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, handler: Handler, event_type: Optional[EventType] = None):
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: BotEvent):
        handlers = list(self._handlers.get(event.type, [])) + list(self._handlers.get(None, []))
        for handler in handlers:
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    task = asyncio.ensure_future(result)
                    self._pending.add(task)
                    task.add_done_callback(self._on_handler_done)
            except Exception as e:
                logger.warning(f"Event handler failed for {event.type.value}: {e}")

    def _on_handler_done(self, task: asyncio.Task):
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"Async event handler failed: {exc}")

    async def drain(self):
        """Wait for scheduled async handlers to finish. Used on shutdown and in tests."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


# Global singleton instance
event_bus = EventBus()
