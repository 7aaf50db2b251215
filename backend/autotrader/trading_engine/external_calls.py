"""Timeout wrapper for calls that leave the process (gateway, news, persistence)."""

import asyncio
from typing import Awaitable, Optional, TypeVar

from autotrader.config import settings
from autotrader.exceptions import ConnectivityError

T = TypeVar("T")


async def call_with_timeout(awaitable: Awaitable[T], description: str, timeout: Optional[float] = None) -> T:
    """
    Await an external call with a bounded timeout.

    Raises:
        ConnectivityError: the call did not complete in time
    """
    timeout = timeout if timeout is not None else settings.external_call_timeout_seconds
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        raise ConnectivityError(f"{description} timed out after {timeout}s")
