"""
Bounded external calls.

Every call to an external provider goes through `bounded_call` so that a slow
provider surfaces as a `ProviderTimeoutError` instead of holding the request open.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from src.integrations.errors import ProviderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded_call(awaitable: Awaitable[T], timeout_seconds: float, operation: str) -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        logger.error("%s timed out after %.1fs", operation, timeout_seconds)
        raise ProviderTimeoutError(operation, timeout_seconds) from exc
