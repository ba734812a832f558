from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx


@asynccontextmanager
async def http_session(client: Optional[httpx.AsyncClient], timeout_seconds: float) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one bounded by `timeout_seconds`."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout_seconds) as session:
        yield session


def read_json(response: httpx.Response) -> Any:
    """Parsed JSON body, or the raw text when the body isn't JSON."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text
