from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from surveyai.core.runtime.errors import ProviderTimeoutError

T = TypeVar("T")


async def run_with_timeout(awaitable: Awaitable[T], timeout_seconds: float, *, provider: str, stage: str = "request") -> T:
    """Await ``awaitable`` for at most ``timeout_seconds``; expiry raises ``ProviderTimeoutError``."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise ProviderTimeoutError(provider, f"no {stage} result within {timeout_seconds}s") from None
