"""
Crawl-wide cap on simultaneous outbound requests.
"""
from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Optional, Type

__all__ = ("ConcurrencyLimiter", "DEFAULT_CAPACITY")

DEFAULT_CAPACITY = 100


class ConcurrencyLimiter:
    """Counting permit pool shared by every fetch of one crawl, at any depth.

    Use it as ``async with limiter:`` around a request so the permit is
    returned on every exit path.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._sem = asyncio.Semaphore(capacity)
        self.in_flight = 0
        self.peak = 0

    async def acquire(self) -> None:
        await self._sem.acquire()
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)

    def release(self) -> None:
        self.in_flight -= 1
        self._sem.release()

    async def __aenter__(self) -> ConcurrencyLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"ConcurrencyLimiter(capacity={self.capacity}, in_flight={self.in_flight})"
