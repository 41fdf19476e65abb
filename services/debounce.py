"""Per-key cancel-and-replace debouncing for async calls.

Each key (one per browser client) has at most one pending call.  Submitting
a new call for the same key cancels the pending one before its delay has
elapsed; the caller of the cancelled call gets :class:`Superseded`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Superseded(Exception):
    """A newer call for the same key replaced this one."""


class Debouncer:
    def __init__(self, delay_seconds: float):
        self.delay_seconds = delay_seconds
        self._pending: dict[str, asyncio.Task] = {}
        self._superseded: set[asyncio.Task] = set()

    def pending(self, key: str) -> bool:
        task = self._pending.get(key)
        return task is not None and not task.done()

    async def _after_delay(self, factory: Callable[[], Awaitable[T]]) -> T:
        await asyncio.sleep(self.delay_seconds)
        return await factory()

    async def submit(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Run ``factory()`` after the delay unless a newer call for *key* arrives first."""
        previous = self._pending.get(key)
        if previous is not None and not previous.done():
            self._superseded.add(previous)
            previous.cancel()
            logger.debug("Debounced call for %s superseded", key)

        task = asyncio.create_task(self._after_delay(factory))
        self._pending[key] = task
        try:
            return await task
        except asyncio.CancelledError:
            if task in self._superseded:
                raise Superseded(key) from None
            raise
        finally:
            self._superseded.discard(task)
            if self._pending.get(key) is task:
                del self._pending[key]
