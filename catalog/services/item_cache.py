"""
services/item_cache.py
----------------------

Holds the current item :class:`Snapshot` and reloads it through the
snapshot loader once its TTL has elapsed. Every request asks this
cache for the snapshot again instead of keeping a reference across
requests, so a reload is picked up as soon as it is installed.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Optional

from catalog.services.snapshot_loader import Snapshot
from catalog.utils.cache import AsyncTTLCache, CacheEntry, CacheState, Clock

DEFAULT_ITEMS_TTL = 30.0


class ItemCache:
    def __init__(
        self,
        load: Callable[[], Awaitable[Snapshot]],
        *,
        ttl: float = DEFAULT_ITEMS_TTL,
        clock: Clock = time.monotonic,
        serve_stale_on_error: bool = True,
    ) -> None:
        self._cache: AsyncTTLCache[Snapshot] = AsyncTTLCache(
            load,
            ttl,
            clock=clock,
            serve_stale_on_error=serve_stale_on_error,
            name="items",
        )

    @property
    def state(self) -> CacheState:
        return self._cache.state

    @property
    def ttl(self) -> float:
        return self._cache.ttl

    def peek(self) -> Optional[CacheEntry[Snapshot]]:
        return self._cache.peek()

    async def get(self) -> Snapshot:
        """Return the current snapshot, loading it if empty or stale.

        :raises LoadError: when the first load fails, or when a refresh
            fails and serving stale data is disabled
        """
        return await self._cache.get()

    def invalidate(self) -> None:
        self._cache.invalidate()
