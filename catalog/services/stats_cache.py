"""
services/stats_cache.py
-----------------------

Memoizes the catalog statistics under their own TTL, independent of
the item snapshot. Besides expiring with time, the cached statistics
are dropped as soon as the backing file changes: after the first
successful computation the cache subscribes to a :class:`FileWatcher`
and runs its change handler on every ``changed`` event, which is
:meth:`StatsCache.invalidate` unless the owner installs another one.
Only one subscription is held at a time; re‑establishing it closes the
previous one first so no event is delivered twice.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from catalog.logging_config import logger
from catalog.schemas.items import Stats
from catalog.services.snapshot_loader import Snapshot
from catalog.services.stats import compute_stats
from catalog.services.watcher import CHANGED, FileWatcher, Subscription
from catalog.utils.cache import AsyncTTLCache, CacheState, Clock

DEFAULT_STATS_TTL = 60.0


class StatsCache:
    """Statistics cache fed by ``get_snapshot``.

    :param get_snapshot: returns the current snapshot, normally
        :meth:`ItemCache.get`
    :param watcher: change notification source; ``None`` disables the watch
    :param watch_path: file to watch
    :param schedule_expiry: evict with a loop timer when the TTL elapses
    """

    def __init__(
        self,
        get_snapshot: Callable[[], Awaitable[Snapshot]],
        *,
        ttl: float = DEFAULT_STATS_TTL,
        clock: Clock = time.monotonic,
        watcher: Optional[FileWatcher] = None,
        watch_path: Union[str, Path, None] = None,
        serve_stale_on_error: bool = True,
        schedule_expiry: bool = True,
    ) -> None:
        self._get_snapshot = get_snapshot
        self._watcher = watcher
        self._watch_path = watch_path
        self._subscription: Optional[Subscription] = None
        self._change_handler: Callable[[], None] = self.invalidate
        self._cache: AsyncTTLCache[Stats] = AsyncTTLCache(
            self._compute,
            ttl,
            clock=clock,
            serve_stale_on_error=serve_stale_on_error,
            schedule_expiry=schedule_expiry,
            name="stats",
        )
        self._cache.add_populated_listener(lambda _stats: self.ensure_watch())

    @property
    def state(self) -> CacheState:
        return self._cache.state

    @property
    def watching(self) -> bool:
        return self._subscription is not None

    async def _compute(self) -> Stats:
        snapshot = await self._get_snapshot()
        return compute_stats(snapshot.items)

    async def get(self) -> Stats:
        return await self._cache.get()

    def invalidate(self) -> None:
        """Clear the statistics and cancel the pending expiry timer."""
        self._cache.invalidate()

    def ensure_watch(self) -> None:
        """Subscribe to change notifications unless already subscribed."""
        if self._subscription is None:
            self._subscribe()

    def restart_watch(self) -> None:
        self._unsubscribe()
        self._subscribe()

    def set_change_handler(self, handler: Callable[[], None]) -> None:
        """Run ``handler`` instead of :meth:`invalidate` on a ``changed`` event.

        The owner of the item snapshot uses this to drop the snapshot too.
        """
        self._change_handler = handler

    def on_backing_changed(self, event: str) -> None:
        if event == CHANGED:
            logger.info(json.dumps({"event": "stats_invalidated_by_watch", "path": str(self._watch_path)}))
            self._change_handler()

    def close(self) -> None:
        self._unsubscribe()
        self._cache.close()

    def _subscribe(self) -> None:
        if self._watcher is None or self._watch_path is None:
            return
        self._subscription = self._watcher.watch(self._watch_path, self.on_backing_changed)
        logger.info(json.dumps({"event": "watch_started", "path": str(self._watch_path)}))

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
