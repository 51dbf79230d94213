"""
utils/cache.py
---------------

In‑process cache with TTL support and single‑flight refresh. The item
snapshot and the derived statistics are each held in one
:class:`AsyncTTLCache`. An entry is stored with the clock reading
taken when its value was produced and is considered valid while
``now - timestamp < ttl``; an expired entry is never returned without
being refreshed first.

The cache is designed for a single process running an asyncio event
loop. At most one refresh runs at a time per cache instance: callers
arriving while a refresh is in flight await that same refresh instead
of starting their own. The TTL check, the decision to refresh and the
registration of the in‑flight task happen without any ``await`` in
between, which makes the sequence atomic with respect to other tasks
on the loop.
"""

from __future__ import annotations

import asyncio
import enum
import json
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from catalog.logging_config import logger

T = TypeVar("T")

Clock = Callable[[], float]


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    LOADING = "loading"
    VALID = "valid"
    STALE = "stale"


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value together with the moment it was produced."""

    value: T
    timestamp: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


class AsyncTTLCache(Generic[T]):
    """Single‑entry cache refreshed through an async ``loader``.

    :param loader: coroutine function producing a fresh value
    :param ttl: time to live, in the units of ``clock``
    :param clock: monotonic clock; tests inject a fake one
    :param serve_stale_on_error: when a refresh fails and a previous value
        exists, return that value instead of raising. The failure is
        logged. A failure while the cache is empty always propagates.
    :param schedule_expiry: also evict the value with a loop timer once
        its TTL has elapsed, instead of only detecting expiry on read
    :param name: label used in log messages
    """

    def __init__(
        self,
        loader: Callable[[], Awaitable[T]],
        ttl: float,
        *,
        clock: Clock = time.monotonic,
        serve_stale_on_error: bool = True,
        schedule_expiry: bool = False,
        name: str = "cache",
    ) -> None:
        self._loader = loader
        self.ttl = ttl
        self._clock = clock
        self.serve_stale_on_error = serve_stale_on_error
        self._schedule_expiry = schedule_expiry
        self.name = name
        self._entry: Optional[CacheEntry[T]] = None
        self._inflight: Optional[asyncio.Task] = None
        self._inflight_generation = 0
        self._expiry_handle: Optional[asyncio.TimerHandle] = None
        # bumped by invalidate(); a refresh started under an older
        # generation must not install its value
        self._generation = 0
        self._on_populated: List[Callable[[T], None]] = []

    @property
    def state(self) -> CacheState:
        if self._inflight is not None:
            return CacheState.LOADING
        if self._entry is None:
            return CacheState.EMPTY
        if self._entry.is_valid(self._clock()):
            return CacheState.VALID
        return CacheState.STALE

    def peek(self) -> Optional[CacheEntry[T]]:
        """Return the current entry, valid or not, without refreshing."""
        return self._entry

    def add_populated_listener(self, callback: Callable[[T], None]) -> None:
        """Call ``callback`` with the value after every successful refresh."""
        self._on_populated.append(callback)

    async def get(self) -> T:
        """Return a valid value, refreshing it first if needed.

        Cancelling the awaiting caller does not cancel the shared refresh.
        """
        entry = self._entry
        if entry is not None and entry.is_valid(self._clock()):
            return entry.value
        task = self._inflight
        if task is None or self._inflight_generation != self._generation:
            # a refresh orphaned by invalidate() may still be running; the new
            # one waits for it so only one load is ever in flight
            task = asyncio.ensure_future(self._refresh(self._generation, task))
            task.add_done_callback(self._refresh_done)
            self._inflight = task
            self._inflight_generation = self._generation
        return await asyncio.shield(task)

    def invalidate(self) -> None:
        """Drop the cached value so the next :meth:`get` refreshes.

        A refresh already in flight keeps serving its current awaiters
        but its result is discarded; the next refresh starts once it ends.
        """
        self._generation += 1
        self._entry = None
        self._cancel_expiry()
        logger.info(json.dumps({"event": "cache_invalidated", "cache": self.name}))

    def close(self) -> None:
        self._cancel_expiry()

    async def _refresh(self, generation: int, predecessor: Optional[asyncio.Task] = None) -> T:
        if predecessor is not None and not predecessor.done():
            await asyncio.wait([predecessor])
        previous = self._entry
        started = time.perf_counter()
        try:
            value = await self._loader()
        except Exception as exc:
            if previous is not None and self.serve_stale_on_error:
                logger.warning(json.dumps({
                    "event": "cache_refresh_failed_serving_stale",
                    "cache": self.name,
                    "detail": str(exc),
                    "stale_age": round(self._clock() - previous.timestamp, 3),
                }))
                return previous.value
            logger.error(json.dumps({
                "event": "cache_refresh_failed",
                "cache": self.name,
                "detail": str(exc),
            }))
            raise
        if generation != self._generation:
            logger.info(json.dumps({"event": "cache_refresh_discarded", "cache": self.name}))
            return value
        # whole-value replacement; readers never see a partial entry
        self._entry = CacheEntry(value=value, timestamp=self._clock(), ttl=self.ttl)
        if self._schedule_expiry:
            self._arm_expiry(generation)
        logger.info(json.dumps({
            "event": "cache_refreshed",
            "cache": self.name,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }))
        for callback in self._on_populated:
            try:
                callback(value)
            except Exception:
                logger.error(json.dumps({"event": "cache_listener_failed", "cache": self.name}), exc_info=True)
        return value

    def _refresh_done(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        # every awaiter may have been cancelled; retrieve the exception so
        # the loop does not report it as never retrieved
        if not task.cancelled():
            task.exception()

    def _arm_expiry(self, generation: int) -> None:
        self._cancel_expiry()
        loop = asyncio.get_running_loop()
        self._expiry_handle = loop.call_later(self.ttl, self._expire, generation)

    def _expire(self, generation: int) -> None:
        self._expiry_handle = None
        if generation == self._generation and self._entry is not None:
            self._entry = None
            logger.debug(json.dumps({"event": "cache_expired", "cache": self.name}))

    def _cancel_expiry(self) -> None:
        if self._expiry_handle is not None:
            self._expiry_handle.cancel()
            self._expiry_handle = None
