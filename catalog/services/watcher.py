"""
services/watcher.py
-------------------

Change notifications for the backing data file.

A :class:`FileWatcher` hands out :class:`Subscription` objects: the
callback passed to :meth:`FileWatcher.watch` receives an event name
(``"changed"`` or ``"deleted"``) every time the file is modified or
removed, until the subscription is closed. The production watcher
polls ``os.stat`` from a background asyncio task, comparing
modification time and size between polls. Tests substitute their own
watcher that fires synthetic events.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Callable, Optional, Protocol, Tuple, Union

from catalog.logging_config import logger

CHANGED = "changed"
DELETED = "deleted"

ChangeCallback = Callable[[str], None]


class Subscription(Protocol):
    def close(self) -> None:
        ...


class FileWatcher(Protocol):
    def watch(self, path: Union[str, Path], on_change: ChangeCallback) -> Subscription:
        ...


def _fingerprint(path: Path) -> Optional[Tuple[int, int]]:
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return None
    return st.st_mtime_ns, st.st_size


class PollingSubscription:
    """Background task comparing the file fingerprint every ``interval`` seconds."""

    def __init__(self, path: Path, on_change: ChangeCallback, interval: float) -> None:
        self.path = path
        self._on_change = on_change
        self._interval = interval
        self._last = _fingerprint(path)
        self._task: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(self._run())

    @property
    def closed(self) -> bool:
        return self._task is None

    def close(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def poll(self) -> None:
        """Compare the file against the last fingerprint and notify on a difference."""
        current = _fingerprint(self.path)
        if current == self._last:
            return
        self._last = current
        event = DELETED if current is None else CHANGED
        logger.info(json.dumps({"event": "data_file_" + event, "path": str(self.path)}))
        try:
            self._on_change(event)
        except Exception:
            logger.error(json.dumps({"event": "watch_callback_failed", "path": str(self.path)}), exc_info=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.poll()


class PollingFileWatcher:
    def __init__(self, interval: float = 1.0) -> None:
        self.interval = interval

    def watch(self, path: Union[str, Path], on_change: ChangeCallback) -> PollingSubscription:
        """Start watching ``path``; must be called from inside the running loop."""
        return PollingSubscription(Path(path), on_change, self.interval)
