"""
services/snapshot_loader.py
---------------------------

Reads the item catalog from its backing JSON file and turns it into an
immutable :class:`Snapshot`. The file is read in its entirety on a
worker thread so the event loop keeps serving other requests while the
disk is busy. Parsing is all or nothing: a single malformed record
fails the whole load with :class:`LoadError` rather than serving a
silently truncated catalog. The loader never touches a cache; callers
decide what to do with the failure.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Tuple, Union

import orjson
from pydantic import ValidationError

from catalog.core.errors import LoadError, NotFoundError
from catalog.logging_config import logger
from catalog.schemas.items import Item


@dataclass(frozen=True)
class Snapshot:
    """Point‑in‑time copy of the whole item collection."""

    items: Tuple[Item, ...]
    loaded_at: float

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def find(self, item_id: int) -> Item:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError("Item", item_id)


def parse_items(raw: bytes, source: str = "<memory>") -> Tuple[Item, ...]:
    """Parse the backing JSON document into validated items.

    :raises LoadError: on invalid JSON, a non-array document, a record
        failing validation or a duplicated ``id``
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise LoadError(f"Invalid JSON in item data: {exc}", source=source) from exc
    if not isinstance(data, list):
        raise LoadError("Item data must be a JSON array", source=source)

    items: List[Item] = []
    seen = set()
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise LoadError(f"Record {index} is not an object", source=source)
        try:
            item = Item.model_validate(record)
        except ValidationError as exc:
            raise LoadError(
                f"Record {index} is malformed: {exc.error_count()} validation error(s)",
                source=source,
            ) from exc
        if item.id in seen:
            raise LoadError(f"Record {index} repeats id {item.id}", source=source)
        seen.add(item.id)
        items.append(item)
    return tuple(items)


class JsonFileLoader:
    """Load snapshots from a JSON file on disk."""

    def __init__(self, path: Union[str, Path], *, clock: Callable[[], float] = time.monotonic) -> None:
        self.path = Path(path)
        self._clock = clock

    async def load(self) -> Snapshot:
        source = str(self.path)
        try:
            raw = await asyncio.to_thread(self.path.read_bytes)
        except OSError as exc:
            logger.error(json.dumps({"event": "items_read_failed", "path": source, "detail": str(exc)}))
            raise LoadError("Failed to read items data", source=source) from exc
        try:
            items = parse_items(raw, source)
        except LoadError as exc:
            logger.error(json.dumps({"event": "items_parse_failed", "path": source, "detail": exc.message}))
            raise
        logger.info(json.dumps({"event": "items_loaded", "path": source, "total": len(items)}))
        return Snapshot(items=items, loaded_at=self._clock())

