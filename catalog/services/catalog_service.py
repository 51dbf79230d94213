"""
services/catalog_service.py
---------------------------

Entry point used by the route handlers. The service owns no state of
its own: it asks the item cache for the current snapshot on every
call and chains the search and pagination helpers over it, and it
forwards statistics requests and change notifications to the stats
cache. The goal is to keep the route handlers thin and delegate every
decision to this module.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from catalog.logging_config import logger
from catalog.schemas.items import Item, PaginationMeta, Stats
from catalog.services.item_cache import ItemCache
from catalog.services.search import filter_items
from catalog.services.snapshot_loader import Snapshot
from catalog.services.stats_cache import StatsCache
from catalog.utils.pagination import paginate


class CatalogService:
    def __init__(self, items: ItemCache, stats: StatsCache) -> None:
        self.items = items
        self.stats = stats
        stats.set_change_handler(self.notify_backing_changed)

    async def get_snapshot(self) -> Snapshot:
        return await self.items.get()

    def filter_and_paginate(
        self,
        snapshot: Snapshot,
        query: Optional[str],
        page: int,
        page_size: int,
    ) -> Tuple[List[Item], PaginationMeta]:
        matched: Sequence[Item] = filter_items(snapshot.items, query)
        return paginate(matched, page, page_size)

    async def list_items(self, query: Optional[str], page: int, page_size: int) -> Tuple[List[Item], PaginationMeta]:
        snapshot = await self.get_snapshot()
        return self.filter_and_paginate(snapshot, query, page, page_size)

    async def get_item(self, item_id: int) -> Item:
        """Look an item up by id.

        :raises NotFoundError: when no item carries ``item_id``
        """
        snapshot = await self.get_snapshot()
        return snapshot.find(item_id)

    async def get_stats(self) -> Stats:
        return await self.stats.get()

    def notify_backing_changed(self) -> None:
        """Drop the snapshot and the statistics so both are rebuilt from the changed source."""
        logger.info(json.dumps({"event": "backing_changed_notified"}))
        self.items.invalidate()
        self.stats.invalidate()

    def describe(self) -> Dict[str, Any]:
        return {"items": self.items.state.value, "stats": self.stats.state.value}
