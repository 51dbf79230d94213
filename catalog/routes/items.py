"""
routes/items.py
----------------

API routes for browsing the item catalog: the paginated, searchable
listing, the lookup of a single item and the aggregate statistics.
The handlers only translate query strings and delegate to the
:class:`CatalogService` created in the application lifespan.
"""

import json
from typing import Optional

from fastapi import APIRouter, Depends, Request

from catalog.logging_config import logger, log_call
from catalog.schemas.items import Item, ItemsPage, Stats
from catalog.services.catalog_service import CatalogService
from catalog.utils.pagination import coerce_page_params

router = APIRouter(prefix="/api", tags=["Items"])


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


@router.get("/items", response_model=ItemsPage, summary="List items with optional search")
@log_call
async def list_items(
    q: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Return one page of items matching ``q``. Missing, non-numeric or
    non-positive ``page``/``limit`` values fall back to the configured
    defaults.
    """
    page_num, page_size = coerce_page_params(page, limit)
    items, meta = await service.list_items(q, page_num, page_size)
    logger.info(json.dumps({
        "event": "list_items",
        "q": q or "",
        "page": page_num,
        "limit": page_size,
        "returned": len(items),
        "total": meta.totalItems,
    }))
    return ItemsPage(items=items, pagination=meta)


@router.get("/items/{item_id}", response_model=Item, summary="Get a single item by id")
@log_call
async def get_item(item_id: int, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_item(item_id)


@router.get("/stats", response_model=Stats, summary="Aggregate statistics of the catalog")
@log_call
async def get_stats(service: CatalogService = Depends(get_catalog_service)):
    return await service.get_stats()
