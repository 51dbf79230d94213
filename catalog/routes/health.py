"""
routes/health.py
-----------------

Liveness check reporting the state of both caches.
"""

from fastapi import APIRouter, Depends

from catalog.routes.items import get_catalog_service
from catalog.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
async def health(service: CatalogService = Depends(get_catalog_service)):
    return {"status": "ok", "caches": service.describe()}
