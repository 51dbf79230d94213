# main.py
from __future__ import annotations

import json
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

# Import logging utilities early so that the logger configuration is
# applied before any other modules emit log messages.
from catalog.logging_config import configure_level, logger

from catalog.core.config import Settings, get_settings
from catalog.core.errors import CatalogError
from catalog.routes.health import router as health_router
from catalog.routes.items import router as items_router
from catalog.services.catalog_service import CatalogService
from catalog.services.item_cache import ItemCache
from catalog.services.snapshot_loader import JsonFileLoader
from catalog.services.stats_cache import StatsCache
from catalog.services.watcher import FileWatcher, PollingFileWatcher


def build_catalog_service(settings: Settings, watcher: Optional[FileWatcher] = None) -> CatalogService:
    """Wire loader, caches and watcher together. Called once per process."""
    loader = JsonFileLoader(settings.data_file)
    item_cache = ItemCache(
        loader.load,
        ttl=settings.items_cache_ttl,
        serve_stale_on_error=settings.serve_stale_on_error,
    )
    if watcher is None and settings.watch_enabled:
        watcher = PollingFileWatcher(settings.watch_poll_interval)
    stats_cache = StatsCache(
        item_cache.get,
        ttl=settings.stats_cache_ttl,
        watcher=watcher,
        watch_path=settings.data_file,
        serve_stale_on_error=settings.serve_stale_on_error,
    )
    return CatalogService(item_cache, stats_cache)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_level(settings.log_level)
    app.state.catalog_service = build_catalog_service(settings, app.state.watcher)
    logger.info(json.dumps({"event": "startup", "data_file": str(settings.data_file)}))
    try:
        yield
    finally:
        app.state.catalog_service.stats.close()
        logger.info(json.dumps({"event": "shutdown"}))


def create_app(settings: Optional[Settings] = None, watcher: Optional[FileWatcher] = None) -> FastAPI:
    app = FastAPI(title="Catalog API", default_response_class=ORJSONResponse, lifespan=lifespan)
    app.state.settings = settings or get_settings()
    app.state.watcher = watcher

    # routers
    app.include_router(items_router)
    app.include_router(health_router)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        logger.warning(json.dumps({
            "event": "request_failed",
            "path": request.url.path,
            "code": exc.code,
            "detail": exc.message,
        }))
        return ORJSONResponse(status_code=exc.http_status, content=exc.to_response())

    # -----------------------------------------------------------------
    # Request logging middleware
    # -----------------------------------------------------------------
    # Records path, method, status code and processing time of every
    # request as a JSON log line.
    @app.middleware("http")  # type: ignore[misc]
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        logger.info(json.dumps({
            "event": "http_request",
            "path": request.url.path,
            "method": request.method,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }))
        return response

    return app


app = create_app()
