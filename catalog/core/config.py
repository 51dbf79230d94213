"""
core/config.py
----------------

Application configuration module.

Defines strongly‑typed settings loaded from the environment using
``pydantic-settings``. These settings control where the item catalog
is read from, how long the item snapshot and the derived statistics
stay fresh, how the backing file is watched for changes and the
pagination defaults applied to incoming requests. The values provided
here are sensible defaults but can be overridden via environment
variables at deployment time.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The settings structure is flat and uses environment variables
    prefixed with ``APP_``.  For example, to keep the item snapshot
    for two minutes you can set ``APP_ITEMS_CACHE_TTL=120``.

    See :class:`pydantic_settings.BaseSettings` for details on how
    environment variables are mapped onto fields.
    """

    # Backing source
    data_file: Path = Field(Path("data/items.json"), description="JSON file holding the item catalog.")

    # Cache windows (seconds)
    items_cache_ttl: float = Field(30.0, gt=0, description="Time to live of the item snapshot.")
    stats_cache_ttl: float = Field(60.0, gt=0, description="Time to live of the computed statistics.")
    serve_stale_on_error: bool = Field(
        True,
        description="Serve the previous snapshot when a refresh fails instead of failing the request.",
    )

    # Change watch
    watch_enabled: bool = Field(True, description="Start the polling watcher that invalidates statistics when the data file changes.")
    watch_poll_interval: float = Field(1.0, gt=0, description="Seconds between data file checks.")

    # Pagination defaults
    default_page: int = Field(1, ge=1, description="Page used when the request omits or mangles it.")
    default_page_size: int = Field(10, ge=1, description="Page size used when the request omits or mangles it.")

    log_level: str = Field("INFO", description="Level of the ``catalog`` logger.")

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=None, case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the application settings.

    Using a cache prevents expensive environment parsing on every call.
    The returned object is shared by every component built in the
    application lifespan.
    """
    return Settings()
