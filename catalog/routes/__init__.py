"""
Route aggregation package for the catalog service.

Each module defines an ``APIRouter`` instance grouping related
endpoints. The main application imports these routers and includes
them in the global FastAPI instance.
"""

__all__ = [
    "health",
    "items",
]

from . import health, items  # noqa: E402,F401
