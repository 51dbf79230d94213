"""
Root application entry point for the catalog service
=====================================================

This module exposes the FastAPI application instance defined in
``catalog/main.py`` so that deployment tools like Uvicorn can import
``main:app`` directly from the repository root.

Usage
-----

.. code-block:: bash

    uvicorn main:app --host 0.0.0.0 --port 8000

Settings are read from ``APP_*`` environment variables; see
:mod:`catalog.core.config`.
"""

from catalog.main import app  # noqa: F401 re-export for Uvicorn

__all__ = ["app"]
