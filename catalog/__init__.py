"""
catalog package
---------------

This package contains the FastAPI application serving the item
catalog and its supporting modules. Importing ``catalog`` will load
the :mod:`main` module and expose the ``app`` instance for ASGI
servers.
"""

from .main import app  # noqa: F401
