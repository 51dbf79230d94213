"""
Core helpers package for the catalog service.

This package contains low-level infrastructure such as the settings
object and the error hierarchy shared by the caches, the services and
the HTTP routes.
"""

__all__ = []
