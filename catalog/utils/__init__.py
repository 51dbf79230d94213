"""
Utility helpers shared by the catalog services: the single‑flight TTL
cache and the pagination helpers.
"""
