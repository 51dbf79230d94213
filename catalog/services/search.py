"""
services/search.py
------------------

Free‑text filtering of catalog items. Matching is a case‑insensitive
substring test against the name, description and category of each
item; there is no tokenisation and no ranking.
"""

from __future__ import annotations

from typing import Optional, Sequence

from catalog.schemas.items import Item

SEARCH_FIELDS = ("name", "description", "category")


def normalize_query(query: Optional[str]) -> str:
    if not query:
        return ""
    return query.strip().lower()


def matches(item: Item, term: str) -> bool:
    """Return ``True`` when ``term`` (already normalised) occurs in any search field."""
    for field in SEARCH_FIELDS:
        value = getattr(item, field, None) or ""
        if term in str(value).lower():
            return True
    return False


def filter_items(items: Sequence[Item], query: Optional[str]) -> Sequence[Item]:
    """Return the items matching ``query``, in their original order.

    An empty or blank query returns ``items`` itself.
    """
    term = normalize_query(query)
    if not term:
        return items
    return [item for item in items if matches(item, term)]
