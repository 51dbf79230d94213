"""
utils/pagination.py
--------------------

Provides helpers for slicing a result list into pages.

``paginate`` is strict: it expects a page number and a page size that
are both at least one and raises :class:`InvalidParameterError`
otherwise. A page past the end is not an error; it yields an empty
slice while the metadata still reports the real totals, so a client
that overshoots by one page can recover.

Query strings are rarely that tidy, so request handlers first run the
raw values through ``coerce_page_params``, which falls back to the
configured defaults for anything missing, non‑numeric or non‑positive.
Any other value is passed through as the caller sent it.
"""

from __future__ import annotations

import math
from typing import Any, List, Optional, Sequence, Tuple, TypeVar

from catalog.core.config import get_settings
from catalog.core.errors import InvalidParameterError
from catalog.schemas.items import PaginationMeta

T = TypeVar("T")


def _to_positive_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number >= 1 else None


def coerce_page_params(page: Any = None, limit: Any = None) -> Tuple[int, int]:
    """Turn raw ``page``/``limit`` values into usable integers.

    :return: ``(page, page_size)`` with defaults applied
    """
    settings = get_settings()
    page_num = _to_positive_int(page) or settings.default_page
    page_size = _to_positive_int(limit) or settings.default_page_size
    return page_num, page_size


def paginate(items: Sequence[T], page: int, page_size: int) -> Tuple[List[T], PaginationMeta]:
    """Return the slice of ``items`` for ``page`` and its metadata.

    :param items: full, already filtered result list
    :param page: 1‑based page number
    :param page_size: number of items per page
    :raises InvalidParameterError: when ``page`` or ``page_size`` is below one
    """
    if page < 1:
        raise InvalidParameterError("page", page, "must be at least 1")
    if page_size < 1:
        raise InvalidParameterError("limit", page_size, "must be at least 1")

    total = len(items)
    start = (page - 1) * page_size
    page_items = list(items[start:start + page_size])
    meta = PaginationMeta(
        currentPage=page,
        totalPages=math.ceil(total / page_size),
        totalItems=total,
        itemsPerPage=page_size,
    )
    return page_items, meta
