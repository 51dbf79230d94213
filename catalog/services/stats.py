"""
services/stats.py
-----------------

Descriptive statistics over a sequence of items. The computation is a
single pass and never fails: items whose price is not a finite,
non-negative number are left out of the price figures but still counted,
and items without a category are grouped under ``uncategorized``.
"""

from __future__ import annotations

import math
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Sequence

from catalog.schemas.items import Item, Stats

UNCATEGORIZED = "uncategorized"


def parse_price(value: Any) -> Optional[float]:
    """Return ``value`` as a finite, non-negative float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price < 0:
        return None
    return price


def round_price(value: float) -> float:
    # half-up on the decimal representation, not banker's rounding
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_stats(items: Sequence[Item]) -> Stats:
    if not items:
        return Stats()

    categories: Dict[str, int] = defaultdict(int)
    total = 0.0
    count = 0
    lowest: Optional[float] = None
    highest: Optional[float] = None
    for item in items:
        categories[item.category or UNCATEGORIZED] += 1
        price = parse_price(item.price)
        if price is None:
            continue
        total += price
        count += 1
        if lowest is None or price < lowest:
            lowest = price
        if highest is None or price > highest:
            highest = price

    return Stats(
        totalItems=len(items),
        averagePrice=round_price(total / count) if count else 0,
        minPrice=lowest if lowest is not None else 0,
        maxPrice=highest if highest is not None else 0,
        categories=dict(categories),
    )
