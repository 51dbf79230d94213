"""
schemas/items.py
-----------------

Models representing catalog items and the views derived from them.
``Item`` validates each record of the backing file; the remaining
models describe the response bodies for paginated listings and the
aggregate statistics. Field names of the response models follow the
JSON contract consumed by the frontend (``currentPage``,
``averagePrice`` …).
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    """A single catalog record. Immutable once loaded; identity is ``id``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    # kept as stored so the stats aggregator can skip unparseable prices
    price: Union[float, str, None] = None

    @field_validator("id", mode="before")
    @classmethod
    def check_integer_id(cls, v):
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError("id must be an integer")
        return v

    @field_validator("price")
    @classmethod
    def check_price_not_negative(cls, v):
        # a string that reads as a number obeys the same rule as a number
        number = v
        if isinstance(v, str):
            try:
                number = float(v.strip())
            except ValueError:
                return v
        if isinstance(number, float) and number < 0:
            raise ValueError("price must not be negative")
        return v


class PaginationMeta(BaseModel):
    currentPage: int = Field(ge=1)
    totalPages: int = Field(ge=0)
    totalItems: int = Field(ge=0)
    itemsPerPage: int = Field(ge=1)


class ItemsPage(BaseModel):
    items: List[Item]
    pagination: PaginationMeta


class Stats(BaseModel):
    """Aggregate statistics, always recomputed wholesale from a snapshot."""

    model_config = ConfigDict(frozen=True)

    totalItems: int = 0
    averagePrice: float = 0
    minPrice: float = 0
    maxPrice: float = 0
    categories: Dict[str, int] = Field(default_factory=dict)
