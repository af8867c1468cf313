"""
Catalog API — Sort Resolver
=============================

Maps the `sortBy` token to an ordering. Total: every input, including None,
"" and unknown tokens, yields a SortSpec (newest first by default).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class SortField(str, Enum):
    """Product attributes the catalog can be ordered by."""

    PRICE = "price"
    RATING = "rating_average"
    CREATED_AT = "created_at"
    NAME = "name"


@dataclass(frozen=True)
class SortSpec:
    field: SortField
    descending: bool


DEFAULT_SORT = SortSpec(SortField.CREATED_AT, descending=True)

SORT_MODES: Dict[str, SortSpec] = {
    "price_asc": SortSpec(SortField.PRICE, descending=False),
    "price_desc": SortSpec(SortField.PRICE, descending=True),
    "rating": SortSpec(SortField.RATING, descending=True),
    "newest": DEFAULT_SORT,
    "name": SortSpec(SortField.NAME, descending=False),
}


def resolve_sort(token: Optional[str]) -> SortSpec:
    """Return the ordering for a sort token, falling back to newest first."""
    if not token:
        return DEFAULT_SORT
    return SORT_MODES.get(token, DEFAULT_SORT)
