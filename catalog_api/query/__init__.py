"""
Catalog API — Query Translation Package
=========================================

What:  Turns untyped query-string values into a catalog query.
How:   Three pure, stateless pieces composed per request:

    raw params ──▶ filters.build_product_filter ──▶ ProductFilter
    sortBy     ──▶ sorting.resolve_sort         ──▶ SortSpec
    page/limit ──▶ pagination.parse_page_request ─▶ PageRequest ─┐
                                                                 │
    total count from the store ──▶ pagination.build_envelope ◀───┘

Nothing here touches the database; the repository turns these values into
SQL. That keeps every rule testable without a session.
"""

from catalog_api.query.filters import ProductFilter, build_product_filter
from catalog_api.query.pagination import (
    PageRequest,
    build_envelope,
    parse_page_request,
    total_pages,
)
from catalog_api.query.sorting import DEFAULT_SORT, SortField, SortSpec, resolve_sort

__all__ = [
    "DEFAULT_SORT",
    "PageRequest",
    "ProductFilter",
    "SortField",
    "SortSpec",
    "build_envelope",
    "build_product_filter",
    "parse_page_request",
    "resolve_sort",
    "total_pages",
]
