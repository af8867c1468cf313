"""
Catalog API — Shared Route Dependencies
=========================================

What:  FastAPI dependencies used by the product routes.

ProductListParams:
    Collects the listing query string as raw strings. Typing them here
    (int/float) would let FastAPI answer 422 with its own rules; the query
    layer needs the untouched text to apply its own parsing and 400 errors.

get_current_user_id:
    Caller identity. Authentication happens upstream: an auth middleware may
    set `request.state.user_id`, otherwise the gateway forwards the
    `X-User-ID` header. A malformed header counts as no identity.
"""

import uuid
from typing import Dict, Optional

from fastapi import Query, Request


class ProductListParams:
    """Raw listing parameters, keyed by their wire names via `as_mapping()`."""

    def __init__(
        self,
        search: Optional[str] = Query(default=None, description="Free-text search"),
        category: Optional[str] = Query(default=None, description="Exact category match"),
        min_price: Optional[str] = Query(
            default=None, alias="minPrice", description="Inclusive lower price bound"
        ),
        max_price: Optional[str] = Query(
            default=None, alias="maxPrice", description="Inclusive upper price bound"
        ),
        brand: Optional[str] = Query(
            default=None, description="Comma-separated list of brands"
        ),
        in_stock: Optional[str] = Query(
            default=None, alias="inStock", description="'true' to hide out-of-stock items"
        ),
        featured: Optional[str] = Query(
            default=None, description="'true' to show only featured items"
        ),
        sort_by: Optional[str] = Query(
            default=None,
            alias="sortBy",
            description="price_asc, price_desc, rating, newest (default) or name",
        ),
        page: Optional[str] = Query(default=None, description="1-based page number"),
        limit: Optional[str] = Query(default=None, description="Items per page"),
    ) -> None:
        self.search = search
        self.category = category
        self.min_price = min_price
        self.max_price = max_price
        self.brand = brand
        self.in_stock = in_stock
        self.featured = featured
        self.sort_by = sort_by
        self.page = page
        self.limit = limit

    def as_mapping(self) -> Dict[str, Optional[str]]:
        return {
            "search": self.search,
            "category": self.category,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "brand": self.brand,
            "inStock": self.in_stock,
            "featured": self.featured,
            "sortBy": self.sort_by,
            "page": self.page,
            "limit": self.limit,
        }


def get_current_user_id(request: Request) -> Optional[uuid.UUID]:
    """Identity of the caller, or None when the request is anonymous."""
    user_id = getattr(request.state, "user_id", None)
    if isinstance(user_id, uuid.UUID):
        return user_id

    raw = user_id or request.headers.get("X-User-ID")
    if not raw:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None
