"""
Catalog API — Paginator
=========================

What:  Offset pagination for catalog listings.
How:   `page` and `limit` arrive as strings and are read the way browsers'
       parseInt reads them: the leading integer prefix, truncated
       ("2.9" → 2, "7abc" → 7). Blank or missing values take the defaults.

Rejected input (400):
    - no leading ASCII integer at all ("abc", "٣")
    - page < 1 or limit < 1
    - limit or the resulting offset beyond the signed 64-bit range

A zero or negative value would otherwise turn into a negative offset or a
division by zero in totalPages; clients get a clear error instead.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional, Union

from catalog_api.exceptions import ValidationError
from catalog_api.schemas.product import PageSummary, PaginationMeta

DEFAULT_PAGE = 1

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")

# Values are bound as signed 64-bit integers (offset and limit)
MAX_PAGE_VALUE = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_int_prefix(name: str, raw: str) -> int:
    """Leading-integer parse; raises ValidationError when there is none."""
    match = _INT_PREFIX.match(raw)
    if match is None:
        raise ValidationError(
            message=f"'{name}' must be a positive integer",
            field=name,
            context={"value": raw},
        )
    return int(match.group(1))


def parse_page_request(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    default_limit: int = 12,
) -> PageRequest:
    """
    Parse and validate page/limit query values.

    Examples:
        parse_page_request()            → page=1, limit=12, skip=0
        parse_page_request("3", "10")   → page=3, limit=10, skip=20

    Raises:
        ValidationError: non-numeric value, or page/limit below 1.
    """
    page_num = parse_int_prefix("page", page) if page else DEFAULT_PAGE
    limit_num = parse_int_prefix("limit", limit) if limit else default_limit

    if page_num < 1:
        raise ValidationError(
            message="'page' must be a positive integer",
            field="page",
            context={"value": page},
        )
    if limit_num < 1:
        raise ValidationError(
            message="'limit' must be a positive integer",
            field="limit",
            context={"value": limit},
        )
    if limit_num > MAX_PAGE_VALUE:
        raise ValidationError(
            message="'limit' is too large",
            field="limit",
            context={"value": limit},
        )

    request = PageRequest(page=page_num, limit=limit_num)
    if request.skip > MAX_PAGE_VALUE:
        raise ValidationError(
            message="'page' is too large",
            field="page",
            context={"value": page},
        )
    return request


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def build_envelope(
    request: PageRequest,
    total: int,
    include_navigation: bool = True,
) -> Union[PaginationMeta, PageSummary]:
    """
    Pagination metadata for a response.

    Args:
        request: The page that was served.
        total: Number of records matching the filter (all pages).
        include_navigation: Add hasNext/hasPrev. The by-category listing
            omits them.
    """
    pages = total_pages(total, request.limit)
    if not include_navigation:
        return PageSummary(
            current=request.page,
            total_pages=pages,
            total_products=total,
        )
    return PaginationMeta(
        current=request.page,
        total_pages=pages,
        total_products=total,
        has_next=request.page < pages,
        has_prev=request.page > 1,
    )
