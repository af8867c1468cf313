"""
Catalog API — Filter Builder
==============================

What:  Converts raw listing query parameters into a ProductFilter.
Why:   Query strings arrive as untyped text; this is the single place that
       decides which of them become constraints and how they are parsed.

Parameter rules:
    search    non-blank          → free-text match (whitespace-separated terms, any term)
    category  present            → exact equality (no case folding here)
    minPrice  present            → price >= value   (must be a finite number)
    maxPrice  present            → price <= value   (must be a finite number)
    brand     present            → brand IN comma-separated list
    inStock   == "true"          → stock > 0
    featured  == "true"          → is_featured = true
    (always)                     → is_active = true

Unknown parameters are ignored. Inverted price bounds are passed through;
the store simply returns nothing.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from catalog_api.exceptions import ValidationError

# Plain decimal or exponent notation, ASCII digits only
_DECIMAL = re.compile(r"\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\s*")


@dataclass(frozen=True)
class ProductFilter:
    """
    A conjunction of optional conditions over Product.

    A field left at its default imposes no constraint, except `is_active`,
    which is True unless an administrative caller clears it.
    """

    is_active: Optional[bool] = True
    search_terms: Tuple[str, ...] = ()
    category: Optional[str] = None
    subcategory: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    brands: Optional[Tuple[str, ...]] = None
    in_stock: bool = False
    featured: bool = False

    def describe(self) -> Dict[str, Any]:
        """Only the constraints actually in force, keyed by field name."""
        constraints: Dict[str, Any] = {}
        if self.is_active is not None:
            constraints["is_active"] = self.is_active
        if self.search_terms:
            constraints["search_terms"] = self.search_terms
        if self.category is not None:
            constraints["category"] = self.category
        if self.subcategory is not None:
            constraints["subcategory"] = self.subcategory
        if self.min_price is not None:
            constraints["min_price"] = self.min_price
        if self.max_price is not None:
            constraints["max_price"] = self.max_price
        if self.brands is not None:
            constraints["brands"] = self.brands
        if self.in_stock:
            constraints["in_stock"] = True
        if self.featured:
            constraints["featured"] = True
        return constraints


def parse_price(name: str, raw: Optional[str]) -> Optional[float]:
    """
    Parse a price bound, or None when the parameter is absent or empty.

    Raises:
        ValidationError: the value is not a finite number. A NaN bound
            would otherwise silently match nothing (or everything).
    """
    if raw is None or raw == "":
        return None
    # float() alone would also take "1_0", "nan" and non-ASCII digits
    if _DECIMAL.fullmatch(raw) is None:
        raise ValidationError(
            message=f"'{name}' must be a number",
            field=name,
            context={"value": raw},
        )
    value = float(raw)
    if not math.isfinite(value):
        raise ValidationError(
            message=f"'{name}' must be a finite number",
            field=name,
            context={"value": raw},
        )
    return value


def parse_brands(raw: Optional[str]) -> Optional[Tuple[str, ...]]:
    if not raw:
        return None
    # dict.fromkeys: de-duplicate, keep first-seen order
    return tuple(dict.fromkeys(b.strip() for b in raw.split(",") if b.strip()))


def parse_search_terms(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(raw.split())


def build_product_filter(
    params: Mapping[str, Optional[str]],
    *,
    include_inactive: bool = False,
) -> ProductFilter:
    """
    Build the listing predicate from raw query parameters.

    Args:
        params: Query-string values keyed by their wire names
            (search, category, minPrice, maxPrice, brand, inStock, featured).
        include_inactive: Administrative bypass of the soft-delete filter.

    Returns:
        ProductFilter with a condition for every supplied parameter.

    Raises:
        ValidationError: minPrice or maxPrice is not a finite number.
    """
    category = params.get("category")

    return ProductFilter(
        is_active=None if include_inactive else True,
        search_terms=parse_search_terms(params.get("search")),
        category=category if category else None,
        min_price=parse_price("minPrice", params.get("minPrice")),
        max_price=parse_price("maxPrice", params.get("maxPrice")),
        brands=parse_brands(params.get("brand")),
        in_stock=params.get("inStock") == "true",
        featured=params.get("featured") == "true",
    )


def build_category_filter(category: str, subcategory: Optional[str] = None) -> ProductFilter:
    """
    Predicate for the by-category listing.

    Unlike the general listing, the category is lower-cased here, so
    /category/Electronics and /category/electronics are the same page.
    """
    return ProductFilter(
        category=category.lower(),
        subcategory=subcategory if subcategory else None,
    )


# Featured shelf: featured, active and currently purchasable
FEATURED_FILTER = ProductFilter(featured=True, in_stock=True)
