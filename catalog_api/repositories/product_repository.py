"""Product repository for database operations.

Turns ProductFilter / SortSpec / PageRequest values into SQL and owns every
read and write against the `products` table.
"""

import logging
import uuid
from collections.abc import Sequence
from typing import Any, Dict, List, Optional

from sqlalchemy import Row, and_, case, func, literal, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from catalog_api.exceptions import DatabaseError, DuplicateSkuError
from catalog_api.models.product import Product
from catalog_api.query.filters import ProductFilter
from catalog_api.query.sorting import SortField, SortSpec

logger = logging.getLogger(__name__)

# Text-searchable columns and their relevance weight
SEARCH_FIELDS = (
    (Product.name, 3),
    (Product.brand, 2),
    (Product.category, 2),
    (Product.description, 1),
)

SORT_COLUMNS = {
    SortField.PRICE: Product.price,
    SortField.RATING: Product.rating_average,
    SortField.CREATED_AT: Product.created_at,
    SortField.NAME: Product.name,
}


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def text_match(terms: Sequence[str]) -> ColumnElement[bool]:
    """True when any term occurs in any searchable field (case-insensitive)."""
    return or_(
        *(
            column.ilike(_like_pattern(term), escape="\\")
            for term in terms
            for column, _ in SEARCH_FIELDS
        )
    )


def text_score(terms: Sequence[str]) -> ColumnElement[Any]:
    """Relevance: summed field weights of every (term, field) hit."""
    score: ColumnElement[Any] = literal(0)
    for term in terms:
        pattern = _like_pattern(term)
        for column, weight in SEARCH_FIELDS:
            score = score + case((column.ilike(pattern, escape="\\"), weight), else_=0)
    return score


def filter_conditions(product_filter: ProductFilter) -> List[ColumnElement[bool]]:
    """One SQL condition per constraint in force."""
    conditions: List[ColumnElement[bool]] = []

    if product_filter.is_active is not None:
        conditions.append(Product.is_active == product_filter.is_active)

    if product_filter.search_terms:
        conditions.append(text_match(product_filter.search_terms))

    if product_filter.category is not None:
        conditions.append(Product.category == product_filter.category)

    if product_filter.subcategory is not None:
        conditions.append(Product.subcategory == product_filter.subcategory)

    if product_filter.min_price is not None:
        conditions.append(Product.price >= product_filter.min_price)

    if product_filter.max_price is not None:
        conditions.append(Product.price <= product_filter.max_price)

    if product_filter.brands is not None:
        conditions.append(Product.brand.in_(product_filter.brands))

    if product_filter.in_stock:
        conditions.append(Product.stock > 0)

    if product_filter.featured:
        conditions.append(Product.is_featured.is_(True))

    return conditions


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        repo = ProductRepository(session)
        products = await repo.find(
            build_product_filter({"brand": "acme,globex"}),
            resolve_sort("price_asc"),
            skip=0,
            limit=12,
        )
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find(
        self,
        product_filter: ProductFilter,
        sort: SortSpec,
        skip: int = 0,
        limit: Optional[int] = None,
        with_vendor: bool = False,
    ) -> Sequence[Product]:
        """Find products matching a filter, ordered and sliced.

        The record id is the final ascending sort key so equal sort values
        never reorder between pages.
        """
        query = select(Product)

        conditions = filter_conditions(product_filter)
        if conditions:
            query = query.where(and_(*conditions))

        column = SORT_COLUMNS[sort.field]
        query = query.order_by(
            column.desc() if sort.descending else column.asc(),
            Product.id.asc(),
        )

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        if with_vendor:
            query = query.options(selectinload(Product.vendor))

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, product_filter: ProductFilter) -> int:
        query = select(func.count(Product.id))
        conditions = filter_conditions(product_filter)
        if conditions:
            query = query.where(and_(*conditions))
        result = await self.session.execute(query)
        return result.scalar_one()

    async def search(self, term: str, limit: int) -> Sequence[Row[Any]]:
        """Relevance-ranked text search over active products.

        Returns rows projected to (id, name, category, brand, images, price, score).
        """
        terms = term.split()
        if not terms:
            return []
        score = text_score(terms).label("score")
        query = (
            select(
                Product.id,
                Product.name,
                Product.category,
                Product.brand,
                Product.images,
                Product.price,
                score,
            )
            .where(Product.is_active.is_(True), text_match(terms))
            .order_by(score.desc(), Product.id.asc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.all()

    async def get_by_id(
        self,
        product_id: uuid.UUID,
        with_vendor: bool = False,
        with_reviews: bool = False,
    ) -> Product | None:
        """Get a product by id, active or not."""
        query = select(Product).where(Product.id == product_id)
        if with_vendor:
            query = query.options(selectinload(Product.vendor))
        if with_reviews:
            query = query.options(selectinload(Product.reviews))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_sku(self, sku: str) -> Product | None:
        result = await self.session.execute(select(Product).where(Product.sku == sku))
        return result.scalar_one_or_none()

    async def save(self, product: Product) -> Product:
        """Insert a new product and flush so its id and defaults are set."""
        self.session.add(product)
        await self._flush(product.sku)
        return product

    async def update(self, product: Product, changes: Dict[str, Any]) -> Product:
        """Write only the provided attributes."""
        for attribute, value in changes.items():
            setattr(product, attribute, value)
        await self._flush(product.sku)
        return product

    async def soft_delete(self, product: Product) -> Product:
        product.is_active = False
        await self.session.flush()
        return product

    async def _flush(self, sku: Optional[str]) -> None:
        """Flush, translating a unique-index hit on sku into DuplicateSkuError.

        The unique index is what actually guarantees sku uniqueness; the
        service's pre-check only gives the common case a cheap early exit.
        """
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if sku and "sku" in str(exc.orig).lower():
                logger.info("Unique index rejected duplicate sku %s", sku)
                raise DuplicateSkuError(sku) from exc
            logger.error("Integrity error writing product: %s", exc.orig)
            raise DatabaseError(
                message="Could not save the product. Please try again.",
                context={"error_type": type(exc.orig).__name__},
            ) from exc
