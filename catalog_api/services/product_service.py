"""
Catalog API — Product Service
===============================

What:  Composes the query layer (filter, sort, pagination) with the
       ProductRepository and shapes the `{success, data, pagination}` envelope.
Who:   Called by the route handlers in routes/products.py.

Listing flow (GET /api/products):
    raw params ─▶ build_product_filter ─┐
    sortBy     ─▶ resolve_sort ─────────┼─▶ repository.find + repository.count
    page/limit ─▶ parse_page_request ───┘            │
                                                     ▼
                                    build_envelope(page, total)

Design Decision:
    ProductService is stateless; it receives the db session on each call.
    Query-string translation errors (ValidationError) surface before any
    SQL runs.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.config import settings
from catalog_api.exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateSkuError,
    NotFoundError,
)
from catalog_api.models.product import Product
from catalog_api.query.filters import (
    FEATURED_FILTER,
    build_category_filter,
    build_product_filter,
)
from catalog_api.query.pagination import build_envelope, parse_page_request
from catalog_api.query.sorting import DEFAULT_SORT, resolve_sort
from catalog_api.repositories.product_repository import ProductRepository
from catalog_api.schemas.product import (
    CategoryProductsResponse,
    MessageResponse,
    ProductCollectionResponse,
    ProductCreate,
    ProductDetail,
    ProductDetailResponse,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductSuggestion,
    ProductUpdate,
    ProductWithVendor,
    SuggestionListResponse,
)

logger = logging.getLogger(__name__)


def parse_product_id(raw: str) -> uuid.UUID:
    """Path ids that are not UUIDs cannot name a product: 404, not 422."""
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise NotFoundError(resource="Product", resource_id=raw)


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Log a SQLAlchemy failure and re-raise it as DatabaseError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error while %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Database error while {action}. Please try again.",
            context={"error_type": type(e).__name__, "action": action},
        ) from e


class ProductService:
    """
    Business logic for the product resource.

    Error Handling Strategy:
        Our own exceptions (ValidationError, NotFoundError, ...) propagate
        as-is. Every SQLAlchemy failure, on reads and writes alike, is
        logged and wrapped in DatabaseError by `store_errors`, so each
        endpoint answers a store outage with the same 500 `server_error`
        and no SQL reaches the client.
    """

    async def list_products(
        self,
        db: AsyncSession,
        params: Mapping[str, Optional[str]],
    ) -> ProductListResponse:
        """
        Filtered, sorted, paginated listing with the vendor populated.

        Args:
            params: Raw query-string values keyed by wire name (search,
                category, minPrice, maxPrice, brand, inStock, featured,
                sortBy, page, limit).

        Raises:
            ValidationError: bad price bound or page/limit.
            DatabaseError: the store failed.
        """
        product_filter = build_product_filter(params)
        sort = resolve_sort(params.get("sortBy"))
        page = parse_page_request(
            params.get("page"), params.get("limit"), settings.default_page_size
        )

        logger.debug(
            "Listing products: filter=%s sort=%s page=%d limit=%d",
            product_filter.describe(), sort, page.page, page.limit,
        )

        repo = ProductRepository(db)
        with store_errors("listing products"):
            products = await repo.find(
                product_filter, sort, skip=page.skip, limit=page.limit, with_vendor=True
            )
            total = await repo.count(product_filter)

        return ProductListResponse(
            data=[ProductWithVendor.model_validate(p) for p in products],
            pagination=build_envelope(page, total),
        )

    async def get_product(self, db: AsyncSession, product_id: str) -> ProductDetailResponse:
        """
        Single product with vendor and reviews.

        Soft-deleted products are still returned: lookup by id does not
        apply the active-flag filter.

        Raises:
            NotFoundError: unknown or malformed id.
        """
        pid = parse_product_id(product_id)
        with store_errors("loading a product"):
            product = await ProductRepository(db).get_by_id(
                pid, with_vendor=True, with_reviews=True
            )
        if product is None:
            raise NotFoundError(resource="Product", resource_id=product_id)
        return ProductDetailResponse(data=ProductDetail.model_validate(product))

    async def create_product(
        self,
        db: AsyncSession,
        payload: ProductCreate,
        user_id: Optional[uuid.UUID],
    ) -> ProductEnvelope:
        """
        Create a product owned by `payload.vendor` or, failing that, the caller.

        Raises:
            DuplicateSkuError: sku already used by another product.
            AuthenticationError: no vendor given and no caller identity.
        """
        repo = ProductRepository(db)

        with store_errors("creating a product"):
            if payload.sku and await repo.get_by_sku(payload.sku) is not None:
                raise DuplicateSkuError(payload.sku)

            vendor_id = payload.vendor or user_id
            if vendor_id is None:
                raise AuthenticationError(
                    message="A vendor is required: sign in or provide 'vendor'"
                )

            product = Product(
                **payload.model_dump(exclude={"vendor"}),
                vendor_id=vendor_id,
                is_active=True,
            )
            await repo.save(product)

        logger.info("Product created: %s (sku=%s)", product.id, product.sku)
        return ProductEnvelope(data=ProductResponse.model_validate(product))

    async def update_product(
        self,
        db: AsyncSession,
        product_id: str,
        payload: ProductUpdate,
    ) -> ProductEnvelope:
        """
        Apply the provided fields to an existing product.

        Raises:
            NotFoundError: unknown or malformed id.
            DuplicateSkuError: new sku belongs to a different product.
        """
        pid = parse_product_id(product_id)
        repo = ProductRepository(db)
        changes = payload.changes()

        with store_errors("updating a product"):
            product = await repo.get_by_id(pid)
            if product is None:
                raise NotFoundError(resource="Product", resource_id=product_id)

            new_sku = changes.get("sku")
            if new_sku and new_sku != product.sku:
                existing = await repo.get_by_sku(new_sku)
                if existing is not None:
                    raise DuplicateSkuError(new_sku)

            await repo.update(product, changes)

        logger.info("Product updated: %s fields=%s", product.id, sorted(changes))
        return ProductEnvelope(data=ProductResponse.model_validate(product))

    async def delete_product(self, db: AsyncSession, product_id: str) -> MessageResponse:
        """
        Soft delete: clears the active flag, keeps the row. Idempotent.

        Raises:
            NotFoundError: unknown or malformed id.
        """
        pid = parse_product_id(product_id)
        repo = ProductRepository(db)

        with store_errors("deleting a product"):
            product = await repo.get_by_id(pid)
            if product is None:
                raise NotFoundError(resource="Product", resource_id=product_id)
            await repo.soft_delete(product)

        logger.info("Product soft-deleted: %s", product.id)
        return MessageResponse(message="Product deleted successfully")

    async def search_suggestions(
        self,
        db: AsyncSession,
        q: Optional[str],
    ) -> SuggestionListResponse:
        """Top matches for the search box; an empty query never hits the store."""
        if not q:
            return SuggestionListResponse(data=[])

        with store_errors("searching products"):
            rows = await ProductRepository(db).search(q, limit=settings.suggestions_limit)
        return SuggestionListResponse(
            data=[ProductSuggestion.model_validate(row) for row in rows]
        )

    async def list_by_category(
        self,
        db: AsyncSession,
        category: str,
        subcategory: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> CategoryProductsResponse:
        """
        Paginated, newest-first listing of one category.

        The category is matched lower-cased; the general listing's
        `category` filter is not.
        """
        product_filter = build_category_filter(category, subcategory)
        page_request = parse_page_request(page, limit, settings.default_page_size)

        repo = ProductRepository(db)
        with store_errors("listing a category"):
            products = await repo.find(
                product_filter, DEFAULT_SORT, skip=page_request.skip, limit=page_request.limit
            )
            total = await repo.count(product_filter)

        return CategoryProductsResponse(
            data=[ProductResponse.model_validate(p) for p in products],
            pagination=build_envelope(page_request, total, include_navigation=False),
        )

    async def list_featured(self, db: AsyncSession) -> ProductCollectionResponse:
        """Newest featured, in-stock, active products; fixed size, no paging."""
        with store_errors("listing featured products"):
            products = await ProductRepository(db).find(
                FEATURED_FILTER, DEFAULT_SORT, limit=settings.featured_limit
            )
        return ProductCollectionResponse(
            data=[ProductResponse.model_validate(p) for p in products]
        )


product_service = ProductService()
