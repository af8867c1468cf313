"""
Catalog API — Product Route Handlers
======================================

What:  The /api/products resource: listing, shelves, detail, and writes.
How:   Extracts path/query/body data, delegates to ProductService.

Route order matters: the literal paths (/search/suggestions, /category/...,
/featured) are registered before /{product_id} so they are not captured
as ids.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.database import get_db_session
from catalog_api.dependencies import ProductListParams, get_current_user_id
from catalog_api.schemas.product import (
    CategoryProductsResponse,
    ErrorResponse,
    MessageResponse,
    ProductCollectionResponse,
    ProductCreate,
    ProductDetailResponse,
    ProductEnvelope,
    ProductListResponse,
    ProductUpdate,
    SuggestionListResponse,
)
from catalog_api.services.product_service import product_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get(
    "",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="List products with filters, sorting and pagination",
)
async def list_products(
    params: ProductListParams = Depends(),
    db: AsyncSession = Depends(get_db_session),
) -> ProductListResponse:
    """
    Example:
        GET /api/products?minPrice=10&maxPrice=50&brand=acme,globex&sortBy=price_asc&page=2&limit=5
    """
    return await product_service.list_products(db=db, params=params.as_mapping())


@router.get(
    "/search/suggestions",
    response_model=SuggestionListResponse,
    summary="Search-as-you-type suggestions",
)
async def search_suggestions(
    q: Optional[str] = Query(default=None, description="Search text"),
    db: AsyncSession = Depends(get_db_session),
) -> SuggestionListResponse:
    return await product_service.search_suggestions(db=db, q=q)


@router.get(
    "/category/{category}",
    response_model=CategoryProductsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Products in a category (case-insensitive), newest first",
)
async def list_by_category(
    category: str,
    subcategory: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryProductsResponse:
    return await product_service.list_by_category(
        db=db,
        category=category,
        subcategory=subcategory,
        page=page,
        limit=limit,
    )


@router.get(
    "/featured",
    response_model=ProductCollectionResponse,
    summary="Featured, in-stock products",
)
async def list_featured(
    db: AsyncSession = Depends(get_db_session),
) -> ProductCollectionResponse:
    return await product_service.list_featured(db=db)


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a single product by ID",
    description="Soft-deleted products remain reachable here.",
)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ProductDetailResponse:
    return await product_service.get_product(db=db, product_id=product_id)


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Create a product",
)
async def create_product(
    payload: ProductCreate,
    user_id: Optional[uuid.UUID] = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ProductEnvelope:
    return await product_service.create_product(db=db, payload=payload, user_id=user_id)


@router.put(
    "/{product_id}",
    response_model=ProductEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update the provided fields of a product",
)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductEnvelope:
    return await product_service.update_product(db=db, product_id=product_id, payload=payload)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Soft-delete a product",
)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await product_service.delete_product(db=db, product_id=product_id)
