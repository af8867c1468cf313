"""
Catalog API — Pydantic Request/Response Schemas
=================================================

What:  Pydantic models defining the product API contract.
Why:   Input validation, serialization, and OpenAPI docs from one source.
How:   Every model serializes with camelCase keys (`comparePrice`,
       `totalPages`, ...) via the alias generator and still accepts
       snake_case names on input (populate_by_name).

Response envelope:
    Success: {"success": true, "data": ..., "pagination": {...}?}
    Message: {"success": true, "message": "..."}
    Error:   {"success": false, "error": "...", "message": "...", ...}
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

_CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "from_attributes": True,
}


class CamelModel(BaseModel):
    model_config = _CAMEL_CONFIG


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(CamelModel):
    """
    Body of POST /api/products.

    `vendor` defaults to the authenticated caller when omitted.
    Collections default to empty, stock to 0, isFeatured to false.
    """
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="")
    price: float = Field(ge=0)
    compare_price: Optional[float] = Field(default=None, ge=0)
    category: str = Field(min_length=1, max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    brand: Optional[str] = Field(default=None, max_length=100)
    sku: Optional[str] = Field(default=None, max_length=100)
    images: List[Any] = Field(default_factory=list)
    stock: int = Field(default=0, ge=0)
    tags: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    specifications: Dict[str, Any] = Field(default_factory=dict)
    weight: Optional[float] = Field(default=None, ge=0)
    dimensions: Optional[Dict[str, Any]] = None
    is_featured: bool = False
    vendor: Optional[uuid.UUID] = None


class ProductUpdate(CamelModel):
    """
    Body of PUT /api/products/{id}.

    Every field is optional; only fields present in the body are written.
    Explicit nulls are refused for columns that cannot be empty.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    compare_price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    brand: Optional[str] = Field(default=None, max_length=100)
    sku: Optional[str] = Field(default=None, max_length=100)
    images: Optional[List[Any]] = None
    stock: Optional[int] = Field(default=None, ge=0)
    tags: Optional[List[str]] = None
    features: Optional[List[str]] = None
    specifications: Optional[Dict[str, Any]] = None
    weight: Optional[float] = Field(default=None, ge=0)
    dimensions: Optional[Dict[str, Any]] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    vendor: Optional[uuid.UUID] = None

    @field_validator(
        "name", "description", "price", "category", "stock",
        "images", "tags", "features", "specifications",
        "is_featured", "is_active",
    )
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Only runs for values present in the body, never for defaults
        if v is None:
            raise ValueError("may not be null")
        return v

    def changes(self) -> Dict[str, Any]:
        """Provided fields keyed by ORM attribute name."""
        data = self.model_dump(exclude_unset=True)
        if "vendor" in data:
            data["vendor_id"] = data.pop("vendor")
        return data


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RatingSummary(CamelModel):
    average: float = 0.0
    count: int = 0


class VendorSummary(CamelModel):
    """Populated vendor reference: only name and email are exposed."""
    id: uuid.UUID
    name: str
    email: str


class ReviewResponse(CamelModel):
    id: uuid.UUID
    reviewer_name: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ProductResponse(CamelModel):
    """Full product record with the vendor as a bare reference."""
    id: uuid.UUID
    name: str
    description: str
    price: float
    compare_price: Optional[float] = None
    category: str
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    sku: Optional[str] = None
    images: List[Any] = Field(default_factory=list)
    stock: int
    tags: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    specifications: Dict[str, Any] = Field(default_factory=dict)
    weight: Optional[float] = None
    dimensions: Optional[Dict[str, Any]] = None
    is_featured: bool
    is_active: bool
    vendor_id: Optional[uuid.UUID] = None
    ratings: RatingSummary = Field(default_factory=RatingSummary)
    created_at: datetime
    updated_at: datetime


class ProductWithVendor(ProductResponse):
    vendor: Optional[VendorSummary] = None


class ProductDetail(ProductWithVendor):
    reviews: List[ReviewResponse] = Field(default_factory=list)


class ProductSuggestion(CamelModel):
    """Narrow projection for the search-as-you-type box."""
    id: uuid.UUID
    name: str
    category: str
    brand: Optional[str] = None
    images: List[Any] = Field(default_factory=list)
    price: float


class PageSummary(CamelModel):
    current: int
    total_pages: int
    total_products: int


class PaginationMeta(PageSummary):
    has_next: bool
    has_prev: bool


# ── Envelopes ─────────────────────────────────────────────────────────────


class ProductListResponse(CamelModel):
    """GET /api/products"""
    success: bool = True
    data: List[ProductWithVendor]
    pagination: PaginationMeta


class CategoryProductsResponse(CamelModel):
    """GET /api/products/category/{category}"""
    success: bool = True
    data: List[ProductResponse]
    pagination: PageSummary


class ProductCollectionResponse(CamelModel):
    """GET /api/products/featured"""
    success: bool = True
    data: List[ProductResponse]


class SuggestionListResponse(CamelModel):
    success: bool = True
    data: List[ProductSuggestion]


class ProductDetailResponse(CamelModel):
    success: bool = True
    data: ProductDetail


class ProductEnvelope(CamelModel):
    """Create and update responses."""
    success: bool = True
    data: ProductResponse


class MessageResponse(CamelModel):
    success: bool = True
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "success": false,
            "error": "validation_error",
            "message": "SKU already exists",
            "details": {"field": "sku", "sku": "TV-001"},
            "request_id": "1f0c2a9e"
        }
    """
    success: bool = False
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
