"""
Catalog API — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the product catalog.
Why:   Custom exceptions map cleanly to HTTP status codes and keep
       HTTP concerns out of the query layer and services.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the `{success: false, ...}` error envelope.

Exception Hierarchy:
    CatalogError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    │   └── DuplicateSkuError    → 400 Bad Request (sku already taken)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CatalogError):
    """
    Raised when client input fails a business rule.

    When:    Non-numeric price bound, page/limit below 1, duplicate sku.
    HTTP:    400 Bad Request

    Pydantic body validation is left to FastAPI (422); this class covers the
    query-string translation layer, where every value arrives as a string.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DuplicateSkuError(ValidationError):
    """Raised when a create or update would give two products the same sku."""

    def __init__(self, sku: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["sku"] = sku
        super().__init__(message="SKU already exists", field="sku", context=ctx)
        self.sku = sku


class AuthenticationError(CatalogError):
    """
    Raised when an operation needs a caller identity and none was supplied.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(CatalogError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/products/{id} with an unknown or malformed id.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "Product",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(CatalogError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the context is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
