"""
Catalog API — Product SQLAlchemy Model
========================================

What:  ORM model representing the `products` table.
Why:   Maps catalog records to Python objects for type-safe queries.
Who:   Used by ProductRepository for every read and write, and by Alembic.

Table Design Rationale:
    - UUID primary key: non-sequential, safe to expose in URLs
    - sku: optional, but unique when present. Enforced by a unique index so
      the database, not an application pre-check, is the final arbiter
    - images/tags/features/specifications/dimensions: free-form JSON; they
      are never filtered on
    - is_active: soft-delete flag. DELETE flips it; rows are never removed
    - rating_average/rating_count: denormalized aggregate kept by the
      reviews feature, used for the `rating` sort mode

Indexes mirror the listing filters (category, brand, price, is_active) and
the default ordering (created_at DESC).
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    A sellable catalog item.

    Lifecycle:
        1. Created active (is_active = True)
        2. Updated in place by PUT (only provided fields change)
        3. Soft-deleted by DELETE (is_active = False); still reachable by id
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ── Descriptive fields (the text-searchable ones) ─────────────────────
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # ── Commercial fields ─────────────────────────────────────────────────
    price: Mapped[float] = mapped_column(Float, nullable=False)
    compare_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # ── Free-form attributes ──────────────────────────────────────────────
    images: Mapped[List[Any]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    specifications: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    dimensions: Mapped[Dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # ── Flags ─────────────────────────────────────────────────────────────
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # ── Ratings aggregate ─────────────────────────────────────────────────
    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # ── Ownership & timestamps ────────────────────────────────────────────
    vendor_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    vendor = relationship("User", lazy="raise")
    reviews = relationship(
        "Review",
        back_populates="product",
        lazy="raise",
        order_by="Review.created_at.desc()",
    )

    __table_args__ = (
        Index("uq_products_sku", "sku", unique=True),
        Index("idx_products_category", "category"),
        Index("idx_products_brand", "brand"),
        Index("idx_products_price", "price"),
        Index("idx_products_is_active", "is_active"),
        Index("idx_products_vendor_id", "vendor_id"),
        Index("idx_products_created_at", created_at.desc()),
    )

    @property
    def ratings(self) -> Dict[str, Any]:
        return {"average": self.rating_average, "count": self.rating_count}

    def __repr__(self) -> str:
        return (
            f"<Product(id={self.id}, sku='{self.sku}', "
            f"active={self.is_active})>"
        )
