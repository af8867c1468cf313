"""
Catalog API — Vendor (User) SQLAlchemy Model
==============================================

What:  ORM model for the `users` table, referenced as a product's vendor.
Why:   Listing and detail responses populate the vendor's name and email.
Who:   Owned by the identity service upstream; this service only reads it.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.database import Base


class User(Base):
    """A marketplace account; products reference it as their vendor."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
