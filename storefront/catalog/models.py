"""SQLAlchemy models for the product catalog.

Defines the Category and Product tables.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.infrastructure.database import Base


CATEGORY_NAME_LENGTH = 200
PRODUCT_NAME_LENGTH = 500
PRODUCT_SLUG_LENGTH = 520
PHOTO_CONTENT_TYPE_LENGTH = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid4())


class Category(Base):
    """Catalog category.

    Attributes:
        id: Unique category identifier.
        name: Display name as entered by the admin.
        slug: Lowercase URL-safe key derived from the name; unique.
        created_at: Creation timestamp.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(CATEGORY_NAME_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(CATEGORY_NAME_LENGTH), nullable=False, unique=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    products: Mapped[list["Product"]] = relationship(
        "Product",
        back_populates="category",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, slug={self.slug})>"


class Product(Base):
    """Product entity in the catalog.

    The photo bytes are deferred: ordinary selects never load them, so
    list and detail queries stay light. Only the photo lookup undefers
    ``photo_data``.

    Attributes:
        id: Unique product identifier.
        name: Product name.
        slug: Unique URL key, regenerated only when the name changes.
        description: Product description.
        price: Unit price, strictly positive.
        category_id: Owning category; nulled if the category is deleted.
        quantity: Stock on hand, never negative.
        photo_data: Raw image bytes (deferred).
        photo_content_type: MIME type of the stored photo.
        shipping: Whether the product ships.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(PRODUCT_NAME_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(PRODUCT_SLUG_LENGTH), nullable=False, unique=True, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, index=True)
    category_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    photo_data: Mapped[bytes | None] = mapped_column(
        LargeBinary,
        nullable=True,
        deferred=True,
    )
    photo_content_type: Mapped[str | None] = mapped_column(
        String(PHOTO_CONTENT_TYPE_LENGTH), nullable=True
    )
    shipping: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    category: Mapped[Category | None] = relationship("Category", back_populates="products")

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, slug={self.slug})>"

    @property
    def has_photo(self) -> bool:
        """Whether a photo is stored, without loading the bytes."""
        return self.photo_content_type is not None
