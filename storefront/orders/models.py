"""SQLAlchemy models for orders.

An order holds one item per purchased product, in checkout order and
with repeats kept, references the buyer, and stores the payment
gateway result as an opaque document.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.catalog.models import Product
from storefront.infrastructure.database import Base
from storefront.infrastructure.models import UserModel


class OrderStatus(str, Enum):
    """Order fulfilment states.

    Any state may be set by an admin; there is no enforced ordering.
    """

    NOT_PROCESSED = "Not Processed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class OrderItem(Base):
    """One purchased product within an order.

    Attributes:
        order_id: Owning order.
        position: Zero-based place in the checkout list.
        product_id: Purchased product.
    """

    __tablename__ = "order_products"

    order_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("orders.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    product: Mapped[Product] = relationship(Product)

    def __repr__(self) -> str:
        """String representation."""
        return f"<OrderItem(order_id={self.order_id}, position={self.position})>"


class Order(Base):
    """Customer order.

    Attributes:
        id: Unique order identifier.
        status: One of the OrderStatus values.
        buyer_id: Purchasing user.
        items: Purchased products, ordered by position.
        payment: Gateway transaction result, stored as-is.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OrderStatus.NOT_PROCESSED.value,
        index=True,
    )
    buyer_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    payment: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items: Mapped[list[OrderItem]] = relationship(
        OrderItem,
        cascade="all, delete-orphan",
        order_by=OrderItem.position,
    )
    buyer: Mapped[UserModel | None] = relationship(UserModel)

    @property
    def products(self) -> list[Product]:
        """Purchased products in checkout order, repeats included."""
        return [item.product for item in self.items]

    def __repr__(self) -> str:
        """String representation."""
        return f"<Order(id={self.id}, status={self.status})>"
