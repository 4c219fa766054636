"""Order repository for database operations."""

from collections.abc import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.catalog.models import Product
from storefront.orders.models import Order, OrderItem


class OrderRepository:
    """Repository for Order database operations.

    Orders are always returned with their items, each item's product
    (and its category) and the buyer loaded; product photos stay deferred.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    def _with_relations(self, query: Select) -> Select:
        return query.options(
            selectinload(Order.items)
            .selectinload(OrderItem.product)
            .selectinload(Product.category),
            selectinload(Order.buyer),
        )

    async def save(self, order: Order) -> Order:
        """Add an order and flush it."""
        self.session.add(order)
        await self.session.flush()
        return order

    async def get_by_id(self, order_id: str, refresh: bool = False) -> Order | None:
        """Get order by ID.

        Args:
            order_id: Order ID.
            refresh: Overwrite any state already held in the session.

        Returns:
            Order if found, None otherwise.
        """
        query = self._with_relations(select(Order).where(Order.id == order_id))
        if refresh:
            query = query.execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_all(self, buyer_id: str | None = None) -> Sequence[Order]:
        """List orders newest first.

        Args:
            buyer_id: Restrict to one buyer.

        Returns:
            Sequence of orders.
        """
        query = self._with_relations(select(Order))
        if buyer_id is not None:
            query = query.where(Order.buyer_id == buyer_id)

        query = query.order_by(Order.created_at.desc(), Order.id.desc())

        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_products(self, product_ids: list[str]) -> Sequence[Product]:
        """Load the distinct products an order will reference."""
        if not product_ids:
            return []
        result = await self.session.execute(
            select(Product).where(Product.id.in_(product_ids))
        )
        return result.scalars().all()
