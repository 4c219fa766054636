"""Order application service.

Records orders placed through checkout and lets admins list orders
and move them between fulfilment states.
"""

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.exceptions import (
    OrderNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from storefront.infrastructure.store import store_errors
from storefront.orders.models import Order, OrderItem, OrderStatus
from storefront.orders.repository import OrderRepository

logger = structlog.get_logger()


def parse_status(raw: str | None) -> OrderStatus:
    """Validate an order status value.

    Raises:
        ValidationError: If the value is not one of the OrderStatus values.
    """
    allowed = [s.value for s in OrderStatus]
    if raw is None or raw not in allowed:
        raise ValidationError(
            f"Status must be one of: {', '.join(allowed)}",
            field="status",
        )
    return OrderStatus(raw)


class OrderService:
    """Application service for managing orders.

    Example usage:
        async with session_factory() as session:
            service = OrderService(session)
            order = await service.update_status(order_id, "Shipped")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.orders = OrderRepository(session)

    async def create_order(
        self,
        buyer_id: str,
        product_ids: list[str],
        payment: dict[str, Any] | None = None,
    ) -> Order:
        """Record an order for a buyer.

        Args:
            buyer_id: Purchasing user.
            product_ids: Purchased products in checkout order; an id
                listed twice is bought twice.
            payment: Gateway transaction result.

        Returns:
            The created order in NOT_PROCESSED state.

        Raises:
            ProductNotFoundError: If any product id is unknown.
        """
        with store_errors("Error while creating order"):
            products = await self.orders.get_products(product_ids)
            by_id = {p.id: p for p in products}
            missing = [pid for pid in product_ids if pid not in by_id]
            if missing:
                raise ProductNotFoundError(missing[0])

            order = Order(
                buyer_id=buyer_id,
                items=[
                    OrderItem(position=position, product=by_id[pid])
                    for position, pid in enumerate(product_ids)
                ],
                payment=payment or {},
                status=OrderStatus.NOT_PROCESSED.value,
            )
            await self.orders.save(order)
            await self.session.commit()

            logger.info(
                "Order created",
                order_id=order.id,
                buyer_id=buyer_id,
                product_count=len(product_ids),
            )
            return await self.orders.get_by_id(order.id, refresh=True)

    async def list_orders(self, buyer_id: str | None = None) -> list[Order]:
        """List orders newest first, optionally for one buyer."""
        with store_errors("Error while getting orders"):
            orders = await self.orders.find_all(buyer_id=buyer_id)
        return list(orders)

    async def update_status(self, order_id: str, status: str | None) -> Order:
        """Set an order's status.

        Raises:
            ValidationError: If the status is not a known value.
            OrderNotFoundError: If the order does not exist.
        """
        new_status = parse_status(status)

        with store_errors("Error while updating order"):
            order = await self.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            previous = order.status
            order.status = new_status.value
            await self.session.commit()

            logger.info(
                "Order status updated",
                order_id=order_id,
                from_status=previous,
                to_status=new_status.value,
            )
            return await self.orders.get_by_id(order_id, refresh=True)
