"""Order management: order persistence and status administration."""

from storefront.orders.models import Order, OrderStatus
from storefront.orders.repository import OrderRepository
from storefront.orders.service import OrderService

__all__ = [
    "Order",
    "OrderStatus",
    "OrderRepository",
    "OrderService",
]
