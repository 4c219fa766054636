"""Order API endpoints.

Admin-only endpoints for order management:
- GET /order/all-orders - list orders, optionally for one buyer
- PUT /order/order-status/{order_id} - change an order's status
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import AdminDep, get_order_service
from storefront.api.schemas import (
    ErrorResponse,
    OrderResponse,
    OrderSchema,
    OrdersListResponse,
    OrderStatusRequest,
)
from storefront.orders.service import OrderService

router = APIRouter(prefix="/order", tags=["Orders"], dependencies=[AdminDep])

OrderDep = Annotated[OrderService, Depends(get_order_service)]


@router.get(
    "/all-orders",
    response_model=OrdersListResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="List orders (admin)",
)
async def list_orders(
    service: OrderDep,
    buyer: Annotated[str | None, Query(description="Filter by buyer ID")] = None,
) -> OrdersListResponse:
    """List orders, newest first."""
    orders = await service.list_orders(buyer_id=buyer)
    return OrdersListResponse(
        message="All orders fetched",
        orders=[OrderSchema.model_validate(o) for o in orders],
    )


@router.put(
    "/order-status/{order_id}",
    response_model=OrderResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Update order status (admin)",
)
async def update_order_status(
    order_id: str,
    request: OrderStatusRequest,
    service: OrderDep,
) -> OrderResponse:
    """Move an order to another status."""
    order = await service.update_status(order_id, request.status)
    return OrderResponse(
        message="Order status updated",
        order=OrderSchema.model_validate(order),
    )
