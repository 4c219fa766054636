"""API schemas for the Storefront API.

Pydantic models for request/response validation and serialization.
Every response carries ``success`` and ``message``; product schemas
have no photo field, so photo bytes can never leak into JSON.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorBody(BaseModel):
    """Structured error description."""

    kind: str = Field(..., description="Error class: validation_error, not_found, ...")
    message: str = Field(..., description="Human-readable error message")
    details: Any = Field(default=None, description="Additional error context")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    success: bool = Field(default=False)
    message: str = Field(..., description="Human-readable error message")
    error: ErrorBody
    request_id: str | None = Field(default=None, description="Request ID for correlation")


class ApiResponse(BaseModel):
    """Base success envelope."""

    success: bool = Field(default=True)
    message: str = Field(..., description="Human-readable outcome")


# ============================================================================
# Category Schemas
# ============================================================================


class CategoryRequest(BaseModel):
    """Create or rename a category.

    ``name`` is optional here so a missing name reaches the service
    and gets its specific message.
    """

    name: str | None = Field(default=None, description="Category display name")


class CategorySchema(BaseModel):
    """Category representation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class CategoryResponse(ApiResponse):
    """Single category."""

    category: CategorySchema | None = None


class CategoryListResponse(ApiResponse):
    """All categories."""

    category: list[CategorySchema] = Field(default_factory=list)


# ============================================================================
# Product Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """Product representation, photo excluded."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str
    price: float
    quantity: int
    shipping: bool | None = None
    has_photo: bool = False
    category: CategorySchema | None = Field(
        default=None, description="Owning category, embedded"
    )
    created_at: datetime
    updated_at: datetime


class ProductResponse(ApiResponse):
    """Single product."""

    product: ProductSchema


class ProductListResponse(ApiResponse):
    """List of products."""

    count_total: int = Field(..., description="Number of products returned")
    products: list[ProductSchema]


class ProductPageResponse(ApiResponse):
    """One page of products."""

    products: list[ProductSchema]
    page: int = Field(..., description="Current page number")
    page_size: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of products")
    has_more: bool = Field(..., description="Whether there are more pages")


class ProductCountResponse(ApiResponse):
    """Total product count."""

    total: int


class CategoryProductsResponse(ApiResponse):
    """A category with its products."""

    category: CategorySchema
    products: list[ProductSchema]


# ============================================================================
# Order Schemas
# ============================================================================


class BuyerSchema(BaseModel):
    """Buyer reduced to identity and display name."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class OrderSchema(BaseModel):
    """Order representation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    status: str
    buyer: BuyerSchema | None = None
    products: list[ProductSchema]
    payment: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class OrderStatusRequest(BaseModel):
    """Change an order's status."""

    status: str | None = Field(default=None, description="New status")


class OrderResponse(ApiResponse):
    """Single order."""

    order: OrderSchema


class OrdersListResponse(ApiResponse):
    """List of orders."""

    orders: list[OrderSchema]
