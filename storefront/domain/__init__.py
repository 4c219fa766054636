"""Domain layer: exceptions shared by every service.

Example usage:
    from storefront.domain import ProductNotFoundError

    raise ProductNotFoundError("laptop", by="slug")
"""

from storefront.domain.exceptions import (
    CategoryNotFoundError,
    ConflictError,
    DomainError,
    DuplicateCategoryError,
    NotFoundError,
    OrderNotFoundError,
    PhotoNotFoundError,
    ProductNotFoundError,
    SlugConflictError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "UnauthorizedError",
    "NotFoundError",
    "ProductNotFoundError",
    "PhotoNotFoundError",
    "CategoryNotFoundError",
    "OrderNotFoundError",
    "ConflictError",
    "DuplicateCategoryError",
    "SlugConflictError",
    "StoreError",
]
