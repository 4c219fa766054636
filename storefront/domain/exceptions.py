"""Domain exceptions.

All domain-level errors raised by the catalog, category and order
services. The API layer maps each family to one response class:
validation, unauthorized, not-found, conflict and internal store
failures.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Request Errors
# ============================================================================


class ValidationError(DomainError):
    """Raised when input is missing or malformed.

    Always raised before the store is touched.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Description of the problem.
            field: Name of the offending input field, if any.
        """
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class UnauthorizedError(DomainError):
    """Raised when an admin-only operation lacks valid credentials."""

    pass


# ============================================================================
# Not Found Errors
# ============================================================================


class NotFoundError(DomainError):
    """Base class for well-formed requests naming a missing entity."""

    pass


class ProductNotFoundError(NotFoundError):
    """Raised when a product cannot be found by id or slug."""

    def __init__(self, key: str, by: str = "id") -> None:
        super().__init__("Product not found", details={by: key})


class PhotoNotFoundError(NotFoundError):
    """Raised when a product exists but has no photo stored."""

    def __init__(self, product_id: str) -> None:
        super().__init__("Photo not found", details={"product_id": product_id})


class CategoryNotFoundError(NotFoundError):
    """Raised when a category cannot be found by id or slug."""

    def __init__(self, key: str, by: str = "id") -> None:
        super().__init__("Category not found", details={by: key})


class OrderNotFoundError(NotFoundError):
    """Raised when an order cannot be found."""

    def __init__(self, order_id: str) -> None:
        super().__init__("Order not found", details={"order_id": order_id})


# ============================================================================
# Conflict Errors
# ============================================================================


class ConflictError(DomainError):
    """Base class for uniqueness violations."""

    pass


class DuplicateCategoryError(ConflictError):
    """Raised when a category name normalizes to an existing slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            "Category Already Exists (*Names are case-insensitive)",
            details={"slug": slug},
        )


class SlugConflictError(ConflictError):
    """Raised when no free product slug could be committed.

    Happens only when concurrent writers keep claiming the generated
    slug between the existence check and the insert.
    """

    def __init__(self, base_slug: str, attempts: int) -> None:
        super().__init__(
            f"Could not allocate a unique slug for '{base_slug}'",
            details={"base_slug": base_slug, "attempts": attempts},
        )


# ============================================================================
# Store Errors
# ============================================================================


class StoreError(DomainError):
    """Raised when the underlying store fails unexpectedly.

    The message names the failed operation; the driver error is kept
    as ``__cause__`` for server-side logging only.
    """

    pass
