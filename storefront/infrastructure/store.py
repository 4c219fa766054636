"""Store failure translation.

Wraps store-facing code so driver and ORM failures surface as
``StoreError`` with an operation-specific message.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.exceptions import StoreError

logger = structlog.get_logger()


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into StoreError.

    Usage:
        with store_errors("Error in getting products"):
            products = await repo.find_all()

    Args:
        operation: Message reported to the caller on failure.

    Raises:
        StoreError: If the wrapped block raises SQLAlchemyError.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(
            "Store operation failed",
            operation=operation,
            error=str(e),
        )
        raise StoreError(operation) from e
