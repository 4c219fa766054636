"""FastAPI dependencies.

Wires a request-scoped session into each service and guards admin
routes with a bearer API key.
"""

import hmac
from typing import Annotated

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.admin import ProductAdminService
from storefront.catalog.categories import CategoryService
from storefront.catalog.service import CatalogService
from storefront.domain.exceptions import UnauthorizedError
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import get_session
from storefront.orders.service import OrderService

logger = structlog.get_logger()

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_catalog_service(session: SessionDep) -> CatalogService:
    """Get catalog query service for this request."""
    return CatalogService(
        session,
        page_size=settings.page_size,
        related_limit=settings.related_limit,
    )


def get_category_service(session: SessionDep) -> CategoryService:
    """Get category admin service for this request."""
    return CategoryService(session)


def get_product_admin_service(session: SessionDep) -> ProductAdminService:
    """Get product admin service for this request."""
    return ProductAdminService(session, slug_retry_limit=settings.slug_retry_limit)


def get_order_service(session: SessionDep) -> OrderService:
    """Get order service for this request."""
    return OrderService(session)


async def require_admin(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Require a valid admin API key.

    Expects ``Authorization: Bearer <admin_api_key>``.

    Raises:
        UnauthorizedError: If the header is missing, malformed or wrong.
    """
    path = request.url.path

    if not authorization:
        logger.warning("Missing authorization header", path=path, method=request.method)
        raise UnauthorizedError("Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid authorization format", path=path, method=request.method)
        raise UnauthorizedError(
            "Invalid Authorization header format. Use 'Bearer <api_key>'"
        )

    if not hmac.compare_digest(parts[1].encode(), settings.admin_api_key.encode()):
        logger.warning("Invalid API key", path=path, method=request.method)
        raise UnauthorizedError("Unauthorized Access")

    request.state.authenticated = True


AdminDep = Depends(require_admin)
