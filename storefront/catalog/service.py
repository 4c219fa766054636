"""Catalog service for product queries.

High-level read operations over the catalog: full listing, lookup by
slug, pagination, keyword search, related products, listing by
category and filtered listing. Every operation returns products with
their category loaded and without photo bytes.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.filters import ProductFilter
from storefront.catalog.models import Category, Product
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.domain.exceptions import (
    CategoryNotFoundError,
    PhotoNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from storefront.infrastructure.store import store_errors

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 6
DEFAULT_RELATED_LIMIT = 3


def parse_page(raw: int | str | None) -> int:
    """Validate a client-supplied page number.

    Args:
        raw: Page number as received; None means the first page.

    Returns:
        Page number >= 1.

    Raises:
        ValidationError: If the value is not a positive integer.
    """
    if raw is None:
        return 1

    if isinstance(raw, bool):
        page = None
    elif isinstance(raw, int):
        page = raw
    else:
        text = str(raw).strip()
        page = int(text) if text.isascii() and text.isdigit() else None

    if page is None or page <= 0:
        raise ValidationError("Page number must be number greater than 0", field="page")
    return page


def require_text(value: str | None, message: str, field: str) -> str:
    """Return stripped text, rejecting None and whitespace-only values."""
    if value is None or not value.strip():
        raise ValidationError(message, field=field)
    return value.strip()


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        page_size: Items per page.
    """

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: Items on this page.
        total: Total count across all pages.
        page: Current page.
        page_size: Items per page.
    """

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages


@dataclass
class CategoryProducts:
    """A category together with its products."""

    category: Category
    products: list[Product]


class CatalogService:
    """Service for catalog read operations.

    Example usage:
        async with session_factory() as session:
            service = CatalogService(session)
            page = await service.list_page("2")
            related = await service.related_products(pid, cid)
    """

    def __init__(
        self,
        session: AsyncSession,
        page_size: int = DEFAULT_PAGE_SIZE,
        related_limit: int = DEFAULT_RELATED_LIMIT,
    ) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
            page_size: Products per page for paginated listing.
            related_limit: Maximum number of related products.
        """
        self.session = session
        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.page_size = page_size
        self.related_limit = related_limit

    async def list_products(self) -> list[Product]:
        """List every product, newest first."""
        with store_errors("Error in getting products"):
            products = await self.products.find_all()
        return list(products)

    async def get_product(self, slug: str | None) -> Product:
        """Get a product by exact slug.

        Raises:
            ValidationError: If the slug is blank.
            ProductNotFoundError: If no product has the slug.
        """
        slug = require_text(slug, "slug is required", "slug")

        with store_errors("Error while getting single product"):
            product = await self.products.get_by_slug(slug)

        if product is None:
            raise ProductNotFoundError(slug, by="slug")
        return product

    async def get_photo(self, product_id: str | None) -> tuple[bytes, str]:
        """Get a product's photo bytes and content type.

        Raises:
            ValidationError: If the product id is blank.
            ProductNotFoundError: If the product does not exist.
            PhotoNotFoundError: If the product has no photo.
        """
        product_id = require_text(product_id, "Product ID is required", "pid")

        with store_errors("Error while getting photo"):
            product = await self.products.get_by_id(product_id, include_photo=True)

        if product is None:
            raise ProductNotFoundError(product_id)
        if not product.photo_data:
            raise PhotoNotFoundError(product_id)

        return product.photo_data, product.photo_content_type or "application/octet-stream"

    async def list_page(self, page: int | str | None) -> PaginatedResult[Product]:
        """Get one page of products, newest first.

        Args:
            page: Raw page number; must be a positive integer.

        Returns:
            At most ``page_size`` products skipping ``(page-1)*page_size``.
            A page past the end is empty.

        Raises:
            ValidationError: If the page number is invalid.
        """
        pagination = PaginationParams(page=parse_page(page), page_size=self.page_size)

        with store_errors("Error in per page control"):
            total = await self.products.count()
            # Offsets past the end are never sent to the driver
            if pagination.offset >= total:
                products = []
            else:
                products = await self.products.find_all(
                    limit=pagination.limit,
                    offset=pagination.offset,
                )

        return PaginatedResult(
            items=list(products),
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
        )

    async def count_products(self) -> int:
        """Count all products."""
        with store_errors("Error in product count"):
            return await self.products.count()

    async def search_products(self, keyword: str | None) -> list[Product]:
        """Search products by keyword in name or description.

        Matching is a case-insensitive literal substring match.

        Raises:
            ValidationError: If the keyword is empty after trimming.
        """
        keyword = require_text(keyword, "Keyword is required", "keyword")

        with store_errors("Error in product search"):
            products = await self.products.find_all(search=keyword)

        logger.debug("Product search", keyword=keyword, matches=len(products))
        return list(products)

    async def related_products(
        self,
        product_id: str | None,
        category_id: str | None,
    ) -> list[Product]:
        """Get other products from the same category.

        Args:
            product_id: Product to exclude.
            category_id: Category to draw from.

        Returns:
            Up to ``related_limit`` products.

        Raises:
            ValidationError: If either id is blank.
        """
        if not (product_id and product_id.strip()) or not (category_id and category_id.strip()):
            raise ValidationError("Product ID and Category ID are required")

        with store_errors("Error while getting related products"):
            products = await self.products.find_all(
                category_id=category_id.strip(),
                exclude_id=product_id.strip(),
                limit=self.related_limit,
            )
        return list(products)

    async def products_by_category(self, slug: str | None) -> CategoryProducts:
        """Get a category and all of its products.

        Raises:
            ValidationError: If the slug is blank.
            CategoryNotFoundError: If no category has the slug.
        """
        slug = require_text(slug, "slug is required", "slug")

        with store_errors("Error while getting category products"):
            category = await self.categories.get_by_slug(slug)
            if category is None:
                raise CategoryNotFoundError(slug, by="slug")
            products = await self.products.find_all(category_id=category.id)

        return CategoryProducts(category=category, products=list(products))

    async def filter_products(self, product_filter: ProductFilter) -> list[Product]:
        """List products matching a filter, newest first."""
        with store_errors("Error while filtering products"):
            products = await self.products.find_all(
                category_ids=product_filter.category_ids,
                min_price=product_filter.min_price,
                max_price=product_filter.max_price,
            )

        logger.debug(
            "Product filter applied",
            unfiltered=product_filter.is_empty,
            matches=len(products),
        )
        return list(products)
