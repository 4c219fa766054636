"""Catalog repositories for database operations.

Provides CRUD and query operations for categories and products.
Product queries never load photo bytes unless asked to, and always
eager-load the owning category.
"""

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, undefer

from storefront.catalog.models import Category, Product


class CategoryRepository:
    """Repository for Category database operations.

    Example usage:
        async with session_factory() as session:
            repo = CategoryRepository(session)
            category = await repo.get_by_slug("electronics")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_by_id(self, category_id: str) -> Category | None:
        """Get category by ID."""
        result = await self.session.execute(
            select(Category).where(Category.id == category_id)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(
        self,
        slug: str,
        exclude_id: str | None = None,
    ) -> Category | None:
        """Get category by slug.

        Args:
            slug: Category slug.
            exclude_id: Ignore the category with this ID (used on rename).

        Returns:
            Category if found, None otherwise.
        """
        query = select(Category).where(Category.slug == slug)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)

        result = await self.session.execute(query)
        return result.scalars().first()

    async def find_all(self) -> Sequence[Category]:
        """List all categories in creation order."""
        result = await self.session.execute(
            select(Category).order_by(Category.created_at.asc(), Category.name.asc())
        )
        return result.scalars().all()

    async def delete_by_id(self, category_id: str) -> bool:
        """Delete a category, detaching its products first.

        Products keep existing with no category; nothing cascades.

        Args:
            category_id: Category ID.

        Returns:
            True if a category was deleted.
        """
        await self.session.execute(
            update(Product)
            .where(Product.category_id == category_id)
            .values(category_id=None)
        )
        result = await self.session.execute(
            delete(Category).where(Category.id == category_id)
        )
        return result.rowcount > 0


class ProductRepository:
    """Repository for Product database operations.

    Handles all database interactions for products including
    filtering and pagination.

    Example usage:
        async with session_factory() as session:
            repo = ProductRepository(session)
            products = await repo.find_all(
                category_ids=["c1", "c2"],
                min_price=Decimal("10"),
                max_price=Decimal("99"),
                limit=6,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_by_id(
        self,
        product_id: str,
        include_photo: bool = False,
        refresh: bool = False,
    ) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.
            include_photo: Whether to load the photo bytes.
            refresh: Overwrite any state already held in the session.

        Returns:
            Product if found, None otherwise.
        """
        query = (
            select(Product)
            .where(Product.id == product_id)
            .options(selectinload(Product.category))
        )

        if include_photo:
            query = query.options(undefer(Product.photo_data))
        if refresh:
            query = query.execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Product | None:
        """Get product by exact slug."""
        result = await self.session.execute(
            select(Product)
            .where(Product.slug == slug)
            .options(selectinload(Product.category))
        )
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        """Check whether a slug is taken.

        Args:
            slug: Candidate slug.
            exclude_id: Product whose own slug should not count.

        Returns:
            True if another product holds the slug.
        """
        query = select(Product.id).where(Product.slug == slug)
        if exclude_id is not None:
            query = query.where(Product.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.first() is not None

    async def find_all(
        self,
        category_id: str | None = None,
        category_ids: list[str] | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        search: str | None = None,
        exclude_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[Product]:
        """Find products newest first, with filtering and pagination.

        Args:
            category_id: Filter by exact category.
            category_ids: Filter by any of several categories.
            min_price: Inclusive lower price bound.
            max_price: Inclusive upper price bound.
            search: Case-insensitive substring of name or description.
            exclude_id: Leave this product out of the results.
            limit: Maximum results, None for all.
            offset: Result offset for pagination.

        Returns:
            Sequence of matching products with categories loaded.
        """
        query = select(Product).options(selectinload(Product.category))

        # Build filter conditions
        conditions = []

        if category_id is not None:
            conditions.append(Product.category_id == category_id)

        if category_ids:
            conditions.append(Product.category_id.in_(category_ids))

        if min_price is not None:
            conditions.append(Product.price >= min_price)

        if max_price is not None:
            conditions.append(Product.price <= max_price)

        if exclude_id is not None:
            conditions.append(Product.id != exclude_id)

        if search:
            conditions.append(
                or_(
                    Product.name.icontains(search, autoescape=True),
                    Product.description.icontains(search, autoescape=True),
                )
            )

        if conditions:
            query = query.where(and_(*conditions))

        # Newest first, id as tie-breaker for stable pages
        query = query.order_by(Product.created_at.desc(), Product.id.desc())

        # Pagination
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self) -> int:
        """Count all products."""
        result = await self.session.execute(select(func.count(Product.id)))
        return result.scalar_one()

    async def delete_by_id(self, product_id: str) -> bool:
        """Delete a product.

        Args:
            product_id: Product ID.

        Returns:
            True if a product was deleted.
        """
        result = await self.session.execute(
            delete(Product).where(Product.id == product_id)
        )
        return result.rowcount > 0
