"""Category administration service.

Create, rename, delete and list categories. Category names are unique
case-insensitively: uniqueness is enforced on the slug, which is the
lowercased, URL-safe form of the name.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import CATEGORY_NAME_LENGTH, Category
from storefront.catalog.repository import CategoryRepository
from storefront.catalog.slugs import require_slug
from storefront.domain.exceptions import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    ValidationError,
)
from storefront.infrastructure.store import store_errors

logger = structlog.get_logger()


@dataclass
class UpdateCategoryResult:
    """Result of renaming a category.

    A rename onto another category's name is not an error: it comes
    back with ``success=False`` and the category left untouched.
    """

    category: Category | None = None
    success: bool = True
    message: str = "Category Updated Successfully"


def validate_name(name: str | None, missing: str, blank: str) -> str:
    """Check a category name is present and not whitespace-only.

    Args:
        name: Raw name from the request.
        missing: Message when the name is absent or empty.
        blank: Message when the name is only whitespace.

    Returns:
        The name with surrounding whitespace removed.

    Raises:
        ValidationError: With ``missing`` or ``blank`` as the message, or
            if the name is longer than the column allows.
    """
    if not name:
        raise ValidationError(missing, field="name")
    if not name.strip():
        raise ValidationError(blank, field="name")
    if len(name.strip()) > CATEGORY_NAME_LENGTH:
        raise ValidationError(
            f"Category name must be at most {CATEGORY_NAME_LENGTH} characters",
            field="name",
        )
    return name.strip()


class CategoryService:
    """Service for category administration.

    Example usage:
        async with session_factory() as session:
            service = CategoryService(session)
            category = await service.create_category("Electronics")
            assert category.slug == "electronics"
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.categories = CategoryRepository(session)

    async def create_category(self, name: str | None) -> Category:
        """Create a category.

        Raises:
            ValidationError: If the name is missing or whitespace-only.
            DuplicateCategoryError: If the slug is already taken.
        """
        name = validate_name(
            name,
            missing="Name is required",
            blank="Name cannot contain only whitespace",
        )
        slug = require_slug(name, max_length=CATEGORY_NAME_LENGTH)

        with store_errors("Error in Category Creation"):
            if await self.categories.get_by_slug(slug) is not None:
                raise DuplicateCategoryError(slug)

            category = Category(name=name, slug=slug)
            self.session.add(category)
            try:
                await self.session.commit()
            except IntegrityError as e:
                # Lost a race against a concurrent create of the same slug
                await self.session.rollback()
                raise DuplicateCategoryError(slug) from e

        logger.info("Category created", category_id=category.id, slug=slug)
        return category

    async def update_category(
        self,
        category_id: str,
        name: str | None,
    ) -> UpdateCategoryResult:
        """Rename a category.

        Renaming a category to its own current name is allowed.

        Raises:
            ValidationError: If the name is missing or whitespace-only.
            CategoryNotFoundError: If the category does not exist.
        """
        name = validate_name(
            name,
            missing="Category name cannot be empty",
            blank="Category name cannot contain only whitespace",
        )
        slug = require_slug(name, max_length=CATEGORY_NAME_LENGTH)
        duplicate = UpdateCategoryResult(
            success=False,
            message="Category Already Exists (*Names are case-insensitive)",
        )

        with store_errors("Error while updating category"):
            category = await self.categories.get_by_id(category_id)
            if category is None:
                raise CategoryNotFoundError(category_id)

            if await self.categories.get_by_slug(slug, exclude_id=category_id) is not None:
                logger.info("Category rename rejected", category_id=category_id, slug=slug)
                return duplicate

            category.name = name
            category.slug = slug
            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                return duplicate

        logger.info("Category updated", category_id=category_id, slug=slug)
        return UpdateCategoryResult(category=category)

    async def delete_category(self, category_id: str) -> None:
        """Delete a category; its products are kept without a category.

        Raises:
            CategoryNotFoundError: If the category does not exist.
        """
        with store_errors("Error while deleting category"):
            deleted = await self.categories.delete_by_id(category_id)
            if not deleted:
                raise CategoryNotFoundError(category_id)
            await self.session.commit()

        logger.info("Category deleted", category_id=category_id)

    async def list_categories(self) -> list[Category]:
        """List all categories; an empty list is a normal result."""
        with store_errors("Error while getting all categories"):
            categories = await self.categories.find_all()
        return list(categories)

    async def get_category(self, slug: str) -> Category:
        """Get a category by slug.

        Raises:
            CategoryNotFoundError: If no category has the slug.
        """
        with store_errors("Error while getting Single Category"):
            category = await self.categories.get_by_slug(slug)

        if category is None:
            raise CategoryNotFoundError(slug, by="slug")
        return category
