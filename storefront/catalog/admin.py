"""Product administration service.

Validates product forms and creates, updates and deletes products.
Slugs come from ``SlugGenerator``; the unique index on
``products.slug`` is the final arbiter, and a commit that loses a race
for a slug is rolled back and retried with a freshly generated slug.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import (
    PHOTO_CONTENT_TYPE_LENGTH,
    PRODUCT_NAME_LENGTH,
    Product,
    new_id,
)
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.catalog.slugs import SlugGenerator, slugify
from storefront.domain.exceptions import (
    CategoryNotFoundError,
    ProductNotFoundError,
    SlugConflictError,
    ValidationError,
)
from storefront.infrastructure.store import store_errors

logger = structlog.get_logger()

# Checked in this order; the first missing one is reported
REQUIRED_FIELDS = (
    ("name", "Name"),
    ("description", "Description"),
    ("price", "Price"),
    ("category", "Category"),
    ("quantity", "Quantity"),
)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}

# Numeric(10, 2)
PRICE_QUANTUM = Decimal("0.01")
MAX_PRICE = Decimal("99999999.99")


@dataclass
class PhotoUpload:
    """Uploaded product photo."""

    data: bytes
    content_type: str


@dataclass
class ProductDraft:
    """Validated product fields ready to persist."""

    name: str
    description: str
    price: Decimal
    category_id: str
    quantity: int
    shipping: bool | None = None
    photo: PhotoUpload | None = None

    def column_values(self) -> dict[str, Any]:
        """Map the draft onto Product columns (slug excluded)."""
        values: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category_id": self.category_id,
            "quantity": self.quantity,
            "shipping": self.shipping,
        }
        if self.photo is not None:
            values["photo_data"] = self.photo.data
            values["photo_content_type"] = self.photo.content_type
        return values


def _parse_price(raw: str) -> Decimal:
    try:
        price = Decimal(raw)
    except InvalidOperation:
        raise ValidationError("Price must be a number", field="price") from None
    if not price.is_finite():
        raise ValidationError("Price must be a number", field="price")
    if price > MAX_PRICE:
        raise ValidationError(f"Price must be at most {MAX_PRICE}", field="price")
    price = price.quantize(PRICE_QUANTUM)
    if price <= 0:
        raise ValidationError("Price must be positive", field="price")
    return price


def _parse_quantity(raw: str) -> int:
    try:
        quantity = int(raw)
    except ValueError:
        raise ValidationError("Quantity must be a whole number", field="quantity") from None
    if quantity < 0:
        raise ValidationError("Quantity must be non-negative", field="quantity")
    return quantity


def _parse_shipping(raw: str | None) -> bool | None:
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValidationError("Shipping must be a yes/no value", field="shipping")


def parse_product_form(
    fields: Mapping[str, str | None],
    photo: PhotoUpload | None = None,
    max_photo_bytes: int = 1_000_000,
) -> ProductDraft:
    """Validate raw form fields into a ProductDraft.

    Args:
        fields: Form values keyed by name, category, price, ...
        photo: Optional uploaded photo.
        max_photo_bytes: Largest accepted photo.

    Returns:
        Validated draft.

    Raises:
        ValidationError: Naming the first missing or invalid field.
    """
    for key, label in REQUIRED_FIELDS:
        value = fields.get(key)
        if value is None or not str(value).strip():
            raise ValidationError(f"{label} is required", field=key)

    name = str(fields["name"]).strip()
    if len(name) > PRODUCT_NAME_LENGTH:
        raise ValidationError(
            f"Name must be at most {PRODUCT_NAME_LENGTH} characters",
            field="name",
        )

    if photo is not None and len(photo.data) > max_photo_bytes:
        raise ValidationError(
            f"Photo should be less than {max_photo_bytes} bytes",
            field="photo",
        )
    if photo is not None and len(photo.content_type) > PHOTO_CONTENT_TYPE_LENGTH:
        raise ValidationError("Photo content type is not recognised", field="photo")

    return ProductDraft(
        name=name,
        description=str(fields["description"]).strip(),
        price=_parse_price(str(fields["price"]).strip()),
        category_id=str(fields["category"]).strip(),
        quantity=_parse_quantity(str(fields["quantity"]).strip()),
        shipping=_parse_shipping(fields.get("shipping")),
        photo=photo,
    )


class ProductAdminService:
    """Service for product administration.

    Example usage:
        async with session_factory() as session:
            service = ProductAdminService(session)
            draft = parse_product_form({"name": "Laptop", ...})
            product = await service.create_product(draft)
    """

    def __init__(self, session: AsyncSession, slug_retry_limit: int = 5) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
            slug_retry_limit: Commit attempts before giving up on a slug.
        """
        self.session = session
        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.slugs = SlugGenerator(self.products.slug_exists, max_length=PRODUCT_NAME_LENGTH)
        self.slug_retry_limit = slug_retry_limit

    async def create_product(self, draft: ProductDraft) -> Product:
        """Create a product with a unique slug.

        Raises:
            CategoryNotFoundError: If the category does not exist.
            SlugConflictError: If every slug attempt lost a race.
        """
        with store_errors("Error in creating product"):
            await self._require_category(draft.category_id)

            product = Product(id=new_id())
            await self._persist(product, draft, regenerate_slug=True)

            logger.info("Product created", product_id=product.id, slug=product.slug)
            return await self._reload(product.id)

    async def update_product(self, product_id: str, draft: ProductDraft) -> Product:
        """Update a product.

        The slug is regenerated only when the name changes; an update
        that keeps the name leaves the slug untouched. The stored photo
        is kept unless the draft carries a new one.

        Raises:
            ProductNotFoundError: If the product does not exist.
            CategoryNotFoundError: If the category does not exist.
        """
        with store_errors("Error in updating product"):
            product = await self.products.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

            await self._require_category(draft.category_id)

            await self._persist(
                product,
                draft,
                regenerate_slug=draft.name != product.name,
            )

            logger.info("Product updated", product_id=product_id)
            return await self._reload(product_id)

    async def delete_product(self, product_id: str) -> None:
        """Delete a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        with store_errors("Error while deleting product"):
            deleted = await self.products.delete_by_id(product_id)
            if not deleted:
                raise ProductNotFoundError(product_id)
            await self.session.commit()

        logger.info("Product deleted", product_id=product_id)

    async def _require_category(self, category_id: str) -> None:
        if await self.categories.get_by_id(category_id) is None:
            raise CategoryNotFoundError(category_id)

    async def _reload(self, product_id: str) -> Product:
        product = await self.products.get_by_id(product_id, refresh=True)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def _persist(
        self,
        product: Product,
        draft: ProductDraft,
        regenerate_slug: bool,
    ) -> None:
        """Apply the draft and commit, retrying on slug races.

        Raises:
            SlugConflictError: After ``slug_retry_limit`` lost races.
            IntegrityError: If the commit fails while keeping the slug.
        """
        product_id = product.id
        values = draft.column_values()

        for attempt in range(1, self.slug_retry_limit + 1):
            if regenerate_slug:
                with self.session.no_autoflush:
                    values["slug"] = await self.slugs.generate(draft.name, exclude_id=product_id)

            for key, value in values.items():
                setattr(product, key, value)
            self.session.add(product)

            try:
                await self.session.commit()
                return
            except IntegrityError:
                await self.session.rollback()
                if not regenerate_slug:
                    raise
                logger.warning(
                    "Product slug collision, retrying",
                    product_id=product_id,
                    slug=values["slug"],
                    attempt=attempt,
                )

        raise SlugConflictError(slugify(draft.name), self.slug_retry_limit)
