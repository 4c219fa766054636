"""Tests for product administration."""

from decimal import Decimal

import pytest

from storefront.catalog.admin import (
    PhotoUpload,
    ProductAdminService,
    parse_product_form,
)
from storefront.domain.exceptions import (
    CategoryNotFoundError,
    ProductNotFoundError,
    SlugConflictError,
    ValidationError,
)


def form(**overrides) -> dict:
    """Build a valid product form."""
    fields = {
        "name": "Laptop",
        "description": "14 inch ultrabook",
        "price": "999.99",
        "category": "c1",
        "quantity": "3",
        "shipping": "yes",
    }
    fields.update(overrides)
    return fields


class TestParseProductForm:
    """Tests for product form validation."""

    def test_valid_form(self) -> None:
        """Valid fields are converted to typed values."""
        draft = parse_product_form(form())
        assert draft.name == "Laptop"
        assert draft.price == Decimal("999.99")
        assert draft.quantity == 3
        assert draft.category_id == "c1"
        assert draft.shipping is True
        assert draft.photo is None

    def test_reports_first_missing_field(self) -> None:
        """Required fields are checked in a fixed order."""
        with pytest.raises(ValidationError) as exc_info:
            parse_product_form(form(description="", quantity=None))
        assert exc_info.value.message == "Description is required"
        assert exc_info.value.field == "description"

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"price": "0"}, "Price must be positive"),
            ({"price": "-5"}, "Price must be positive"),
            ({"price": "cheap"}, "Price must be a number"),
            ({"price": "nan"}, "Price must be a number"),
            ({"price": "Infinity"}, "Price must be a number"),
            ({"price": "0.001"}, "Price must be positive"),
            ({"price": "1e30"}, "Price must be at most 99999999.99"),
            ({"name": "x" * 501}, "Name must be at most 500 characters"),
            ({"quantity": "-1"}, "Quantity must be non-negative"),
            ({"quantity": "2.5"}, "Quantity must be a whole number"),
            ({"shipping": "maybe"}, "Shipping must be a yes/no value"),
        ],
    )
    def test_invalid_values(self, overrides: dict, message: str) -> None:
        """Out-of-range and malformed values are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            parse_product_form(form(**overrides))
        assert exc_info.value.message == message

    def test_price_rounded_to_cents(self) -> None:
        """Prices are kept as exact two-place decimals."""
        assert parse_product_form(form(price="19.999")).price == Decimal("20.00")
        assert parse_product_form(form(price="0.1")).price == Decimal("0.10")

    def test_name_at_column_limit(self) -> None:
        """A name of exactly the column length is accepted."""
        assert len(parse_product_form(form(name="x" * 500)).name) == 500

    def test_zero_quantity_allowed(self) -> None:
        """Out-of-stock products are valid."""
        assert parse_product_form(form(quantity="0")).quantity == 0

    def test_shipping_optional(self) -> None:
        """Shipping may be omitted."""
        assert parse_product_form(form(shipping=None)).shipping is None

    def test_photo_too_large(self) -> None:
        """Photos over the limit are rejected."""
        photo = PhotoUpload(data=b"x" * 11, content_type="image/png")
        with pytest.raises(ValidationError) as exc_info:
            parse_product_form(form(), photo=photo, max_photo_bytes=10)
        assert exc_info.value.field == "photo"

    def test_photo_content_type_too_long(self) -> None:
        """Content types that cannot be stored are rejected."""
        photo = PhotoUpload(data=b"x", content_type="image/" + "x" * 200)
        with pytest.raises(ValidationError) as exc_info:
            parse_product_form(form(), photo=photo)
        assert exc_info.value.field == "photo"


class TestProductAdminService:
    """Tests for ProductAdminService."""

    @pytest.fixture
    def service(self, session) -> ProductAdminService:
        """Create product admin service on the test session."""
        return ProductAdminService(session)

    @pytest.mark.asyncio
    async def test_create(self, service, factory) -> None:
        """Created products get a slug and their category."""
        books = await factory.category("Books")

        product = await service.create_product(
            parse_product_form(form(name="Python Cookbook", category=books.id))
        )

        assert product.slug == "python-cookbook"
        assert product.category.name == "Books"
        assert product.has_photo is False

    @pytest.mark.asyncio
    async def test_same_name_gets_suffix(self, service, factory) -> None:
        """A second product with the same name gets a numbered slug."""
        books = await factory.category("Books")
        draft = parse_product_form(form(category=books.id))

        first = await service.create_product(draft)
        second = await service.create_product(draft)

        assert first.slug == "laptop"
        assert second.slug == "laptop-1"

    @pytest.mark.asyncio
    async def test_create_with_photo(self, service, factory) -> None:
        """Photos are stored with their content type."""
        books = await factory.category("Books")
        photo = PhotoUpload(data=b"\x89PNG", content_type="image/png")

        product = await service.create_product(
            parse_product_form(form(category=books.id), photo=photo)
        )

        assert product.has_photo is True
        assert product.photo_content_type == "image/png"

    @pytest.mark.asyncio
    async def test_unknown_category(self, service) -> None:
        """Products must reference an existing category."""
        with pytest.raises(CategoryNotFoundError):
            await service.create_product(parse_product_form(form(category="nope")))

    @pytest.mark.asyncio
    async def test_update_price_keeps_slug(self, service, factory) -> None:
        """Updates that keep the name leave the slug alone."""
        books = await factory.category("Books")
        product = await factory.product("Laptop", category=books, slug="laptop-7")

        updated = await service.update_product(
            product.id,
            parse_product_form(form(category=books.id, price="10")),
        )

        assert updated.slug == "laptop-7"
        assert updated.price == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_rename_regenerates_slug(self, service, factory) -> None:
        """Renaming picks a new free slug, ignoring the product itself."""
        books = await factory.category("Books")
        await factory.product("Notebook", category=books)
        product = await factory.product("Laptop", category=books)

        updated = await service.update_product(
            product.id,
            parse_product_form(form(name="Notebook", category=books.id)),
        )

        assert updated.slug == "notebook-1"

    @pytest.mark.asyncio
    async def test_update_keeps_photo_without_new_one(self, service, factory) -> None:
        """The stored photo survives updates that send none."""
        books = await factory.category("Books")
        product = await factory.product("Laptop", category=books, photo=b"img")

        updated = await service.update_product(
            product.id,
            parse_product_form(form(category=books.id, quantity="9")),
        )

        assert updated.has_photo is True

    @pytest.mark.asyncio
    async def test_update_unknown(self, service) -> None:
        """Updating a missing product is not found."""
        with pytest.raises(ProductNotFoundError):
            await service.update_product("nope", parse_product_form(form()))

    @pytest.mark.asyncio
    async def test_delete(self, service, factory, session) -> None:
        """Deleted products are gone."""
        product = await factory.product("Laptop")
        await service.delete_product(product.id)
        assert await service.products.get_by_id(product.id) is None
        with pytest.raises(ProductNotFoundError):
            await service.delete_product(product.id)

    @pytest.mark.asyncio
    async def test_retries_after_losing_slug_race(self, service, factory) -> None:
        """A stale existence check is recovered by the unique index."""
        books = await factory.category("Books")
        await factory.product("Laptop", category=books)

        real_exists = service.slugs.exists
        calls = []

        async def stale_first(slug: str, exclude_id: str | None = None) -> bool:
            calls.append(slug)
            if len(calls) == 1:
                return False
            return await real_exists(slug, exclude_id)

        service.slugs.exists = stale_first

        product = await service.create_product(
            parse_product_form(form(category=books.id))
        )

        assert product.slug == "laptop-1"
        assert calls[0] == "laptop"

    @pytest.mark.asyncio
    async def test_gives_up_after_retry_limit(self, session, factory) -> None:
        """Repeatedly losing the race ends in a conflict."""
        books = await factory.category("Books")
        await factory.product("Laptop", category=books)
        service = ProductAdminService(session, slug_retry_limit=2)

        async def always_free(slug: str, exclude_id: str | None = None) -> bool:
            return False

        service.slugs.exists = always_free

        with pytest.raises(SlugConflictError):
            await service.create_product(parse_product_form(form(category=books.id)))
