"""Tests for catalog query service."""

from decimal import Decimal

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from storefront.catalog.filters import ProductFilter
from storefront.catalog.repository import ProductRepository
from storefront.catalog.service import CatalogService
from storefront.domain.exceptions import (
    CategoryNotFoundError,
    PhotoNotFoundError,
    ProductNotFoundError,
    StoreError,
    ValidationError,
)


@pytest.fixture
def service(session) -> CatalogService:
    """Create catalog service on the test session."""
    return CatalogService(session)


class TestListProducts:
    """Tests for full and paginated listing."""

    @pytest.mark.asyncio
    async def test_lists_newest_first_with_category(self, service, factory) -> None:
        """Products come newest first with their category loaded."""
        books = await factory.category("Books")
        await factory.product("Old", category=books)
        await factory.product("New", category=books)

        products = await service.list_products()

        assert [p.name for p in products] == ["New", "Old"]
        assert products[0].category.slug == "books"

    @pytest.mark.asyncio
    async def test_photo_bytes_are_not_loaded(self, service, factory, session) -> None:
        """List queries leave the photo column unloaded."""
        await factory.product("Camera", photo=b"\x89PNG data")
        session.expunge_all()

        products = await service.list_products()

        assert "photo_data" in inspect(products[0]).unloaded
        assert products[0].has_photo is True

    @pytest.mark.asyncio
    async def test_pages_of_six(self, service, factory) -> None:
        """Ten products split into pages of six and four."""
        for i in range(10):
            await factory.product(f"Product {i}")

        first = await service.list_page(1)
        second = await service.list_page("2")
        third = await service.list_page(3)

        assert [p.name for p in first.items] == [f"Product {i}" for i in range(9, 3, -1)]
        assert [p.name for p in second.items] == [f"Product {i}" for i in range(3, -1, -1)]
        assert third.items == []
        assert first.total == 10
        assert first.has_next is True
        assert second.has_next is False

    @pytest.mark.asyncio
    async def test_page_past_end_is_not_queried(self, service, factory, monkeypatch) -> None:
        """Pages beyond the last product are empty without a product query."""
        await factory.product("Pen")
        calls = []

        async def recording(*args, **kwargs):
            calls.append(kwargs)
            return []

        monkeypatch.setattr(ProductRepository, "find_all", recording)

        page = await service.list_page(3)

        assert page.items == []
        assert page.total == 1
        assert calls == []

    @pytest.mark.asyncio
    async def test_huge_page_number_is_empty(self, service, factory) -> None:
        """Page numbers too large for the driver give an empty page."""
        await factory.product("Pen")

        page = await service.list_page("99999999999999999999")

        assert page.items == []
        assert page.total == 1
        assert page.has_next is False

    @pytest.mark.asyncio
    async def test_invalid_page(self, service) -> None:
        """Non-positive page numbers are rejected."""
        with pytest.raises(ValidationError):
            await service.list_page("0")

    @pytest.mark.asyncio
    async def test_count(self, service, factory) -> None:
        """Count reflects every product."""
        assert await service.count_products() == 0
        await factory.product("Pen")
        await factory.product("Pencil")
        assert await service.count_products() == 2

    @pytest.mark.asyncio
    async def test_store_failure_becomes_store_error(self, service, monkeypatch) -> None:
        """Driver failures surface as StoreError naming the operation."""

        async def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(ProductRepository, "find_all", broken)

        with pytest.raises(StoreError) as exc_info:
            await service.list_products()
        assert exc_info.value.message == "Error in getting products"


class TestGetProduct:
    """Tests for single product and photo lookup."""

    @pytest.mark.asyncio
    async def test_by_slug(self, service, factory) -> None:
        """Products are found by exact slug."""
        await factory.product("Gaming Laptop")
        product = await service.get_product("gaming-laptop")
        assert product.name == "Gaming Laptop"

    @pytest.mark.asyncio
    async def test_unknown_slug(self, service) -> None:
        """Unknown slugs raise not found."""
        with pytest.raises(ProductNotFoundError):
            await service.get_product("missing")

    @pytest.mark.asyncio
    async def test_photo(self, service, factory) -> None:
        """Photo bytes come back with their content type."""
        product = await factory.product("Camera", photo=b"jpegbytes", content_type="image/jpeg")
        data, content_type = await service.get_photo(product.id)
        assert data == b"jpegbytes"
        assert content_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_photo_missing(self, service, factory) -> None:
        """A product without a photo has no photo to serve."""
        product = await factory.product("Pen")
        with pytest.raises(PhotoNotFoundError):
            await service.get_photo(product.id)

    @pytest.mark.asyncio
    async def test_photo_unknown_product(self, service) -> None:
        """Unknown products raise product not found."""
        with pytest.raises(ProductNotFoundError):
            await service.get_photo("nope")


class TestSearch:
    """Tests for keyword search."""

    @pytest.mark.asyncio
    async def test_matches_name_or_description(self, service, factory) -> None:
        """Keywords match names and descriptions case-insensitively."""
        await factory.product("Gaming Laptop", description="Fast")
        await factory.product("Mouse", description="Works with any LAPTOP")
        await factory.product("Desk", description="Oak")

        products = await service.search_products("laptop")

        assert sorted(p.name for p in products) == ["Gaming Laptop", "Mouse"]

    @pytest.mark.asyncio
    async def test_keyword_is_literal(self, service, factory) -> None:
        """Wildcard characters in the keyword match literally."""
        await factory.product("Discount", description="Save 50% today")
        await factory.product("Plain", description="Save 50 today")

        products = await service.search_products("50%")

        assert [p.name for p in products] == ["Discount"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keyword", ["", "   ", None])
    async def test_blank_keyword(self, service, keyword) -> None:
        """Blank keywords are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            await service.search_products(keyword)
        assert exc_info.value.message == "Keyword is required"

    @pytest.mark.asyncio
    async def test_blank_keyword_never_queries(self, service, monkeypatch) -> None:
        """A whitespace-only keyword is rejected before any product query."""
        calls = []

        async def recording(*args, **kwargs):
            calls.append(kwargs)
            return []

        monkeypatch.setattr(ProductRepository, "find_all", recording)

        with pytest.raises(ValidationError):
            await service.search_products("   ")
        assert calls == []


class TestRelatedProducts:
    """Tests for related products."""

    @pytest.mark.asyncio
    async def test_same_category_excluding_self(self, service, factory) -> None:
        """At most three others from the same category are returned."""
        phones = await factory.category("Phones")
        other = await factory.category("Books")
        target = await factory.product("Phone 0", category=phones)
        for i in range(1, 5):
            await factory.product(f"Phone {i}", category=phones)
        await factory.product("Novel", category=other)

        products = await service.related_products(target.id, phones.id)

        assert len(products) == 3
        assert target.id not in {p.id for p in products}
        assert all(p.category_id == phones.id for p in products)

    @pytest.mark.asyncio
    async def test_missing_ids(self, service) -> None:
        """Both ids are required."""
        with pytest.raises(ValidationError) as exc_info:
            await service.related_products("p1", " ")
        assert exc_info.value.message == "Product ID and Category ID are required"


class TestProductsByCategory:
    """Tests for listing a category's products."""

    @pytest.mark.asyncio
    async def test_returns_category_and_products(self, service, factory) -> None:
        """The category comes back with only its own products."""
        books = await factory.category("Books")
        toys = await factory.category("Toys")
        await factory.product("Novel", category=books)
        await factory.product("Yo-yo", category=toys)

        result = await service.products_by_category("books")

        assert result.category.id == books.id
        assert [p.name for p in result.products] == ["Novel"]

    @pytest.mark.asyncio
    async def test_unknown_category(self, service) -> None:
        """Unknown slugs raise not found."""
        with pytest.raises(CategoryNotFoundError):
            await service.products_by_category("nope")


class TestFilterProducts:
    """Tests for filtered listing."""

    @pytest.mark.asyncio
    async def test_empty_filter_returns_all(self, service, factory) -> None:
        """An empty filter matches everything."""
        await factory.product("A")
        await factory.product("B")
        products = await service.filter_products(ProductFilter())
        assert len(products) == 2

    @pytest.mark.asyncio
    async def test_categories_and_inclusive_range(self, service, factory) -> None:
        """Category and price conditions are combined."""
        books = await factory.category("Books")
        toys = await factory.category("Toys")
        await factory.product("Cheap book", category=books, price=Decimal("19.99"))
        await factory.product("Book", category=books, price=39)
        await factory.product("Dear book", category=books, price=100)
        await factory.product("Toy", category=toys, price=25)

        products = await service.filter_products(
            ProductFilter(
                category_ids=[books.id],
                min_price=Decimal("19.99"),
                max_price=Decimal("39"),
            )
        )

        assert [p.name for p in products] == ["Book", "Cheap book"]
