"""Tests for product filter validation and building."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.catalog.filters import (
    ProductFilter,
    ProductFiltersRequest,
    build_product_filter,
)


class TestProductFiltersRequest:
    """Tests for the filter payload."""

    def test_defaults_to_empty(self) -> None:
        """Missing fields mean no filtering."""
        request = ProductFiltersRequest()
        assert request.checked == []
        assert request.radio == []

    def test_accepts_price_range(self) -> None:
        """Two numbers form a price range."""
        request = ProductFiltersRequest(checked=["c1"], radio=[0, 19.99])
        assert request.radio == [0, 19.99]

    @pytest.mark.parametrize("radio", [[10], [1, 2, 3]])
    def test_rejects_wrong_radio_length(self, radio: list[int]) -> None:
        """Ranges must have exactly two bounds."""
        with pytest.raises(ValidationError) as exc_info:
            ProductFiltersRequest(radio=radio)
        assert "exactly 2 numbers" in str(exc_info.value)

    def test_rejects_non_finite_bounds(self) -> None:
        """Infinite or NaN bounds are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            ProductFiltersRequest(radio=[0, float("inf")])
        assert "finite" in str(exc_info.value)

    def test_rejects_non_numeric_bounds(self) -> None:
        """Price bounds must be numbers, not numeric strings."""
        with pytest.raises(ValidationError):
            ProductFiltersRequest(radio=["0", "10"])

    def test_rejects_non_string_category_ids(self) -> None:
        """Category ids must be strings."""
        with pytest.raises(ValidationError):
            ProductFiltersRequest(checked=[1, 2])


class TestBuildProductFilter:
    """Tests for build_product_filter."""

    def test_empty_request_gives_empty_filter(self) -> None:
        """No checked categories and no range restrict nothing."""
        product_filter = build_product_filter(ProductFiltersRequest())
        assert product_filter == ProductFilter()
        assert product_filter.is_empty

    def test_categories_only(self) -> None:
        """Checked categories become a category restriction."""
        product_filter = build_product_filter(ProductFiltersRequest(checked=["a", "b"]))
        assert product_filter.category_ids == ["a", "b"]
        assert product_filter.min_price is None
        assert product_filter.max_price is None

    def test_range_only(self) -> None:
        """A range becomes inclusive price bounds."""
        product_filter = build_product_filter(ProductFiltersRequest(radio=[20, 39]))
        assert product_filter.category_ids is None
        assert product_filter.min_price == Decimal("20")
        assert product_filter.max_price == Decimal("39")
        assert not product_filter.is_empty

    def test_fractional_bounds_are_exact(self) -> None:
        """Fractional bounds keep their decimal value."""
        product_filter = build_product_filter(ProductFiltersRequest(radio=[19.99, 39.5]))
        assert product_filter.min_price == Decimal("19.99")
        assert product_filter.max_price == Decimal("39.5")
