"""Product filter request validation and predicate building.

The client sends ``{"checked": [category ids], "radio": [min, max]}``.
The request is validated at the boundary, then turned into a
``ProductFilter`` the repository can apply.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator


class ProductFiltersRequest(BaseModel):
    """Filter payload posted by the storefront.

    Attributes:
        checked: Category IDs; any match qualifies.
        radio: Either empty or an inclusive ``[min, max]`` price range.
    """

    model_config = ConfigDict(extra="ignore")

    checked: list[StrictStr] = Field(default_factory=list, description="Category IDs")
    radio: list[StrictInt | StrictFloat] = Field(
        default_factory=list,
        description="Empty, or [min, max] price range (inclusive)",
    )

    @field_validator("radio")
    @classmethod
    def check_radio_length(cls, value: list[int | float]) -> list[int | float]:
        """Accept only an empty list or a two-element range of finite numbers."""
        if len(value) not in (0, 2):
            raise ValueError(
                f"radio must be empty or contain exactly 2 numbers [min, max], got {len(value)}"
            )
        if not all(math.isfinite(bound) for bound in value):
            raise ValueError("radio bounds must be finite numbers")
        return value


@dataclass
class ProductFilter:
    """Filter parameters for product listing.

    Conditions are ANDed; an empty filter matches every product.

    Attributes:
        category_ids: Restrict to these categories when non-empty.
        min_price: Inclusive lower bound.
        max_price: Inclusive upper bound.
    """

    category_ids: list[str] | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None

    @property
    def is_empty(self) -> bool:
        """Whether the filter places no restriction."""
        return not self.category_ids and self.min_price is None and self.max_price is None


def build_product_filter(request: ProductFiltersRequest) -> ProductFilter:
    """Translate a validated filter request into a ProductFilter.

    Args:
        request: Validated filter payload.

    Returns:
        ProductFilter with category and price restrictions.
    """
    product_filter = ProductFilter()

    if request.checked:
        product_filter.category_ids = list(request.checked)

    if len(request.radio) == 2:
        # Via str so 19.99 stays 19.99 and not its binary expansion
        product_filter.min_price = Decimal(str(request.radio[0]))
        product_filter.max_price = Decimal(str(request.radio[1]))

    return product_filter
