"""Product Catalog.

Category and product persistence, slug allocation, filter building,
catalog queries and the admin services that mutate the catalog.
"""

from storefront.catalog.admin import (
    PhotoUpload,
    ProductAdminService,
    ProductDraft,
    parse_product_form,
)
from storefront.catalog.categories import CategoryService, UpdateCategoryResult
from storefront.catalog.filters import ProductFilter, ProductFiltersRequest, build_product_filter
from storefront.catalog.models import Category, Product
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.catalog.service import (
    CatalogService,
    CategoryProducts,
    PaginatedResult,
    PaginationParams,
    parse_page,
)
from storefront.catalog.slugs import SlugGenerator, slugify

__all__ = [
    # Models
    "Category",
    "Product",
    # Repositories
    "CategoryRepository",
    "ProductRepository",
    # Slugs
    "SlugGenerator",
    "slugify",
    # Filters
    "ProductFilter",
    "ProductFiltersRequest",
    "build_product_filter",
    # Services
    "CatalogService",
    "CategoryProducts",
    "PaginatedResult",
    "PaginationParams",
    "parse_page",
    "CategoryService",
    "UpdateCategoryResult",
    "ProductAdminService",
    "ProductDraft",
    "PhotoUpload",
    "parse_product_form",
]
