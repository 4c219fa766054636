"""Product API endpoints.

Provides endpoints for catalog browsing and product administration:
- GET /product/get-product - list all products
- GET /product/get-product/{slug} - single product
- GET /product/product-photo/{pid} - raw photo bytes
- POST /product/product-filters - filtered list
- GET /product/product-count - total count
- GET /product/product-list/{page} - paginated list
- GET /product/search/{keyword} - keyword search
- GET /product/related-product/{pid}/{cid} - related products
- GET /product/product-category/{slug} - products in a category
- POST /product/create-product - create (admin)
- PUT /product/update-product/{pid} - update (admin)
- DELETE /product/delete-product/{pid} - delete (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from storefront.api.dependencies import (
    AdminDep,
    get_catalog_service,
    get_product_admin_service,
)
from storefront.api.schemas import (
    ApiResponse,
    CategoryProductsResponse,
    CategorySchema,
    ErrorResponse,
    ProductCountResponse,
    ProductListResponse,
    ProductPageResponse,
    ProductResponse,
    ProductSchema,
)
from storefront.catalog.admin import (
    PhotoUpload,
    ProductAdminService,
    parse_product_form,
)
from storefront.catalog.filters import ProductFiltersRequest, build_product_filter
from storefront.catalog.models import Product
from storefront.catalog.service import CatalogService
from storefront.infrastructure.config import settings

router = APIRouter(prefix="/product", tags=["Products"])

CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]
ProductAdminDep = Annotated[ProductAdminService, Depends(get_product_admin_service)]

ERRORS_400_404 = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}
ADMIN_ERRORS = {
    **ERRORS_400_404,
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


# ============================================================================
# Converters
# ============================================================================


def to_schemas(products: list[Product]) -> list[ProductSchema]:
    """Convert products to response schemas."""
    return [ProductSchema.model_validate(p) for p in products]


async def read_photo(photo: UploadFile | None) -> PhotoUpload | None:
    """Read an uploaded photo, capped just above the size limit."""
    if photo is None or not photo.filename:
        return None
    data = await photo.read(settings.max_photo_bytes + 1)
    return PhotoUpload(
        data=data,
        content_type=photo.content_type or "application/octet-stream",
    )


# ============================================================================
# Catalog Endpoints
# ============================================================================


@router.get(
    "/get-product",
    response_model=ProductListResponse,
    summary="List all products",
)
async def list_products(service: CatalogDep) -> ProductListResponse:
    """List every product, newest first, with category embedded."""
    products = await service.list_products()
    return ProductListResponse(
        message="All Products",
        count_total=len(products),
        products=to_schemas(products),
    )


@router.get(
    "/get-product/{slug}",
    response_model=ProductResponse,
    responses=ERRORS_400_404,
    summary="Get product by slug",
)
async def get_product(slug: str, service: CatalogDep) -> ProductResponse:
    """Get a single product by its slug."""
    product = await service.get_product(slug)
    return ProductResponse(
        message="Single product fetched",
        product=ProductSchema.model_validate(product),
    )


@router.get(
    "/product-photo/{pid}",
    responses=ERRORS_400_404,
    response_class=Response,
    summary="Get product photo",
)
async def product_photo(pid: str, service: CatalogDep) -> Response:
    """Return the raw photo bytes with their stored content type."""
    data, content_type = await service.get_photo(pid)
    return Response(content=data, media_type=content_type)


@router.post(
    "/product-filters",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Filter products",
    description="Filter by category ids (`checked`) and an inclusive "
    "[min, max] price range (`radio`). Empty filters return everything.",
)
async def filter_products(
    filters: ProductFiltersRequest,
    service: CatalogDep,
) -> ProductListResponse:
    """List products matching category and price filters."""
    products = await service.filter_products(build_product_filter(filters))
    return ProductListResponse(
        message="Filtered products fetched",
        count_total=len(products),
        products=to_schemas(products),
    )


@router.get(
    "/product-count",
    response_model=ProductCountResponse,
    summary="Count products",
)
async def product_count(service: CatalogDep) -> ProductCountResponse:
    """Get the total number of products."""
    total = await service.count_products()
    return ProductCountResponse(message="Product count fetched", total=total)


@router.get(
    "/product-list/{page}",
    response_model=ProductPageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="List products by page",
)
async def product_list(page: str, service: CatalogDep) -> ProductPageResponse:
    """Get one page of products, newest first.

    ``page`` is taken as raw text so a non-numeric value is reported as
    a validation error rather than a routing error.
    """
    result = await service.list_page(page)
    return ProductPageResponse(
        message="Products list fetched",
        products=to_schemas(result.items),
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        has_more=result.has_next,
    )


@router.get(
    "/search/{keyword}",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Search products",
)
async def search_products(keyword: str, service: CatalogDep) -> ProductListResponse:
    """Case-insensitive search in product names and descriptions."""
    products = await service.search_products(keyword)
    return ProductListResponse(
        message="Search results fetched",
        count_total=len(products),
        products=to_schemas(products),
    )


@router.get(
    "/related-product/{pid}/{cid}",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Related products",
)
async def related_products(
    pid: str,
    cid: str,
    service: CatalogDep,
) -> ProductListResponse:
    """Get up to three other products from the same category."""
    products = await service.related_products(pid, cid)
    return ProductListResponse(
        message="Related products fetched",
        count_total=len(products),
        products=to_schemas(products),
    )


@router.get(
    "/product-category/{slug}",
    response_model=CategoryProductsResponse,
    responses=ERRORS_400_404,
    summary="Products in a category",
)
async def products_by_category(
    slug: str,
    service: CatalogDep,
) -> CategoryProductsResponse:
    """Get a category by slug together with all of its products."""
    result = await service.products_by_category(slug)
    return CategoryProductsResponse(
        message="Category and products fetched",
        category=CategorySchema.model_validate(result.category),
        products=to_schemas(result.products),
    )


# ============================================================================
# Admin Endpoints
# ============================================================================


@router.post(
    "/create-product",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ADMIN_ERRORS,
    dependencies=[AdminDep],
    summary="Create product (admin)",
)
async def create_product(
    service: ProductAdminDep,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    quantity: Annotated[str | None, Form()] = None,
    shipping: Annotated[str | None, Form()] = None,
    photo: Annotated[UploadFile | None, File()] = None,
) -> ProductResponse:
    """Create a product from a multipart form."""
    draft = parse_product_form(
        {
            "name": name,
            "description": description,
            "price": price,
            "category": category,
            "quantity": quantity,
            "shipping": shipping,
        },
        photo=await read_photo(photo),
        max_photo_bytes=settings.max_photo_bytes,
    )
    product = await service.create_product(draft)
    return ProductResponse(
        message="Product Created Successfully",
        product=ProductSchema.model_validate(product),
    )


@router.put(
    "/update-product/{pid}",
    response_model=ProductResponse,
    responses=ADMIN_ERRORS,
    dependencies=[AdminDep],
    summary="Update product (admin)",
)
async def update_product(
    pid: str,
    service: ProductAdminDep,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    quantity: Annotated[str | None, Form()] = None,
    shipping: Annotated[str | None, Form()] = None,
    photo: Annotated[UploadFile | None, File()] = None,
) -> ProductResponse:
    """Update a product; the stored photo is kept unless a new one is sent."""
    draft = parse_product_form(
        {
            "name": name,
            "description": description,
            "price": price,
            "category": category,
            "quantity": quantity,
            "shipping": shipping,
        },
        photo=await read_photo(photo),
        max_photo_bytes=settings.max_photo_bytes,
    )
    product = await service.update_product(pid, draft)
    return ProductResponse(
        message="Product Updated Successfully",
        product=ProductSchema.model_validate(product),
    )


@router.delete(
    "/delete-product/{pid}",
    response_model=ApiResponse,
    responses=ADMIN_ERRORS,
    dependencies=[AdminDep],
    summary="Delete product (admin)",
)
async def delete_product(pid: str, service: ProductAdminDep) -> ApiResponse:
    """Delete a product."""
    await service.delete_product(pid)
    return ApiResponse(message="Product Deleted successfully")
