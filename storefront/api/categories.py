"""Category API endpoints.

Provides endpoints for category management:
- POST /category/create-category - create (admin)
- PUT /category/update-category/{id} - rename (admin)
- GET /category/get-category - list all
- GET /category/single-category/{slug} - get by slug
- DELETE /category/delete-category/{id} - delete (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import AdminDep, get_category_service
from storefront.api.schemas import (
    ApiResponse,
    CategoryListResponse,
    CategoryRequest,
    CategoryResponse,
    CategorySchema,
    ErrorResponse,
)
from storefront.catalog.categories import CategoryService

router = APIRouter(prefix="/category", tags=["Categories"])

CategoryDep = Annotated[CategoryService, Depends(get_category_service)]

ADMIN_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/create-category",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**ADMIN_ERRORS, 409: {"model": ErrorResponse}},
    dependencies=[AdminDep],
    summary="Create category (admin)",
)
async def create_category(
    request: CategoryRequest,
    service: CategoryDep,
) -> CategoryResponse:
    """Create a category.

    Names are unique case-insensitively; a clash is reported as 409.
    """
    category = await service.create_category(request.name)
    return CategoryResponse(
        message="New Category Created",
        category=CategorySchema.model_validate(category),
    )


@router.put(
    "/update-category/{category_id}",
    response_model=CategoryResponse,
    responses=ADMIN_ERRORS,
    dependencies=[AdminDep],
    summary="Rename category (admin)",
)
async def update_category(
    category_id: str,
    request: CategoryRequest,
    service: CategoryDep,
) -> CategoryResponse:
    """Rename a category.

    A rename onto another category's name answers 200 with
    ``success: false`` and leaves the category unchanged.
    """
    result = await service.update_category(category_id, request.name)
    return CategoryResponse(
        success=result.success,
        message=result.message,
        category=(
            CategorySchema.model_validate(result.category)
            if result.category is not None
            else None
        ),
    )


@router.get(
    "/get-category",
    response_model=CategoryListResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List categories",
)
async def list_categories(service: CategoryDep) -> CategoryListResponse:
    """List all categories in creation order."""
    categories = await service.list_categories()
    return CategoryListResponse(
        message="All Categories List" if categories else "No Categories Found",
        category=[CategorySchema.model_validate(c) for c in categories],
    )


@router.get(
    "/single-category/{slug}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Get category by slug",
)
async def single_category(slug: str, service: CategoryDep) -> CategoryResponse:
    """Get a single category by slug."""
    category = await service.get_category(slug)
    return CategoryResponse(
        message="Get Single Category Successfully",
        category=CategorySchema.model_validate(category),
    )


@router.delete(
    "/delete-category/{category_id}",
    response_model=ApiResponse,
    responses=ADMIN_ERRORS,
    dependencies=[AdminDep],
    summary="Delete category (admin)",
)
async def delete_category(category_id: str, service: CategoryDep) -> ApiResponse:
    """Delete a category; its products remain, uncategorized."""
    await service.delete_category(category_id)
    return ApiResponse(message="Category Deleted Successfully")
