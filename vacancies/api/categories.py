"""
Category API Endpoints
List, search, create, update and delete categories.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from vacancies.api.deps import AdminContextDep, AsyncSessionDep, RequestContextDep
from vacancies.schemas.categories import (
    CategoryCreate,
    CategoryDetail,
    CategoryGrantSummary,
    CategoryResponse,
    CategoryUpdate,
)
from vacancies.schemas.common import ErrorResponse, PagedResult
from vacancies.services.categories import CategoryService

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get(
    "",
    response_model=PagedResult[CategoryResponse],
    summary="List categories",
    description="Get a paginated list of categories, optionally filtered by a search term.",
)
async def list_categories(
    db: AsyncSessionDep,
    ctx: RequestContextDep,
    search: Optional[str] = Query(default=None, description="Matches name or description, case-insensitive"),
    page: int = Query(default=1, description="Page number; values below 1 are treated as 1"),
    page_size: int = Query(
        default=10,
        alias="pageSize",
        description="Items per page; values outside 1-100 fall back to 10",
    ),
) -> PagedResult[CategoryResponse]:
    """
    Categories ordered by name.

    Paging past the last page returns an empty page rather than an error.
    """
    result = await CategoryService(db, ctx).list_categories(search=search, page=page, page_size=page_size)
    return PagedResult[CategoryResponse].from_page(
        result,
        [CategoryResponse.model_validate(c) for c in result.items],
    )


@router.get(
    "/{category_id}",
    response_model=CategoryDetail,
    summary="Get category",
    description="Get a category with its associated grants.",
    responses={404: {"model": ErrorResponse}},
)
async def get_category(
    category_id: UUID,
    db: AsyncSessionDep,
    ctx: RequestContextDep,
) -> CategoryDetail:
    service = CategoryService(db, ctx)
    category = await service.get_category(category_id)
    grants = await service.get_category_grants(category_id)

    return CategoryDetail(
        id=category.id,
        name=category.name,
        description=category.description,
        version=category.version,
        grant_count=len(grants),
        grants=[CategoryGrantSummary.model_validate(g) for g in grants],
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
    description="Create a category. Names must be unique regardless of case.",
    responses={400: {"model": ErrorResponse}},
)
async def create_category(
    payload: CategoryCreate,
    response: Response,
    db: AsyncSessionDep,
    ctx: AdminContextDep,
) -> CategoryResponse:
    category = await CategoryService(db, ctx).create_category(payload)
    response.headers["Location"] = f"{router.prefix}/{category.id}"
    return CategoryResponse.model_validate(category)


@router.put(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update category",
    description="Replace a category's name and description.",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    db: AsyncSessionDep,
    ctx: AdminContextDep,
) -> Response:
    await CategoryService(db, ctx).update_category(category_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete category",
    description="Delete a category. Refused while any grant is associated with it.",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_category(
    category_id: UUID,
    db: AsyncSessionDep,
    ctx: AdminContextDep,
) -> Response:
    await CategoryService(db, ctx).delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
