"""
Grant API Endpoints
List, filter, create, update and delete grants.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from vacancies.api.deps import AsyncSessionDep, RequestContextDep
from vacancies.schemas.common import ErrorResponse, PagedResult
from vacancies.schemas.grants import GrantCreate, GrantResponse, GrantUpdate
from vacancies.services.grants import GrantService

router = APIRouter(prefix="/api/grants", tags=["Grants"])


@router.get(
    "",
    response_model=PagedResult[GrantResponse],
    summary="List grants",
    description="Get paginated list of grants with optional filtering.",
)
async def list_grants(
    db: AsyncSessionDep,
    ctx: RequestContextDep,
    category_id: Optional[UUID] = Query(default=None, alias="categoryId", description="Filter by category"),
    country: Optional[str] = Query(default=None, description="Case-insensitive substring of the country"),
    active_only: bool = Query(
        default=True,
        alias="activeOnly",
        description="Only grants that are active and whose deadline has not passed",
    ),
    page: int = Query(default=1, description="Page number; values below 1 are treated as 1"),
    page_size: int = Query(
        default=10,
        alias="pageSize",
        description="Items per page; values outside 1-100 fall back to 10",
    ),
) -> PagedResult[GrantResponse]:
    """
    Get a paginated list of grants, newest first.

    Filters combine with AND. By default only active grants with a future
    deadline are shown.
    """
    result = await GrantService(db, ctx).list_grants(
        category_id=category_id,
        country=country,
        active_only=active_only,
        page=page,
        page_size=page_size,
    )
    return PagedResult[GrantResponse].from_page(
        result,
        [GrantResponse.model_validate(g) for g in result.items],
    )


@router.get(
    "/{grant_id}",
    response_model=GrantResponse,
    summary="Get grant details",
    description="Get detailed information about a specific grant.",
    responses={404: {"model": ErrorResponse}},
)
async def get_grant(
    grant_id: UUID,
    db: AsyncSessionDep,
    ctx: RequestContextDep,
) -> GrantResponse:
    grant = await GrantService(db, ctx).get_grant(grant_id)
    return GrantResponse.model_validate(grant)


@router.post(
    "",
    response_model=GrantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create grant",
    description="Create a grant and associate it with existing categories.",
    responses={400: {"model": ErrorResponse}},
)
async def create_grant(
    payload: GrantCreate,
    response: Response,
    db: AsyncSessionDep,
    ctx: RequestContextDep,
) -> GrantResponse:
    """
    Every id in `categoryIds` must exist; otherwise nothing is created.
    """
    grant = await GrantService(db, ctx).create_grant(payload)
    response.headers["Location"] = f"{router.prefix}/{grant.id}"
    return GrantResponse.model_validate(grant)


@router.put(
    "/{grant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update grant",
    description="Replace a grant's fields and its full set of categories.",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_grant(
    grant_id: UUID,
    payload: GrantUpdate,
    db: AsyncSessionDep,
    ctx: RequestContextDep,
) -> Response:
    """
    `categoryIds` replaces the current associations; an empty list clears them.
    """
    await GrantService(db, ctx).update_grant(grant_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{grant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete grant",
    description="Delete a grant and its category associations.",
    responses={404: {"model": ErrorResponse}},
)
async def delete_grant(
    grant_id: UUID,
    db: AsyncSessionDep,
    ctx: RequestContextDep,
) -> Response:
    await GrantService(db, ctx).delete_grant(grant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
