"""
Pydantic request/response schemas for the Vacancies API.
"""
from vacancies.schemas.categories import (
    CategoryCreate,
    CategoryDetail,
    CategoryGrantSummary,
    CategoryResponse,
    CategoryUpdate,
)
from vacancies.schemas.common import ApiModel, ErrorResponse, FieldErrorResponse, PagedResult
from vacancies.schemas.grants import GrantCreate, GrantResponse, GrantUpdate

__all__ = [
    "ApiModel",
    "CategoryCreate",
    "CategoryDetail",
    "CategoryGrantSummary",
    "CategoryResponse",
    "CategoryUpdate",
    "ErrorResponse",
    "FieldErrorResponse",
    "GrantCreate",
    "GrantResponse",
    "GrantUpdate",
    "PagedResult",
]
