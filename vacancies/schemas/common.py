"""
Common schemas for standardized API responses.
Provides the paged envelope shared by every list endpoint and the error body.
"""
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PagedResult(ApiModel, Generic[T]):
    """
    Standard paginated response format for all list endpoints.

    {
        "items": [...],
        "totalCount": int,
        "page": int,
        "pageSize": int,
        "totalPages": int,
        "hasNextPage": bool,
        "hasPreviousPage": bool
    }
    """

    items: List[T] = Field(..., description="Items on the current page")
    total_count: int = Field(..., description="Total number of matching items")
    page: int = Field(..., description="Current page number (1-based)")
    page_size: int = Field(..., description="Number of items per page")
    total_pages: int = Field(..., description="Total number of pages (0 when nothing matches)")
    has_next_page: bool = Field(..., description="Whether a next page exists")
    has_previous_page: bool = Field(..., description="Whether a previous page exists")

    @classmethod
    def from_page(cls, page: Any, items: List[T]) -> "PagedResult[T]":
        """Build the envelope from a `Page` and its already-mapped items."""
        return cls(
            items=items,
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
            has_next_page=page.has_next_page,
            has_previous_page=page.has_previous_page,
        )


class FieldErrorResponse(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body returned for every error status."""

    error: bool = True
    code: str
    message: str
    status_code: int
    request_id: Optional[str] = None
    errors: Optional[List[FieldErrorResponse]] = None


__all__ = [
    "ApiModel",
    "ErrorResponse",
    "FieldErrorResponse",
    "PagedResult",
]
