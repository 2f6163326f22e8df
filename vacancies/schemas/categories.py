"""
Category schemas for create/update requests and list/detail responses.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from vacancies.schemas.common import ApiModel


class CategoryCreate(ApiModel):
    """Schema for creating a category."""

    name: str = Field(..., description="Category name, unique regardless of case")
    description: Optional[str] = Field(default="", description="Free-text description")


class CategoryUpdate(CategoryCreate):
    """Schema for replacing a category's name and description."""

    version: Optional[int] = Field(
        None,
        description="Version the client last saw; a mismatch is rejected with 409",
    )


class CategoryResponse(ApiModel):
    """Schema for a category in lists and embedded in grants."""

    id: UUID = Field(..., description="Category ID")
    name: str = Field(..., description="Category name")
    description: str = Field(..., description="Category description")
    version: int = Field(..., description="Concurrency token")


class CategoryGrantSummary(ApiModel):
    """Short form of a grant associated with a category."""

    id: UUID
    title: str
    country: str
    deadline: datetime


class CategoryDetail(CategoryResponse):
    """Schema for a single category with its associated grants."""

    grant_count: int = Field(..., description="Number of associated grants")
    grants: list[CategoryGrantSummary] = Field(default_factory=list)
