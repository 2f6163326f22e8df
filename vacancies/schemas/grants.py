"""
Grant schemas for create/update requests and responses.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from vacancies.schemas.categories import CategoryResponse
from vacancies.schemas.common import ApiModel


class GrantBase(ApiModel):
    """Fields shared by create and update requests."""

    title: str = Field(..., description="Grant title")
    description: str = Field(..., description="Full description")
    country: str = Field(..., description="Country the grant is offered in")
    deadline: datetime = Field(..., description="Application deadline")
    requirements: Optional[str] = Field(None, description="Application requirements")
    funding_amount: Optional[str] = Field(None, description="Funding amount (free text)")
    category_ids: list[UUID] = Field(
        default_factory=list,
        description="Categories to associate; replaces the current set",
    )


class GrantCreate(GrantBase):
    """Schema for creating a grant."""

    is_active: bool = Field(default=True, description="Whether the grant is open")


class GrantUpdate(GrantBase):
    """Schema for replacing a grant."""

    is_active: Optional[bool] = Field(None, description="Leave unset to keep the current flag")
    version: Optional[int] = Field(
        None,
        description="Version the client last saw; a mismatch is rejected with 409",
    )


class GrantResponse(ApiModel):
    """Schema for a grant in lists and detail responses."""

    id: UUID = Field(..., description="Grant ID")
    title: str
    description: str
    country: str
    deadline: datetime
    requirements: Optional[str] = None
    funding_amount: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    is_active: bool
    version: int
    categories: list[CategoryResponse] = Field(default_factory=list)
