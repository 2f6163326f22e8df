"""
Vacancies Database Models
SQLAlchemy ORM models for the grants/vacancies catalog.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    TIMESTAMP,
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

CATEGORY_NAME_MAX_LENGTH = 100
CATEGORY_DESCRIPTION_MAX_LENGTH = 2000
GRANT_TITLE_MAX_LENGTH = 200
GRANT_DESCRIPTION_MAX_LENGTH = 5000
GRANT_COUNTRY_MAX_LENGTH = 100
GRANT_REQUIREMENTS_MAX_LENGTH = 5000
GRANT_FUNDING_AMOUNT_MAX_LENGTH = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize to aware UTC; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


# Junction table for the Grant <-> Category association.
grant_categories = Table(
    "grant_categories",
    Base.metadata,
    Column(
        "category_id",
        Uuid,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "grant_id",
        Uuid,
        ForeignKey("grants.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Index("ix_grant_categories_grant_id", "grant_id"),
)


class Category(Base):
    """
    Grant category (e.g. "Education", "Research").

    Names are unique regardless of case; the functional unique index below is
    the final authority when two writers race on the same name. Associated
    grants are reached through `grant_categories`, not an in-memory collection.
    """

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="Unique identifier for the category",
    )
    name: Mapped[str] = mapped_column(
        String(CATEGORY_NAME_MAX_LENGTH),
        nullable=False,
        doc="Display name, unique case-insensitively",
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        doc="Free-text description",
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Optimistic concurrency token",
    )

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (Index("ix_categories_name", "name"),)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


Index("uq_categories_name_lower", func.lower(Category.name), unique=True)


class Grant(Base):
    """
    Grant / vacancy posting.

    A grant is "active" when `is_active` is set and its deadline has not
    passed. `updated_at` stays null until the first update.
    """

    __tablename__ = "grants"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="Unique identifier for the grant",
    )
    title: Mapped[str] = mapped_column(
        String(GRANT_TITLE_MAX_LENGTH),
        nullable=False,
        doc="Grant title",
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Full grant description",
    )
    country: Mapped[str] = mapped_column(
        String(GRANT_COUNTRY_MAX_LENGTH),
        nullable=False,
        doc="Country the grant is offered in",
    )
    deadline: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        doc="Application deadline (UTC)",
    )
    requirements: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Eligibility / application requirements",
    )
    funding_amount: Mapped[Optional[str]] = mapped_column(
        String(GRANT_FUNDING_AMOUNT_MAX_LENGTH),
        nullable=True,
        doc="Funding amount as free text (e.g. '10 000 EUR')",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        doc="Record creation timestamp",
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=True,
        doc="Last update timestamp, null until first update",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        doc="Manually withdrawn grants have this cleared",
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Optimistic concurrency token",
    )

    # One-directional; category-side lookups go through the junction table.
    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary=grant_categories,
        lazy="selectin",
        order_by=Category.name,
    )

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("ix_grants_country", "country"),
        Index("ix_grants_created_at", "created_at"),
        Index("ix_grants_deadline", "deadline"),
    )

    def __repr__(self) -> str:
        return f"<Grant(id={self.id}, title='{self.title[:50]}')>"
