"""Initial schema for the grants catalog

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates all tables for the Vacancies catalog:
- categories: Grant categories, names unique regardless of case
- grants: Grant / vacancy postings
- grant_categories: Grant <-> Category association
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# Revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create initial database schema."""

    # ==========================================================================
    # Create categories table
    # ==========================================================================
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_categories_name", "categories", ["name"])
    op.create_index(
        "uq_categories_name_lower",
        "categories",
        [sa.text("lower(name)")],
        unique=True,
    )

    # ==========================================================================
    # Create grants table
    # ==========================================================================
    op.create_table(
        "grants",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("deadline", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("funding_amount", sa.String(100), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_grants_country", "grants", ["country"])
    op.create_index("ix_grants_created_at", "grants", ["created_at"])
    op.create_index("ix_grants_deadline", "grants", ["deadline"])

    # ==========================================================================
    # Create grant_categories junction table
    # ==========================================================================
    op.create_table(
        "grant_categories",
        sa.Column(
            "category_id",
            sa.Uuid(),
            sa.ForeignKey("categories.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "grant_id",
            sa.Uuid(),
            sa.ForeignKey("grants.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_grant_categories_grant_id", "grant_categories", ["grant_id"])


def downgrade() -> None:
    """Drop all tables."""

    # Drop tables in reverse order of creation (due to foreign keys)
    op.drop_table("grant_categories")
    op.drop_table("grants")
    op.drop_table("categories")
