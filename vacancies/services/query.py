"""
Filter/sort composition for category and grant listings.

Builds SELECT statements only; nothing here touches the session. Every
ordering ends with the primary key so that paging through equal sort keys is
deterministic.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Select, and_, func, or_, select

from vacancies.models import Category, Grant, as_utc, grant_categories, utcnow


def _clean(term: Optional[str]) -> Optional[str]:
    if term is None:
        return None
    term = term.strip()
    return term or None


def _icontains(column, term: str):
    # lower() on both sides instead of ILIKE so SQLite and Postgres agree
    return func.lower(column).contains(term.lower(), autoescape=True)


def category_query(search: Optional[str] = None) -> Select:
    """
    Categories whose name or description contains `search` (case-insensitive),
    ordered by name then id.
    """
    query = select(Category)

    term = _clean(search)
    if term:
        query = query.where(
            or_(
                _icontains(Category.name, term),
                _icontains(Category.description, term),
            )
        )

    return query.order_by(Category.name.asc(), Category.id.asc())


def grant_query(
    category_id: Optional[UUID] = None,
    country: Optional[str] = None,
    active_only: bool = True,
    now: Optional[datetime] = None,
) -> Select:
    """
    Grants matching every supplied filter, newest first then by id.

    - category_id: grant is associated with this category
    - country: case-insensitive substring of the country
    - active_only: is_active and deadline strictly after `now`
    """
    query = select(Grant)
    filters = []

    if category_id is not None:
        filters.append(
            Grant.id.in_(
                select(grant_categories.c.grant_id).where(grant_categories.c.category_id == category_id)
            )
        )

    term = _clean(country)
    if term:
        filters.append(_icontains(Grant.country, term))

    if active_only:
        cutoff = as_utc(now) if now is not None else utcnow()
        filters.append(
            and_(
                Grant.is_active.is_(True),
                Grant.deadline > cutoff,
            )
        )

    if filters:
        query = query.where(and_(*filters))

    return query.order_by(Grant.created_at.desc(), Grant.id.asc())


def category_grants_query(category_id: UUID) -> Select:
    """Summary rows of the grants associated with one category."""
    return (
        select(Grant.id, Grant.title, Grant.country, Grant.deadline)
        .join(grant_categories, grant_categories.c.grant_id == Grant.id)
        .where(grant_categories.c.category_id == category_id)
        .order_by(Grant.created_at.desc(), Grant.id.asc())
    )
