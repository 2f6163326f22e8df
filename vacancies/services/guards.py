"""
Integrity checks run before category and grant writes.

The checks fail fast with a descriptive error, but the store has the last
word: the unique index on lower(name) and the row version counters are what
actually stop concurrent writers, and `commit_guarded` translates their
failures into the same errors.
"""
from typing import Callable, Iterable, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from vacancies.core.exceptions import (
    ApiError,
    ConflictError,
    DuplicateNameError,
    HasDependentsError,
    UnavailableError,
    UnknownCategoryReferenceError,
)
from vacancies.models import Category, grant_categories


async def ensure_category_name_available(
    db: AsyncSession,
    name: str,
    exclude_id: Optional[UUID] = None,
) -> None:
    """Reject `name` if another category already uses it, ignoring case."""
    query = select(Category.id).where(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)

    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise DuplicateNameError(name)


async def count_category_grants(db: AsyncSession, category_id: UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(grant_categories).where(grant_categories.c.category_id == category_id)
    )
    return result.scalar() or 0


async def ensure_category_has_no_grants(db: AsyncSession, category_id: UUID) -> None:
    count = await count_category_grants(db, category_id)
    if count:
        raise HasDependentsError(category_id, count)


async def resolve_categories(db: AsyncSession, category_ids: Iterable[UUID]) -> list[Category]:
    """
    Load every referenced category or fail as a whole.

    Duplicate ids are collapsed. The rows are read with a shared lock (where
    the store supports it) so a concurrent category delete cannot slip in
    between this check and the association insert.
    """
    wanted = set(category_ids)
    if not wanted:
        return []

    result = await db.execute(
        select(Category)
        .where(Category.id.in_(wanted))
        .order_by(Category.name.asc(), Category.id.asc())
        .with_for_update(read=True)
    )
    categories = list(result.scalars().all())

    if len(categories) < len(wanted):
        raise UnknownCategoryReferenceError(wanted - {c.id for c in categories})

    return categories


async def commit_guarded(
    db: AsyncSession,
    resource: str,
    on_integrity_error: Optional[Callable[[], ApiError]] = None,
) -> None:
    """
    Commit the unit of work, mapping store-side rejections to API errors.

    - StaleDataError (version counter mismatch) -> ConflictError
    - IntegrityError -> `on_integrity_error()` when given, else re-raised
    - OperationalError (connection lost, timeout) -> UnavailableError
    The session is rolled back before raising.
    """
    try:
        await db.commit()
    except StaleDataError as e:
        await db.rollback()
        raise ConflictError(resource) from e
    except IntegrityError as e:
        await db.rollback()
        if on_integrity_error is None:
            raise
        raise on_integrity_error() from e
    except OperationalError as e:
        await db.rollback()
        raise UnavailableError() from e
