"""
Pagination assembler.

Turns an ordered, filtered SELECT plus a requested page/page size into a
bounded page with navigation metadata. Out-of-range input is clamped, never
rejected, and a page past the end is simply empty.
"""
from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vacancies.core.config import settings

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def normalize_page_request(
    page: int,
    page_size: int,
    default_page_size: int = settings.default_page_size,
    max_page_size: int = settings.max_page_size,
) -> PageRequest:
    """
    Clamp raw paging input.

    page < 1 becomes 1; a page size outside [1, max_page_size] falls back to
    the default rather than being capped.
    """
    if page < 1:
        page = 1
    if page_size < 1 or page_size > max_page_size:
        page_size = default_page_size
    return PageRequest(page=page, page_size=page_size)


def count_pages(total_count: int, page_size: int) -> int:
    """ceil(total_count / page_size); 0 when nothing matched."""
    if total_count <= 0:
        return 0
    return -(-total_count // page_size)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_pages", count_pages(self.total_count, self.page_size))

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1


async def paginate(db: AsyncSession, query: Select[Any], request: PageRequest) -> Page[Any]:
    """
    Count the matches of `query`, then fetch the requested slice.

    `query` must already carry its ORDER BY; the count runs over the same
    statement with ordering stripped. No row query is issued when the offset
    is past the end.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    items: Sequence[Any] = []
    if request.offset < total:
        result = await db.execute(query.offset(request.offset).limit(request.page_size))
        items = result.scalars().all()

    return Page(
        items=items,
        total_count=total,
        page=request.page,
        page_size=request.page_size,
    )
