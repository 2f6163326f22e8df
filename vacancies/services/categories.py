"""
Category Service
Listing, lookup and guarded create/update/delete of categories.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vacancies.core.context import RequestContext
from vacancies.core.exceptions import ConflictError, DuplicateNameError, HasDependentsError, NotFoundError
from vacancies.models import Category
from vacancies.schemas.categories import CategoryCreate, CategoryUpdate
from vacancies.services.guards import (
    commit_guarded,
    ensure_category_has_no_grants,
    ensure_category_name_available,
)
from vacancies.services.pagination import Page, normalize_page_request, paginate
from vacancies.services.query import category_grants_query, category_query
from vacancies.services.validation import raise_for_errors, validate_category

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Service for category CRUD.

    Every write runs its guard checks and its INSERT/UPDATE/DELETE in the
    session's single transaction and commits once at the end.
    """

    def __init__(self, db: AsyncSession, ctx: RequestContext):
        self.db = db
        self.ctx = ctx
        self.log = ctx.logger(logger)

    async def list_categories(
        self,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[Category]:
        request = normalize_page_request(page, page_size)
        self.log.info(
            f"Fetching categories with search: {search!r}, "
            f"page: {request.page}, page_size: {request.page_size}"
        )

        result = await paginate(self.db, category_query(search), request)

        self.log.info(f"Fetched {len(result.items)} categories out of {result.total_count} total")
        return result

    async def get_category(self, category_id: UUID, for_update: bool = False) -> Category:
        query = select(Category).where(Category.id == category_id)
        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        category = result.scalar_one_or_none()

        if category is None:
            self.log.warning(f"Category with ID {category_id} not found")
            raise NotFoundError("Category", category_id)
        return category

    async def get_category_grants(self, category_id: UUID) -> list:
        """Summary rows (id, title, country, deadline) of associated grants."""
        result = await self.db.execute(category_grants_query(category_id))
        return list(result.all())

    async def create_category(self, payload: CategoryCreate) -> Category:
        raise_for_errors(validate_category(payload))
        name = payload.name.strip()
        self.log.info(f"Creating new category with name: {name!r}")

        try:
            await ensure_category_name_available(self.db, name)
        except DuplicateNameError:
            self.log.warning(f"Category with name {name!r} already exists")
            raise

        category = Category(name=name, description=payload.description or "")
        self.db.add(category)
        await commit_guarded(self.db, "Category", lambda: DuplicateNameError(name))

        self.log.info(f"Created category with ID: {category.id}")
        return category

    async def update_category(self, category_id: UUID, payload: CategoryUpdate) -> Category:
        raise_for_errors(validate_category(payload))
        name = payload.name.strip()
        self.log.info(f"Updating category with ID: {category_id}")

        category = await self.get_category(category_id)

        if payload.version is not None and payload.version != category.version:
            self.log.warning(
                f"Stale update for category {category_id}: "
                f"client version {payload.version}, stored {category.version}"
            )
            raise ConflictError("Category")

        try:
            await ensure_category_name_available(self.db, name, exclude_id=category_id)
        except DuplicateNameError:
            self.log.warning(f"Another category with name {name!r} already exists")
            raise

        category.name = name
        category.description = payload.description or ""
        try:
            await commit_guarded(self.db, "Category", lambda: DuplicateNameError(name))
        except ConflictError:
            result = await self.db.execute(select(Category.id).where(Category.id == category_id))
            if result.scalar_one_or_none() is None:
                self.log.warning(f"Category with ID {category_id} was deleted concurrently")
                raise NotFoundError("Category", category_id)
            self.log.warning(f"Concurrency conflict while updating category with ID: {category_id}")
            raise

        self.log.info(f"Updated category with ID: {category_id}")
        return category

    async def delete_category(self, category_id: UUID) -> None:
        self.log.info(f"Deleting category with ID: {category_id}")

        # Row lock holds off grant writes that would attach to this category.
        category = await self.get_category(category_id, for_update=True)

        try:
            await ensure_category_has_no_grants(self.db, category_id)
        except HasDependentsError as e:
            self.log.warning(f"Cannot delete category {category_id}: {e.count} associated grants")
            raise

        await self.db.delete(category)
        await commit_guarded(self.db, "Category")

        self.log.info(f"Deleted category with ID: {category_id}")
