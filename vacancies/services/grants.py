"""
Grant Service
Filtered listing, lookup and guarded create/update/delete of grants.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vacancies.core.context import RequestContext
from vacancies.core.exceptions import ConflictError, NotFoundError, UnknownCategoryReferenceError
from vacancies.models import Grant, as_utc, utcnow
from vacancies.schemas.grants import GrantCreate, GrantUpdate
from vacancies.services.guards import commit_guarded, resolve_categories
from vacancies.services.pagination import Page, normalize_page_request, paginate
from vacancies.services.query import grant_query
from vacancies.services.validation import raise_for_errors, validate_grant

logger = logging.getLogger(__name__)


class GrantService:
    """
    Service for grant CRUD.

    Category associations are replaced wholesale on update: the resolved set
    supersedes whatever was attached before.
    """

    def __init__(self, db: AsyncSession, ctx: RequestContext):
        self.db = db
        self.ctx = ctx
        self.log = ctx.logger(logger)

    async def list_grants(
        self,
        category_id: Optional[UUID] = None,
        country: Optional[str] = None,
        active_only: bool = True,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[Grant]:
        request = normalize_page_request(page, page_size)
        self.log.info(
            f"Fetching grants with filters - category_id: {category_id}, country: {country!r}, "
            f"active_only: {active_only}, page: {request.page}, page_size: {request.page_size}"
        )

        query = grant_query(
            category_id=category_id,
            country=country,
            active_only=active_only,
            now=utcnow(),
        )
        result = await paginate(self.db, query, request)

        self.log.info(f"Fetched {len(result.items)} grants out of {result.total_count} total")
        return result

    async def get_grant(self, grant_id: UUID) -> Grant:
        result = await self.db.execute(select(Grant).where(Grant.id == grant_id))
        grant = result.scalar_one_or_none()

        if grant is None:
            self.log.warning(f"Grant with ID {grant_id} not found")
            raise NotFoundError("Grant", grant_id)
        return grant

    async def _resolve(self, category_ids: list[UUID]):
        try:
            return await resolve_categories(self.db, category_ids)
        except UnknownCategoryReferenceError as e:
            self.log.warning(f"Unknown category IDs referenced: {', '.join(e.missing_ids)}")
            raise

    async def create_grant(self, payload: GrantCreate) -> Grant:
        raise_for_errors(validate_grant(payload, now=utcnow(), creating=True))
        self.log.info(f"Creating new grant with title: {payload.title.strip()!r}")

        categories = await self._resolve(payload.category_ids)

        grant = Grant(
            title=payload.title.strip(),
            description=payload.description.strip(),
            country=payload.country.strip(),
            deadline=as_utc(payload.deadline),
            requirements=payload.requirements,
            funding_amount=payload.funding_amount,
            is_active=payload.is_active,
            created_at=utcnow(),
            categories=categories,
        )
        self.db.add(grant)
        # A category removed between resolve and commit surfaces as an FK violation.
        category_ids = [c.id for c in categories]
        await commit_guarded(self.db, "Grant", lambda: UnknownCategoryReferenceError(category_ids))

        self.log.info(f"Created grant with ID: {grant.id}")
        return grant

    async def update_grant(self, grant_id: UUID, payload: GrantUpdate) -> Grant:
        raise_for_errors(validate_grant(payload, now=utcnow(), creating=False))
        self.log.info(f"Updating grant with ID: {grant_id}")

        grant = await self.get_grant(grant_id)

        if payload.version is not None and payload.version != grant.version:
            self.log.warning(
                f"Stale update for grant {grant_id}: "
                f"client version {payload.version}, stored {grant.version}"
            )
            raise ConflictError("Grant")

        categories = await self._resolve(payload.category_ids)

        grant.title = payload.title.strip()
        grant.description = payload.description.strip()
        grant.country = payload.country.strip()
        grant.deadline = as_utc(payload.deadline)
        grant.requirements = payload.requirements
        grant.funding_amount = payload.funding_amount
        if payload.is_active is not None:
            grant.is_active = payload.is_active

        now = utcnow()
        if grant.updated_at is not None and as_utc(grant.updated_at) > now:
            # clock went backwards; never move updated_at back
            now = as_utc(grant.updated_at)
        grant.updated_at = now

        grant.categories = categories
        await self._commit(grant_id, [c.id for c in categories])

        self.log.info(f"Updated grant with ID: {grant_id}")
        return grant

    async def delete_grant(self, grant_id: UUID) -> None:
        self.log.info(f"Deleting grant with ID: {grant_id}")

        grant = await self.get_grant(grant_id)
        await self.db.delete(grant)
        await self._commit(grant_id)

        self.log.info(f"Deleted grant with ID: {grant_id}")

    async def _commit(self, grant_id: UUID, category_ids: Optional[list[UUID]] = None) -> None:
        """
        Commit a write to an existing grant.

        A lost race is a 409, or a 404 if the row is gone. An FK violation means
        one of `category_ids` was deleted after it was resolved.
        """
        try:
            await commit_guarded(
                self.db,
                "Grant",
                lambda: UnknownCategoryReferenceError(category_ids or []),
            )
        except ConflictError:
            result = await self.db.execute(select(Grant.id).where(Grant.id == grant_id))
            if result.scalar_one_or_none() is None:
                self.log.warning(f"Grant with ID {grant_id} was deleted concurrently")
                raise NotFoundError("Grant", grant_id)
            self.log.warning(f"Concurrency conflict while writing grant with ID: {grant_id}")
            raise
