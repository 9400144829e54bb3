"""
services/publication_service.py
-------------------------------
Blogs and courses: company-managed publications grouped by category labels
and readable without authentication through the public API.

Both share the same shape (slug, audience, many-to-many categories), so a
single PublicationService is configured per kind.

Public reads:
  - ``category`` matches a category id or slug
  - ``audience`` matches that audience or publications aimed at everyone
"""

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from crm_backend.core.errors import NotFoundError
from crm_backend.db.base import Base
from crm_backend.models.blog import Audience
from crm_backend.services.crud import ScopedRepository, resolve_company
from crm_backend.services.label_service import LabelService, blog_categories, course_categories
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec, loader_options, paginate

_RELATIONS = ("categories",)


class PublicationService:

    def __init__(
        self,
        entity: str,
        labels: LabelService,
        search_fields: tuple[str, ...],
    ) -> None:
        self.repository = ScopedRepository(
            entity,
            search_fields=search_fields,
            default_sort="created_at:desc",
            populate=_RELATIONS,
        )
        self.model = self.repository.model
        self.labels = labels
        self.conflict = f"{self.repository.label} with this slug already exists"

    async def _load_categories(
        self, db: AsyncSession, caller: Caller, category_ids: list[str], company_id: str
    ) -> list[Base]:
        return [
            await self.labels.repository.get_in_company(db, caller, category_id, company_id)
            for category_id in dict.fromkeys(category_ids)
        ]

    def _category_clause(self, category: str) -> ColumnElement:
        label = self.labels.repository.model
        return self.model.categories.any(or_(label.id == category, label.slug == category))

    def _audience_clause(self, audience: str) -> ColumnElement:
        return self.model.audience.in_([audience, Audience.all.value])

    # ── Managed (tenant-scoped) ───────────────────────────────────────────────

    async def create(self, db: AsyncSession, caller: Caller, data) -> Base:
        company_id = await resolve_company(db, caller, data.company_id)
        values = data.model_dump(exclude={"category_ids"})
        values["company_id"] = company_id
        values["categories"] = await self._load_categories(
            db, caller, data.category_ids, company_id
        )
        return await self.repository.create(
            db, values, conflict=self.conflict, populate=_RELATIONS
        )

    async def list(
        self,
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        audience: Optional[str] = None,
        category: Optional[str] = None,
        filters: Optional[dict] = None,
    ) -> Page:
        where = []
        if category:
            where.append(self._category_clause(category))
        return await self.repository.list(
            db,
            caller,
            spec,
            filters={"audience": audience, **(filters or {})},
            where=where,
        )

    async def get(self, db: AsyncSession, caller: Caller, record_id: str) -> Base:
        return await self.repository.get(db, caller, record_id, populate=_RELATIONS)

    async def update(self, db: AsyncSession, caller: Caller, record_id: str, data) -> Base:
        # Collections are loaded before being replaced
        record = await self.repository.get(
            db, caller, record_id, Operation.write, populate=_RELATIONS
        )
        changes = data.model_dump(exclude_unset=True)
        category_ids = changes.pop("category_ids", None)
        if category_ids is not None:
            changes["categories"] = await self._load_categories(
                db, caller, category_ids, record.company_id
            )
        return await self.repository.update(
            db, record, changes, conflict=self.conflict, populate=_RELATIONS
        )

    async def delete(self, db: AsyncSession, caller: Caller, record_id: str) -> None:
        record = await self.repository.get(
            db, caller, record_id, Operation.delete, populate=_RELATIONS
        )
        await self.repository.delete(db, record)

    # ── Public ────────────────────────────────────────────────────────────────

    async def list_public(
        self,
        db: AsyncSession,
        spec: QuerySpec,
        audience: Optional[str] = None,
        category: Optional[str] = None,
        company_id: Optional[str] = None,
    ) -> Page:
        where = []
        if audience:
            where.append(self._audience_clause(audience))
        if category:
            where.append(self._category_clause(category))
        if company_id:
            where.append(self.model.company_id == company_id)
        return await paginate(
            db,
            self.model,
            where,
            spec,
            search_fields=self.repository.search_fields,
            populate=_RELATIONS,
            default_sort=self.repository.default_sort,
        )

    async def get_public(
        self, db: AsyncSession, slug: str, company_id: Optional[str] = None
    ) -> Base:
        where = [self.model.slug == slug]
        if company_id:
            where.append(self.model.company_id == company_id)
        stmt = (
            select(self.model)
            .where(*where)
            .options(*loader_options(self.model, _RELATIONS))
            .order_by(self.model.created_at.asc(), self.model.id)
            .limit(1)
        )
        result = await db.execute(stmt)
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(self.repository.entity)
        return record


blogs = PublicationService("blog", blog_categories, ("title", "excerpt", "author"))
courses = PublicationService("course", course_categories, ("title", "description", "level"))
