"""
services/label_service.py
-------------------------
Flat category lists used to group blogs and courses. Both kinds behave the
same, so one service class serves both, configured with its entity name.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.db.base import Base
from crm_backend.schemas.blog import CategoryLabelCreate, CategoryLabelUpdate
from crm_backend.services.crud import ScopedRepository, resolve_company, slugify
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec


class LabelService:

    def __init__(self, entity: str) -> None:
        self.repository = ScopedRepository(
            entity, search_fields=("name", "description"), default_sort="name:asc"
        )
        self.conflict = f"{self.repository.label} with this slug already exists"

    async def create(self, db: AsyncSession, caller: Caller, data: CategoryLabelCreate) -> Base:
        values = data.model_dump()
        values["company_id"] = await resolve_company(db, caller, data.company_id)
        values["slug"] = slugify(data.slug or data.name)
        return await self.repository.create(db, values, conflict=self.conflict)

    async def list(self, db: AsyncSession, caller: Caller, spec: QuerySpec) -> Page:
        return await self.repository.list(db, caller, spec)

    async def get(self, db: AsyncSession, caller: Caller, record_id: str) -> Base:
        return await self.repository.get(db, caller, record_id)

    async def update(
        self, db: AsyncSession, caller: Caller, record_id: str, data: CategoryLabelUpdate
    ) -> Base:
        record = await self.repository.get(db, caller, record_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug"):
            changes["slug"] = slugify(changes["slug"])
        else:
            changes.pop("slug", None)
        return await self.repository.update(db, record, changes, conflict=self.conflict)

    async def delete(self, db: AsyncSession, caller: Caller, record_id: str) -> None:
        record = await self.repository.get(db, caller, record_id, Operation.delete)
        await self.repository.delete(db, record)


blog_categories = LabelService("blog_category")
course_categories = LabelService("course_category")
