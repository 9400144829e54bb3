"""
services/category_service.py
----------------------------
Hierarchical CMS categories. A parent must live in the same company and a
category can never be its own ancestor.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.errors import InvalidQueryError
from crm_backend.models.category import Category
from crm_backend.schemas.cms import CategoryCreate, CategoryUpdate
from crm_backend.services.crud import ScopedRepository, resolve_company, slugify
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

categories = ScopedRepository(
    "category", search_fields=("name", "description"), default_sort="sort_order:asc"
)
_media = ScopedRepository("media")

_SLUG_CONFLICT = "A category with this slug already exists"


async def _check_parent(
    db: AsyncSession,
    caller: Caller,
    category_id: Optional[str],
    parent_id: str,
    company_id: str,
) -> None:
    parent = await categories.get_in_company(db, caller, parent_id, company_id)
    while parent is not None:
        if parent.id == category_id:
            raise InvalidQueryError("A category cannot be nested under itself")
        parent = await db.get(Category, parent.parent_id) if parent.parent_id else None


class CategoryService:

    @staticmethod
    async def create_category(db: AsyncSession, caller: Caller, data: CategoryCreate) -> Category:
        company_id = await resolve_company(db, caller, data.company_id)
        values = data.model_dump()
        values.update(company_id=company_id, slug=slugify(data.slug or data.name))
        if data.parent_id:
            await _check_parent(db, caller, None, data.parent_id, company_id)
        if data.featured_image_id:
            await _media.get_in_company(db, caller, data.featured_image_id, company_id)
        return await categories.create(db, values, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def list_categories(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        parent_id: Optional[str] = None,
        root_only: bool = False,
    ) -> Page:
        where = [Category.parent_id.is_(None)] if root_only else []
        return await categories.list(
            db, caller, spec, filters={"parent_id": parent_id}, where=where
        )

    @staticmethod
    async def get_category(db: AsyncSession, caller: Caller, category_id: str) -> Category:
        return await categories.get(db, caller, category_id)

    @staticmethod
    async def update_category(
        db: AsyncSession, caller: Caller, category_id: str, data: CategoryUpdate
    ) -> Category:
        category = await categories.get(db, caller, category_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug"):
            changes["slug"] = slugify(changes["slug"])
        else:
            changes.pop("slug", None)
        if changes.get("parent_id"):
            await _check_parent(db, caller, category.id, changes["parent_id"], category.company_id)
        if changes.get("featured_image_id"):
            await _media.get_in_company(db, caller, changes["featured_image_id"], category.company_id)
        return await categories.update(db, category, changes, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def delete_category(db: AsyncSession, caller: Caller, category_id: str) -> None:
        """Children are kept and moved to the top level."""
        category = await categories.get(db, caller, category_id, Operation.delete)
        await categories.delete(db, category)
