"""
services/content_service.py
---------------------------
Business logic for CMS content.

  - slug defaults to the slugified title and is unique per company
  - category / template / featured image must belong to the content's company
  - password_protected content stores a bcrypt hash of its password; the hash
    is dropped when the content stops being password protected
  - deleting content releases its tags (their usage counters go down)
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.security import hash_password
from crm_backend.models.content import Content, ContentTag, ContentVisibility
from crm_backend.models.tag import Tag
from crm_backend.schemas.cms import ContentCreate, ContentUpdate
from crm_backend.services.crud import ScopedRepository, resolve_company, slugify
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

contents = ScopedRepository(
    "content",
    search_fields=("title", "body", "excerpt"),
    default_sort="created_at:desc",
)
_categories = ScopedRepository("category")
_templates = ScopedRepository("template")
_media = ScopedRepository("media")

_SLUG_CONFLICT = "Content with this slug already exists"


async def _check_references(
    db: AsyncSession, caller: Caller, values: dict, company_id: str
) -> None:
    for field, repository in (
        ("category_id", _categories),
        ("template_id", _templates),
        ("featured_image_id", _media),
    ):
        if values.get(field):
            await repository.get_in_company(db, caller, values[field], company_id)


def _apply_password(values: dict, visibility: str) -> None:
    password = values.pop("password", None)
    if visibility != ContentVisibility.password_protected.value:
        values["password_hash"] = None
    elif password:
        values["password_hash"] = hash_password(password)


class ContentService:

    @staticmethod
    async def create_content(db: AsyncSession, caller: Caller, data: ContentCreate) -> Content:
        company_id = await resolve_company(db, caller, data.company_id)
        values = data.model_dump()
        values.update(
            company_id=company_id,
            slug=slugify(data.slug or data.title),
            author_id=caller.id,
        )
        await _check_references(db, caller, values, company_id)
        _apply_password(values, values["visibility"])
        return await contents.create(db, values, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def list_contents(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        *,
        status: Optional[str] = None,
        visibility: Optional[str] = None,
        category_id: Optional[str] = None,
        template_id: Optional[str] = None,
        author_id: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        publish_from: Optional[datetime] = None,
        publish_to: Optional[datetime] = None,
        personal: bool = False,
    ) -> Page:
        where = []
        if created_from is not None:
            where.append(Content.created_at >= created_from)
        if created_to is not None:
            where.append(Content.created_at <= created_to)
        if publish_from is not None:
            where.append(Content.publish_date >= publish_from)
        if publish_to is not None:
            where.append(Content.publish_date <= publish_to)
        return await contents.list(
            db,
            caller,
            spec,
            personal=personal,
            filters={
                "status": status,
                "visibility": visibility,
                "category_id": category_id,
                "template_id": template_id,
                "author_id": author_id,
            },
            where=where,
        )

    @staticmethod
    async def get_content(db: AsyncSession, caller: Caller, content_id: str) -> Content:
        return await contents.get(db, caller, content_id)

    @staticmethod
    async def update_content(
        db: AsyncSession, caller: Caller, content_id: str, data: ContentUpdate
    ) -> Content:
        content = await contents.get(db, caller, content_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug"):
            changes["slug"] = slugify(changes["slug"])
        else:
            changes.pop("slug", None)
        await _check_references(db, caller, changes, content.company_id)
        if "visibility" in changes or "password" in changes:
            _apply_password(changes, changes.get("visibility") or content.visibility)
        return await contents.update(db, content, changes, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def delete_content(db: AsyncSession, caller: Caller, content_id: str) -> None:
        content = await contents.get(db, caller, content_id, Operation.delete)
        tag_ids = select(ContentTag.tag_id).where(ContentTag.content_id == content.id)
        result = await db.execute(select(Tag).where(Tag.id.in_(tag_ids)))
        for tag in result.scalars().all():
            tag.count = max(tag.count - 1, 0)
        await contents.delete(db, content)
