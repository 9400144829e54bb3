"""
services/tag_service.py
-----------------------
Business logic for CMS tags and their links to content.

``Tag.count`` is the number of content items carrying the tag. Attaching
and detaching change the link row and the counter on the same session, so
they are committed together.
"""

from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.errors import NotFoundError
from crm_backend.core.logging import get_logger
from crm_backend.models.content import ContentTag
from crm_backend.models.tag import Tag
from crm_backend.schemas.cms import TagCreate, TagUpdate
from crm_backend.services.content_service import contents
from crm_backend.services.crud import ScopedRepository, resolve_company, slugify
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

logger = get_logger(__name__)

tags = ScopedRepository("tag", search_fields=("name", "description"), default_sort="name:asc")

_SLUG_CONFLICT = "A tag with this slug already exists"


async def _find_link(db: AsyncSession, content_id: str, tag_id: str) -> ContentTag | None:
    result = await db.execute(
        select(ContentTag).where(ContentTag.content_id == content_id, ContentTag.tag_id == tag_id)
    )
    return result.scalar_one_or_none()


class TagService:

    @staticmethod
    async def create_tag(db: AsyncSession, caller: Caller, data: TagCreate) -> Tag:
        values = data.model_dump()
        values["company_id"] = await resolve_company(db, caller, data.company_id)
        values["slug"] = slugify(data.slug or data.name)
        return await tags.create(db, values, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def list_tags(db: AsyncSession, caller: Caller, spec: QuerySpec) -> Page:
        return await tags.list(db, caller, spec)

    @staticmethod
    async def list_by_usage(
        db: AsyncSession, caller: Caller, spec: QuerySpec, min_count: int
    ) -> Page:
        """Tags used at least ``min_count`` times, most used first."""
        if spec.sort is None:
            spec = replace(spec, sort="count:desc")
        return await tags.list(db, caller, spec, where=[Tag.count >= min_count])

    @staticmethod
    async def list_for_content(
        db: AsyncSession, caller: Caller, content_id: str, spec: QuerySpec
    ) -> Page:
        await contents.get(db, caller, content_id)
        linked = select(ContentTag.tag_id).where(ContentTag.content_id == content_id)
        return await tags.list(db, caller, spec, where=[Tag.id.in_(linked)])

    @staticmethod
    async def get_tag(db: AsyncSession, caller: Caller, tag_id: str) -> Tag:
        return await tags.get(db, caller, tag_id)

    @staticmethod
    async def update_tag(
        db: AsyncSession, caller: Caller, tag_id: str, data: TagUpdate
    ) -> Tag:
        tag = await tags.get(db, caller, tag_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug"):
            changes["slug"] = slugify(changes["slug"])
        else:
            changes.pop("slug", None)
        return await tags.update(db, tag, changes, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def delete_tag(db: AsyncSession, caller: Caller, tag_id: str) -> None:
        tag = await tags.get(db, caller, tag_id, Operation.delete)
        await tags.delete(db, tag)

    # ── Content links ─────────────────────────────────────────────────────────

    @staticmethod
    async def attach(db: AsyncSession, caller: Caller, content_id: str, tag_id: str) -> Tag:
        content = await contents.get(db, caller, content_id, Operation.write)
        tag = await tags.get_in_company(db, caller, tag_id, content.company_id)
        if await _find_link(db, content_id, tag_id) is not None:
            raise ValueError("Tag is already attached to this content")

        db.add(ContentTag(content_id=content_id, tag_id=tag_id))
        tag.count = Tag.count + 1
        await db.flush()
        await db.refresh(tag)
        logger.info("Tag attached", content_id=content_id, tag_id=tag_id, count=tag.count)
        return tag

    @staticmethod
    async def detach(db: AsyncSession, caller: Caller, content_id: str, tag_id: str) -> Tag:
        await contents.get(db, caller, content_id, Operation.write)
        link = await _find_link(db, content_id, tag_id)
        if link is None:
            raise NotFoundError("tag", tag_id)

        tag = await db.get(Tag, tag_id)
        await db.delete(link)
        if tag.count > 0:
            tag.count = Tag.count - 1
        await db.flush()
        await db.refresh(tag)
        logger.info("Tag detached", content_id=content_id, tag_id=tag_id, count=tag.count)
        return tag
