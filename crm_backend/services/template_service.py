"""
services/template_service.py
----------------------------
CMS page templates. At most one template per (company, template type) is
the default; marking a template as default clears the flag on the others.
"""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.models.template import Template
from crm_backend.schemas.cms import TemplateCreate, TemplateUpdate
from crm_backend.services.crud import ScopedRepository, resolve_company, slugify
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

templates = ScopedRepository(
    "template", search_fields=("name", "description"), default_sort="name:asc"
)
_media = ScopedRepository("media")

_SLUG_CONFLICT = "A template with this slug already exists"


async def _clear_default(
    db: AsyncSession, company_id: str, template_type: str, keep_id: Optional[str] = None
) -> None:
    stmt = update(Template).where(
        Template.company_id == company_id,
        Template.template_type == template_type,
        Template.is_default.is_(True),
    )
    if keep_id is not None:
        stmt = stmt.where(Template.id != keep_id)
    await db.execute(stmt.values(is_default=False).execution_options(synchronize_session="fetch"))


class TemplateService:

    @staticmethod
    async def create_template(db: AsyncSession, caller: Caller, data: TemplateCreate) -> Template:
        company_id = await resolve_company(db, caller, data.company_id)
        values = data.model_dump()
        values.update(
            company_id=company_id,
            slug=slugify(data.slug or data.name),
            created_by=caller.id,
        )
        if data.preview_image_id:
            await _media.get_in_company(db, caller, data.preview_image_id, company_id)
        if data.is_default:
            await _clear_default(db, company_id, values["template_type"])
        return await templates.create(db, values, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def list_templates(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        template_type: Optional[str] = None,
        is_default: Optional[bool] = None,
        personal: bool = False,
    ) -> Page:
        return await templates.list(
            db,
            caller,
            spec,
            personal=personal,
            filters={"template_type": template_type, "is_default": is_default},
        )

    @staticmethod
    async def get_template(db: AsyncSession, caller: Caller, template_id: str) -> Template:
        return await templates.get(db, caller, template_id)

    @staticmethod
    async def update_template(
        db: AsyncSession, caller: Caller, template_id: str, data: TemplateUpdate
    ) -> Template:
        template = await templates.get(db, caller, template_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug"):
            changes["slug"] = slugify(changes["slug"])
        else:
            changes.pop("slug", None)
        if changes.get("preview_image_id"):
            await _media.get_in_company(db, caller, changes["preview_image_id"], template.company_id)
        is_default = changes.get("is_default", template.is_default)
        if is_default and ("is_default" in changes or "template_type" in changes):
            template_type = changes.get("template_type") or template.template_type
            await _clear_default(db, template.company_id, template_type, keep_id=template.id)
        return await templates.update(db, template, changes, conflict=_SLUG_CONFLICT)

    @staticmethod
    async def delete_template(db: AsyncSession, caller: Caller, template_id: str) -> None:
        template = await templates.get(db, caller, template_id, Operation.delete)
        await templates.delete(db, template)
