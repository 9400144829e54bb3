"""
tenancy/chain.py
----------------
Declarative tenant chains and the generic walker that follows them.

Every entity type is registered once in ENTITY_SCOPES with the foreign key
that points one level closer to the owning company. Entities carrying
``company_id`` themselves have no parent hop. The table is static, so a
chain can never loop and its depth is fixed per type:

    company / client / user / CMS entities   depth 0
    contact, lead, note                      depth 1   (→ client)
    interaction, lead_status_log             depth 2   (→ lead → client)
    task                                     depth 3   (→ interaction → lead → client)
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.errors import BrokenReferenceError, NotFoundError
from crm_backend.core.logging import get_logger
from crm_backend.db.base import Base
from crm_backend.models import (
    Blog,
    BlogCategory,
    Category,
    Client,
    Company,
    Contact,
    Content,
    Course,
    CourseCategory,
    Interaction,
    Lead,
    LeadStatusLog,
    Media,
    Note,
    Tag,
    Task,
    Template,
    User,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class EntityScope:
    name: str
    model: type
    parent: Optional[str] = None
    parent_field: Optional[str] = None
    tenant_field: str = "company_id"
    owner_field: Optional[str] = None

    @property
    def is_direct(self) -> bool:
        return self.parent is None

    @property
    def filter_field(self) -> str:
        """Column that an explicit parent id narrows on."""
        return self.parent_field or self.tenant_field

    def column(self, field: str) -> Any:
        return getattr(self.model, field)


def _direct(name: str, model: type, **kwargs) -> EntityScope:
    return EntityScope(name=name, model=model, **kwargs)


def _child(name: str, model: type, parent: str, parent_field: str, **kwargs) -> EntityScope:
    return EntityScope(name=name, model=model, parent=parent, parent_field=parent_field, **kwargs)


ENTITY_SCOPES: dict[str, EntityScope] = {
    scope.name: scope
    for scope in (
        _direct("company", Company, tenant_field="id"),
        _direct("user", User),
        _direct("client", Client),
        _child("contact", Contact, "client", "client_id"),
        _child("lead", Lead, "client", "client_id", owner_field="user_id"),
        _child("note", Note, "client", "client_id"),
        _child("interaction", Interaction, "lead", "lead_id"),
        _child("lead_status_log", LeadStatusLog, "lead", "lead_id"),
        _child("task", Task, "interaction", "interaction_id", owner_field="assigned_to"),
        _direct("content", Content, owner_field="author_id"),
        _direct("tag", Tag),
        _direct("category", Category),
        _direct("template", Template, owner_field="created_by"),
        _direct("media", Media, owner_field="uploaded_by"),
        _direct("blog_category", BlogCategory),
        _direct("blog", Blog),
        _direct("course_category", CourseCategory),
        _direct("course", Course),
    )
}


def get_scope(entity: str) -> EntityScope:
    try:
        return ENTITY_SCOPES[entity]
    except KeyError:
        raise LookupError(f"No tenant chain registered for entity '{entity}'") from None


def hop_chain(entity: str) -> list[EntityScope]:
    """Scopes from ``entity`` up to (and including) the one holding the tenant id."""
    scope = get_scope(entity)
    chain = [scope]
    while scope.parent is not None:
        scope = get_scope(scope.parent)
        chain.append(scope)
    return chain


class TenantChainResolver:
    """
    Walks an entity's hop list with primary-key lookups until it reaches the
    record that carries the tenant id.

    A missing target raises NotFoundError; a missing ancestor raises
    BrokenReferenceError (a NotFoundError for the requested entity).
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def load(self, entity: str, record_id: str) -> Base:
        scope = get_scope(entity)
        record = await self.db.get(scope.model, record_id)
        if record is None:
            raise NotFoundError(entity, record_id)
        return record

    async def resolve(self, entity: str, record_or_id: Union[Base, str]) -> Optional[str]:
        scope = get_scope(entity)
        if isinstance(record_or_id, scope.model):
            record = record_or_id
        else:
            record = await self.load(entity, record_or_id)

        while scope.parent is not None:
            parent_scope = get_scope(scope.parent)
            parent_id = getattr(record, scope.parent_field)
            parent = (
                await self.db.get(parent_scope.model, parent_id)
                if parent_id is not None
                else None
            )
            if parent is None:
                logger.error(
                    "Broken tenant chain reference",
                    entity=entity,
                    record_id=getattr(record, "id", None),
                    missing_entity=parent_scope.name,
                    missing_id=parent_id,
                )
                raise BrokenReferenceError(entity, parent_scope.name, parent_id)
            scope, record = parent_scope, parent

        return getattr(record, scope.tenant_field)
