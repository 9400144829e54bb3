"""
services/crud.py
----------------
Generic tenant-scoped create / read / update / delete / list.

Every entity service delegates to a ScopedRepository configured with the
entity name (which selects its tenant chain), its search fields and its
default sort. Entity-specific business rules stay in the entity services.

Single-record access:
  load → resolve tenant chain → access decision. A record that belongs to
  another company is reported exactly like a missing record; the denial is
  logged with both tenant ids for auditing.
"""

import re
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from crm_backend.core.errors import CrossTenantAccessError, InvalidQueryError, NotFoundError
from crm_backend.core.logging import get_logger
from crm_backend.db.base import Base
from crm_backend.models.company import Company
from crm_backend.tenancy.access import Operation, decide, require_tenant
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.chain import TenantChainResolver, get_scope
from crm_backend.tenancy.pagination import Page, QuerySpec, loader_options, paginate
from crm_backend.tenancy.scoping import ScopedQueryBuilder

logger = get_logger(__name__)


def slugify(text: str) -> str:
    slug = re.sub(r"[^\w ]+", "", text.lower())
    return re.sub(r" +", "-", slug.strip())


class ScopedRepository:

    def __init__(
        self,
        entity: str,
        *,
        search_fields: Sequence[str] = (),
        default_sort: str = "created_at:desc",
        populate: Sequence[str] = (),
    ) -> None:
        self.entity = entity
        self.scope = get_scope(entity)
        self.model = self.scope.model
        self.search_fields = tuple(search_fields)
        self.default_sort = default_sort
        self.populate = tuple(populate)

    @property
    def label(self) -> str:
        return self.entity.replace("_", " ").capitalize()

    # ── Reads ─────────────────────────────────────────────────────────────────

    async def authorize(
        self, db: AsyncSession, caller: Caller, record: Base, operation: Operation
    ) -> Optional[str]:
        """Return the record's tenant id if ``caller`` may perform ``operation`` on it."""
        tenant_id = await TenantChainResolver(db).resolve(self.entity, record)
        decision = decide(caller, tenant_id, operation)
        if decision.allowed:
            return tenant_id

        error = decision.error
        if isinstance(error, CrossTenantAccessError):
            logger.warning(
                "Cross-tenant access denied",
                entity=self.entity,
                record_id=record.id,
                operation=error.operation,
                caller_id=caller.id,
                caller_tenant_id=error.caller_tenant_id,
                target_tenant_id=error.target_tenant_id,
            )
            raise NotFoundError(self.entity, record.id) from error
        raise error

    async def get(
        self,
        db: AsyncSession,
        caller: Caller,
        record_id: str,
        operation: Operation = Operation.read,
        populate: Optional[Sequence[str]] = None,
    ) -> Base:
        record = await TenantChainResolver(db).load(self.entity, record_id)
        await self.authorize(db, caller, record, operation)
        if populate:
            return await self.reload(db, record_id, populate)
        return record

    async def reload(self, db: AsyncSession, record_id: str, populate: Sequence[str]) -> Base:
        stmt = (
            select(self.model)
            .where(self.model.id == record_id)
            .options(*loader_options(self.model, populate))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one()

    async def list(
        self,
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        *,
        parent_id: Optional[str] = None,
        personal: bool = False,
        filters: Optional[Mapping[str, Any]] = None,
        where: Sequence[ColumnElement] = (),
        populate: Optional[Sequence[str]] = None,
    ) -> Page:
        clauses = ScopedQueryBuilder(caller).build(
            self.entity, parent_id=parent_id, personal=personal, filters=filters
        )
        clauses.extend(where)
        return await paginate(
            db,
            self.model,
            clauses,
            spec,
            search_fields=self.search_fields,
            populate=self.populate if populate is None else populate,
            default_sort=self.default_sort,
        )

    # ── Writes ────────────────────────────────────────────────────────────────

    async def create(
        self,
        db: AsyncSession,
        values: Mapping[str, Any],
        *,
        conflict: Optional[str] = None,
        populate: Optional[Sequence[str]] = None,
    ) -> Base:
        record = self.model(**values)
        db.add(record)
        await self._flush(db, conflict)
        await db.refresh(record)
        logger.info(f"{self.label} created", record_id=record.id)
        if populate:
            return await self.reload(db, record.id, populate)
        return record

    async def update(
        self,
        db: AsyncSession,
        record: Base,
        changes: Mapping[str, Any],
        *,
        conflict: Optional[str] = None,
        populate: Optional[Sequence[str]] = None,
    ) -> Base:
        for field, value in changes.items():
            setattr(record, field, value)
        await self._flush(db, conflict)
        await db.refresh(record)
        logger.info(f"{self.label} updated", record_id=record.id, fields=sorted(changes))
        if populate:
            return await self.reload(db, record.id, populate)
        return record

    async def delete(self, db: AsyncSession, record: Base) -> None:
        await db.delete(record)
        await db.flush()
        logger.info(f"{self.label} deleted", record_id=record.id)

    async def _flush(self, db: AsyncSession, conflict: Optional[str]) -> None:
        try:
            await db.flush()  # Trigger DB constraints before commit
        except IntegrityError:
            await db.rollback()
            raise ValueError(conflict or f"{self.label} conflicts with an existing record")

    # ── Tenant helpers ────────────────────────────────────────────────────────

    async def tenant_of(self, db: AsyncSession, record: Base) -> Optional[str]:
        return await TenantChainResolver(db).resolve(self.entity, record)

    async def get_in_company(
        self, db: AsyncSession, caller: Caller, record_id: str, company_id: Optional[str]
    ) -> Base:
        """
        Load a record referenced from another record of ``company_id``.
        A reference into a different company is reported as not found.
        """
        record = await self.get(db, caller, record_id)
        tenant_id = await self.tenant_of(db, record)
        if tenant_id != company_id:
            logger.warning(
                "Reference to another company rejected",
                entity=self.entity,
                record_id=record_id,
                record_company_id=tenant_id,
                expected_company_id=company_id,
            )
            raise NotFoundError(self.entity, record_id)
        return record


async def resolve_company(db: AsyncSession, caller: Caller, company_id: Optional[str]) -> str:
    """
    Company a new top-level record is created in.

    Tenant-bound callers always write into their own company, whatever the
    body says. A super admin has no company of their own and must name one.
    """
    if not caller.is_super_admin:
        require_tenant(caller)
        return caller.tenant_id
    if company_id is None:
        raise InvalidQueryError("company_id is required")
    if await db.get(Company, company_id) is None:
        raise NotFoundError("company", company_id)
    return company_id
