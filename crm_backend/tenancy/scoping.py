"""
tenancy/scoping.py
------------------
Base WHERE clauses for list endpoints.

A tenant-bound caller only sees rows whose chain ends at their company. The
store cannot filter on a transitive tenant id, so the narrowing is built one
level at a time: the ids of the nearest directly-filterable level (clients of
the company) feed an ``IN`` on the next level down, and so on until the
target table is reached:

    task.interaction_id IN (SELECT interaction.id WHERE
        interaction.lead_id IN (SELECT lead.id WHERE
            lead.client_id IN (SELECT client.id WHERE client.company_id = :tenant)))

An explicit parent id never replaces this narrowing; it is ANDed with it. A
caller naming a parent that belongs to another company gets an empty page.
"""

from enum import Enum
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.sql.elements import ColumnElement

from crm_backend.core.errors import InvalidQueryError
from crm_backend.tenancy.access import require_tenant
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.chain import EntityScope, get_scope


class ScopedQueryBuilder:

    def __init__(self, caller: Caller) -> None:
        self.caller = caller

    def tenant_clause(self, entity: str) -> Optional[ColumnElement]:
        """Narrowing to the caller's company, or None for a super admin."""
        if self.caller.is_super_admin:
            return None
        require_tenant(self.caller)
        return self._membership(get_scope(entity))

    def _membership(self, scope: EntityScope) -> ColumnElement:
        if scope.is_direct:
            return scope.column(scope.tenant_field) == self.caller.tenant_id
        parent = get_scope(scope.parent)
        parent_ids = select(parent.model.id).where(self._membership(parent))
        return scope.column(scope.parent_field).in_(parent_ids)

    def build(
        self,
        entity: str,
        *,
        parent_id: Optional[str] = None,
        personal: bool = False,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> list[ColumnElement]:
        """
        Base filter for listing ``entity``.

        Args:
            parent_id: explicit id of the direct parent (client_id for leads,
                company_id for clients...). Intersected with the tenant scope.
            personal:  keep only rows owned by the caller, for entities that
                declare an owner field.
            filters:   extra equality filters; None values are skipped.
        """
        scope = get_scope(entity)
        clauses: list[ColumnElement] = []

        tenant = self.tenant_clause(entity)
        if tenant is not None:
            clauses.append(tenant)

        if parent_id is not None:
            clauses.append(scope.column(scope.filter_field) == parent_id)

        if personal and scope.owner_field is not None:
            clauses.append(scope.column(scope.owner_field) == self.caller.id)

        for field, value in (filters or {}).items():
            if value is None:
                continue
            column = getattr(scope.model, field, None)
            if column is None:
                raise InvalidQueryError(f"Unknown filter field '{field}'")
            if isinstance(value, Enum):
                value = value.value
            clauses.append(column == value)

        return clauses
