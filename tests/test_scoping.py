import pytest
from sqlalchemy import select

from crm_backend.core.errors import MissingTenantError
from crm_backend.models import Client, Lead, Task, UserRole
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.scoping import ScopedQueryBuilder


async def _titles(db, caller, entity="task", model=Task, **kwargs):
    clauses = ScopedQueryBuilder(caller).build(entity, **kwargs)
    result = await db.execute(select(model).where(*clauses))
    return sorted(getattr(row, "title", None) or row.name for row in result.scalars())


async def test_tasks_narrowed_through_three_hops(db, tenants):
    caller = Caller.from_user(tenants["sales_a"])
    assert await _titles(db, caller) == ["T1", "T2"]

    other = Caller.from_user(tenants["sales_b"])
    assert await _titles(db, other) == ["TB"]


async def test_super_admin_gets_no_tenant_clause(db, tenants):
    caller = Caller.from_user(tenants["super_admin"])
    assert ScopedQueryBuilder(caller).build("task") == []
    assert await _titles(db, caller) == ["T1", "T2", "TB"]


async def test_parent_id_is_intersected_with_tenant(db, tenants):
    caller = Caller.from_user(tenants["sales_a"])
    own = await _titles(db, caller, parent_id=tenants["i1"].id)
    assert own == ["T1", "T2"]
    # Naming another company's interaction yields nothing rather than its tasks
    assert await _titles(db, caller, parent_id=tenants["ib"].id) == []


async def test_personal_keeps_only_owned_rows(db, tenants):
    caller = Caller.from_user(tenants["sales_a"])
    assert await _titles(db, caller, personal=True) == ["T1"]

    admin = Caller.from_user(tenants["admin_a"])
    assert await _titles(db, admin, personal=True) == ["T2"]


async def test_direct_entity_uses_company_column(db, tenants):
    caller = Caller.from_user(tenants["sales_b"])
    assert await _titles(db, caller, entity="client", model=Client) == ["CB"]


async def test_filters_skip_none_values(db, tenants, factory):
    await factory.lead(tenants["c2"], status="Lost", name="Lost deal")
    caller = Caller.from_user(tenants["sales_a"])
    names = await _titles(db, caller, entity="lead", model=Lead, filters={"status": "Lost"})
    assert names == ["Lost deal"]
    everything = await _titles(db, caller, entity="lead", model=Lead, filters={"status": None})
    assert everything == ["L1", "Lost deal"]


def test_caller_without_company_is_rejected():
    caller = Caller(id="u-1", role=UserRole.sales, tenant_id=None)
    with pytest.raises(MissingTenantError):
        ScopedQueryBuilder(caller).build("task")
