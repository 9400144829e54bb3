import pytest

from crm_backend.core.errors import CrossTenantAccessError, MissingTenantError, RoleGuardError
from crm_backend.models.user import UserRole
from crm_backend.tenancy.access import (
    Operation,
    decide,
    enforce,
    ensure_can_assign_owner,
    ensure_can_delete_user,
    ensure_can_grant_role,
    ensure_same_tenant_assignee,
    require_tenant,
)
from crm_backend.tenancy.caller import Caller

SUPER = Caller(id="u-root", role=UserRole.super_admin)
ADMIN_A = Caller(id="u-admin", role=UserRole.admin, tenant_id="tenant-a")
SALES_A = Caller(id="u-sales", role=UserRole.sales, tenant_id="tenant-a")
ORPHAN = Caller(id="u-orphan", role=UserRole.manager, tenant_id=None)


@pytest.mark.parametrize("operation", list(Operation))
def test_super_admin_allowed_everywhere(operation):
    assert decide(SUPER, "tenant-b", operation).allowed
    assert decide(SUPER, None, operation).allowed


def test_same_tenant_allowed():
    decision = decide(SALES_A, "tenant-a", Operation.write)
    assert decision.allowed
    assert decision.error is None


def test_missing_tenant_denied_before_tenant_comparison():
    decision = decide(ORPHAN, "tenant-a", Operation.read)
    assert not decision.allowed
    assert isinstance(decision.error, MissingTenantError)
    assert decision.error.message == "User is not assigned to a company"


def test_cross_tenant_denial_carries_both_tenants():
    decision = decide(SALES_A, "tenant-b", Operation.delete)
    assert not decision.allowed
    error = decision.error
    assert isinstance(error, CrossTenantAccessError)
    assert error.operation == "delete"
    assert error.caller_tenant_id == "tenant-a"
    assert error.target_tenant_id == "tenant-b"
    # The other tenant is never part of the caller-facing message
    assert "tenant-b" not in error.message


def test_record_without_tenant_is_denied_to_tenant_bound_caller():
    assert not decide(ADMIN_A, None, Operation.read).allowed


def test_enforce_raises_the_decision_error():
    with pytest.raises(CrossTenantAccessError):
        enforce(SALES_A, "tenant-b", Operation.read)
    enforce(SALES_A, "tenant-a", Operation.read)


def test_require_tenant():
    require_tenant(SUPER)
    require_tenant(SALES_A)
    with pytest.raises(MissingTenantError):
        require_tenant(ORPHAN)


# ── Guards ────────────────────────────────────────────────────────────────────

def test_only_admins_assign_to_someone_else():
    ensure_can_assign_owner(SALES_A, None)
    ensure_can_assign_owner(SALES_A, SALES_A.id)
    ensure_can_assign_owner(ADMIN_A, "u-other")
    ensure_can_assign_owner(SUPER, "u-other")
    with pytest.raises(RoleGuardError, match="Only admins can assign"):
        ensure_can_assign_owner(SALES_A, "u-other")


def test_assignee_must_share_the_record_tenant():
    ensure_same_tenant_assignee("tenant-a", "tenant-a")
    with pytest.raises(RoleGuardError, match="different company"):
        ensure_same_tenant_assignee("tenant-b", "tenant-a")


def test_role_grants():
    ensure_can_grant_role(SALES_A, UserRole.user)
    ensure_can_grant_role(SALES_A, None)
    ensure_can_grant_role(ADMIN_A, UserRole.admin)
    ensure_can_grant_role(SUPER, UserRole.super_admin)
    with pytest.raises(RoleGuardError):
        ensure_can_grant_role(SALES_A, UserRole.admin)
    with pytest.raises(RoleGuardError, match="super_admin"):
        ensure_can_grant_role(ADMIN_A, UserRole.super_admin)


@pytest.mark.parametrize("caller", [SUPER, ADMIN_A, SALES_A])
def test_nobody_deletes_themselves(caller):
    with pytest.raises(RoleGuardError, match="Cannot delete your own account"):
        ensure_can_delete_user(caller, caller.id, caller.role.value)


def test_admin_deletion_needs_privileges():
    ensure_can_delete_user(ADMIN_A, "u-other-admin", UserRole.admin.value)
    with pytest.raises(RoleGuardError, match="delete an admin"):
        ensure_can_delete_user(SALES_A, "u-other-admin", UserRole.admin.value)
    with pytest.raises(RoleGuardError):
        ensure_can_delete_user(ADMIN_A, "u-root", UserRole.super_admin.value)


def test_guard_errors_are_distinct_from_tenant_errors():
    assert not issubclass(RoleGuardError, CrossTenantAccessError)
    assert not issubclass(CrossTenantAccessError, RoleGuardError)
