"""
tenancy/access.py
-----------------
The access decision: one pure predicate over (caller, target tenant,
operation), plus the role guards that some operations layer on top.

Rules, in priority order:
  1. super_admin                                  → allow
  2. tenant-bound role without a company          → MissingTenantError
  3. target tenant == caller tenant               → allow
  4. otherwise                                    → CrossTenantAccessError

Guards run only after the tenant check has passed and fail with
RoleGuardError, so a tenant mismatch and a guard failure are never confused.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from crm_backend.core.errors import (
    AccessError,
    CrossTenantAccessError,
    MissingTenantError,
    RoleGuardError,
)
from crm_backend.models.user import PRIVILEGED_ROLES, UserRole
from crm_backend.tenancy.caller import Caller


class Operation(str, Enum):
    read = "read"
    write = "write"
    delete = "delete"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    error: Optional[AccessError] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, error: AccessError) -> "Decision":
        return cls(allowed=False, error=error)


def decide(caller: Caller, target_tenant_id: Optional[str], operation: Operation) -> Decision:
    if caller.is_super_admin:
        return Decision.allow()
    if caller.tenant_id is None:
        return Decision.deny(MissingTenantError(caller.id, caller.role.value))
    if target_tenant_id is not None and target_tenant_id == caller.tenant_id:
        return Decision.allow()
    return Decision.deny(
        CrossTenantAccessError(operation.value, caller.tenant_id, target_tenant_id)
    )


def enforce(caller: Caller, target_tenant_id: Optional[str], operation: Operation) -> None:
    decision = decide(caller, target_tenant_id, operation)
    if not decision.allowed:
        raise decision.error


def require_tenant(caller: Caller) -> None:
    """Rule 2 on its own, for operations that have no target record yet."""
    if caller.requires_tenant and caller.tenant_id is None:
        raise MissingTenantError(caller.id, caller.role.value)


# ── Role guards ──────────────────────────────────────────────────────────────

def ensure_can_assign_owner(caller: Caller, owner_id: Optional[str]) -> None:
    """Only super_admin / admin may hand a record to someone other than themselves."""
    if owner_id is None or owner_id == caller.id:
        return
    if not caller.is_privileged:
        raise RoleGuardError("Only admins can assign records to other users")


def ensure_same_tenant_assignee(
    assignee_tenant_id: Optional[str], record_tenant_id: Optional[str]
) -> None:
    if assignee_tenant_id != record_tenant_id:
        raise RoleGuardError("Cannot assign a record to a user from a different company")


def ensure_can_grant_role(caller: Caller, role: Optional[UserRole]) -> None:
    if role is None or role not in PRIVILEGED_ROLES:
        return
    if not caller.is_privileged:
        raise RoleGuardError("Not authorized to assign this role")
    if role is UserRole.super_admin and not caller.is_super_admin:
        raise RoleGuardError("Only a super admin can grant the super_admin role")


def ensure_not_self_delete(caller: Caller, target_id: str) -> None:
    if target_id == caller.id:
        raise RoleGuardError("Cannot delete your own account")


def ensure_can_delete_user(caller: Caller, target_id: str, target_role: str) -> None:
    ensure_not_self_delete(caller, target_id)
    if target_role == UserRole.admin.value and not caller.is_privileged:
        raise RoleGuardError("Not authorized to delete an admin")
    if target_role == UserRole.super_admin.value and not caller.is_super_admin:
        raise RoleGuardError("Not authorized to delete a super admin")
