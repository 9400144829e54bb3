"""
tenancy/caller.py
-----------------
The authenticated identity a request runs as.

Built once per request from the persisted User (see dependencies.get_caller)
and never mutated afterwards.
"""

from dataclasses import dataclass
from typing import Optional

from crm_backend.models.user import PRIVILEGED_ROLES, User, UserRole


@dataclass(frozen=True)
class Caller:
    id: str
    role: UserRole
    tenant_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        return cls(id=user.id, role=UserRole(user.role), tenant_id=user.company_id)

    @property
    def is_super_admin(self) -> bool:
        return self.role is UserRole.super_admin

    @property
    def is_privileged(self) -> bool:
        """super_admin or admin."""
        return self.role in PRIVILEGED_ROLES

    @property
    def requires_tenant(self) -> bool:
        return not self.is_super_admin
