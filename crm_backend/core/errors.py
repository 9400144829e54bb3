"""
core/errors.py
--------------
Access-control error taxonomy.

Services and the tenancy layer raise these; main.py maps each class to an
HTTP status. Nothing here knows about HTTP.
"""

from typing import Optional


class AccessError(Exception):
    """Base class for every authorization / visibility failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AccessError):
    """The requested record, or a record in its tenant chain, does not exist."""

    def __init__(self, entity: str, record_id: Optional[str] = None) -> None:
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity.replace('_', ' ').capitalize()} not found")


class BrokenReferenceError(NotFoundError):
    """
    A foreign key in a tenant chain points at a record that no longer exists.

    Reported to the caller exactly like NotFoundError for the entity that was
    requested; ``missing_entity`` / ``missing_id`` are kept for the logs.
    """

    def __init__(
        self, entity: str, missing_entity: str, missing_id: Optional[str]
    ) -> None:
        super().__init__(entity)
        self.missing_entity = missing_entity
        self.missing_id = missing_id


class MissingTenantError(AccessError):
    def __init__(self, caller_id: str, role: str) -> None:
        self.caller_id = caller_id
        self.role = role
        super().__init__("User is not assigned to a company")


class CrossTenantAccessError(AccessError):
    """Carries both tenant ids for audit logging. Never echoed to the client."""

    def __init__(
        self,
        operation: str,
        caller_tenant_id: Optional[str],
        target_tenant_id: Optional[str],
    ) -> None:
        self.operation = operation
        self.caller_tenant_id = caller_tenant_id
        self.target_tenant_id = target_tenant_id
        super().__init__("Not authorized")


class RoleGuardError(AccessError):
    """A role-specific rule failed. The reason is safe to show to the caller."""


class InvalidQueryError(Exception):
    """Unusable request parameters (unknown sort field, missing company id...)."""
