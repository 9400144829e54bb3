"""
services/user_service.py
------------------------
Business logic for user registration, authentication, and management.

Users carry their company directly (``company_id``); super admins have none.
Role rules on top of the tenant check:
  - only admins grant admin roles, only super admins grant super_admin
  - an admin account can only be edited by someone allowed to grant that role
  - nobody deletes their own account, non-admins never delete an admin
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.errors import InvalidQueryError, NotFoundError
from crm_backend.core.logging import get_logger
from crm_backend.core.security import hash_password, verify_and_upgrade
from crm_backend.models.company import Company
from crm_backend.models.user import PRIVILEGED_ROLES, User, UserRole
from crm_backend.schemas.user import ProfileUpdate, UserCreate, UserRegister, UserUpdate
from crm_backend.services.crud import ScopedRepository, resolve_company
from crm_backend.tenancy.access import (
    Operation,
    ensure_can_assign_owner,
    ensure_can_delete_user,
    ensure_can_grant_role,
    ensure_same_tenant_assignee,
)
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

logger = get_logger(__name__)

users = ScopedRepository("user", search_fields=("name", "email"), default_sort="name:asc")


def _email_conflict(email: str) -> str:
    return f"Email '{email}' is already registered"


def _credentials(data, exclude_unset: bool = True) -> dict:
    """model_dump with the password hashed and the email normalised."""
    values = data.model_dump(exclude_unset=exclude_unset)
    if values.get("email"):
        values["email"] = values["email"].lower()
    password = values.pop("password", None)
    if password:
        values["hashed_password"] = hash_password(password)
    return values


class UserService:

    @staticmethod
    async def register_user(db: AsyncSession, data: UserRegister) -> User:
        """
        Self-registration: creates a 'user'-role account in an existing company.
        Raises NotFoundError for an unknown company, ValueError on duplicate email.
        """
        if await db.get(Company, data.company_id) is None:
            raise NotFoundError("company", data.company_id)
        values = _credentials(data, exclude_unset=False)
        values["role"] = UserRole.user.value
        user = await users.create(db, values, conflict=_email_conflict(data.email))
        logger.info("User registered", user_id=user.id, company_id=user.company_id)
        return user

    @staticmethod
    async def authenticate(
        db: AsyncSession, email: str, password: str
    ) -> User | None:
        """
        Verify credentials and return the User if valid, else None.
        Email lookup is case-insensitive.
        """
        result = await db.execute(
            select(User).where(User.email == email.lower())
        )
        user = result.scalar_one_or_none()
        if user is None:
            logger.info("Login failed", reason="unknown_email")
            return None

        valid, new_hash = verify_and_upgrade(password, user.hashed_password)
        if not valid:
            logger.info("Login failed", reason="bad_password", user_id=user.id)
            return None
        if new_hash:
            user.hashed_password = new_hash
            logger.info("Password hash upgraded", user_id=user.id)
        return user

    @staticmethod
    async def list_users(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        role: Optional[UserRole] = None,
        company_id: Optional[str] = None,
    ) -> Page:
        return await users.list(db, caller, spec, parent_id=company_id, filters={"role": role})

    @staticmethod
    async def get_user(db: AsyncSession, caller: Caller, user_id: str) -> User:
        return await users.get(db, caller, user_id)

    @staticmethod
    async def create_user(db: AsyncSession, caller: Caller, data: UserCreate) -> User:
        """
        Staff-initiated user creation. Tenant-bound callers create users in
        their own company; a super admin picks the company, or leaves it empty
        when creating another super admin.
        """
        role = UserRole(data.role)
        ensure_can_grant_role(caller, role)

        if role is UserRole.super_admin:
            company_id = None
        else:
            company_id = await resolve_company(db, caller, data.company_id)

        values = _credentials(data, exclude_unset=False)
        values["company_id"] = company_id
        user = await users.create(db, values, conflict=_email_conflict(data.email))
        logger.info(
            "Staff created user",
            new_user_id=user.id,
            role=user.role,
            company_id=company_id,
            created_by=caller.id,
        )
        return user

    @staticmethod
    async def update_user(
        db: AsyncSession, caller: Caller, user_id: str, data: UserUpdate
    ) -> User:
        user = await users.get(db, caller, user_id, Operation.write)
        current_role = UserRole(user.role)
        if current_role in PRIVILEGED_ROLES:
            ensure_can_grant_role(caller, current_role)

        values = _credentials(data)
        if values.get("role") is not None:
            new_role = UserRole(values["role"])
            ensure_can_grant_role(caller, new_role)
            if new_role is not UserRole.super_admin and user.company_id is None:
                raise InvalidQueryError("A user without a company can only be a super admin")
        return await users.update(db, user, values, conflict=_email_conflict(data.email or ""))

    @staticmethod
    async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
        """Self-service update of name, email and password. Role and company never change here."""
        values = _credentials(data)
        return await users.update(db, user, values, conflict=_email_conflict(data.email or ""))

    @staticmethod
    async def delete_user(db: AsyncSession, caller: Caller, user_id: str) -> None:
        user = await users.get(db, caller, user_id, Operation.delete)
        ensure_can_delete_user(caller, user.id, user.role)
        await users.delete(db, user)


async def check_assignee(
    db: AsyncSession, caller: Caller, assignee_id: Optional[str], record_tenant_id: Optional[str]
) -> None:
    """
    Guard for handing a lead / task to ``assignee_id``.
    Only admins assign to someone else, and never across companies.
    """
    ensure_can_assign_owner(caller, assignee_id)
    if assignee_id is None or assignee_id == caller.id:
        return
    assignee = await users.get(db, caller, assignee_id)
    ensure_same_tenant_assignee(assignee.company_id, record_tenant_id)
