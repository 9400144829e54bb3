"""
api/routes/users.py
-------------------
User management within a company.

GET    /api/users        - any authenticated user: users of their company
GET    /api/users/{id}
POST   /api/users        - super admin / admin / manager
PUT    /api/users/{id}   - super admin / admin / manager
DELETE /api/users/{id}   - super admin / admin / manager (nobody deletes themselves)
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from crm_backend.dependencies import (
    STAFF,
    CurrentCaller,
    DbSession,
    ListParams,
    check_roles,
    require_roles,
)
from crm_backend.models.user import UserRole
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.user import UserCreate, UserPage, UserRead, UserUpdate
from crm_backend.services.user_service import UserService
from crm_backend.tenancy.access import ensure_not_self_delete
from crm_backend.tenancy.caller import Caller

router = APIRouter(prefix="/api/users", tags=["Users"])

Staff = Annotated[Caller, Depends(require_roles(*STAFF))]


@router.get("", response_model=UserPage, summary="List users")
async def list_users(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    role: Optional[UserRole] = None,
    company_id: Annotated[Optional[str], Query(description="Super admins only narrow on it")] = None,
) -> UserPage:
    page = await UserService.list_users(db, caller, spec, role=role, company_id=company_id)
    return UserPage(users=[UserRead.model_validate(u) for u in page.items], **page.meta())


@router.get("/{user_id}", response_model=UserRead, summary="Get a user")
async def get_user(user_id: str, db: DbSession, caller: CurrentCaller) -> UserRead:
    return UserRead.model_validate(await UserService.get_user(db, caller, user_id))


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(body: UserCreate, db: DbSession, caller: Staff) -> UserRead:
    """
    Tenant-bound staff create users in their own company. Only admins can
    grant the admin role, only super admins the super_admin role.
    """
    try:
        user = await UserService.create_user(db, caller, body)
        return UserRead.model_validate(user)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.put("/{user_id}", response_model=UserRead, summary="Update a user")
async def update_user(user_id: str, body: UserUpdate, db: DbSession, caller: Staff) -> UserRead:
    try:
        user = await UserService.update_user(db, caller, user_id, body)
        return UserRead.model_validate(user)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a user")
async def delete_user(user_id: str, db: DbSession, caller: CurrentCaller) -> MessageResponse:
    # Self-delete is refused for every role, before the staff check
    ensure_not_self_delete(caller, user_id)
    check_roles(caller, STAFF)
    await UserService.delete_user(db, caller, user_id)
    return MessageResponse(message="User deleted")
