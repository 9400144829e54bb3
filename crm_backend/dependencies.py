"""
dependencies.py
---------------
FastAPI dependency injection functions for authentication, authorisation
and list parameters.

Flow:
  1. OAuth2PasswordBearer extracts the Bearer token from the Authorization header.
  2. decode_access_token validates and parses the JWT (no DB round-trip).
  3. get_current_user fetches the full User record from the DB, so deleted
     users and changed roles / companies take effect immediately.
  4. get_caller freezes that user into the Caller every service works with.
  5. require_roles layers an endpoint-level role list on top.

The company the caller belongs to always comes from the database, never from
the request, so it cannot be forged by a client.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.config import settings
from crm_backend.core.logging import bind_request_context, get_logger
from crm_backend.core.security import decode_access_token
from crm_backend.db.session import get_db
from crm_backend.models.user import User, UserRole
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import QuerySpec

logger = get_logger(__name__)

# tokenUrl must match the login endpoint path
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Decode the JWT, then load and return the full User from the database.
    Raises 401 if the token is invalid or the user no longer exists.
    """
    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")
        if not user_id:
            raise _CREDENTIALS_EXCEPTION
    except JWTError as exc:
        logger.warning("JWT decode failed", error=str(exc))
        raise _CREDENTIALS_EXCEPTION

    # Always re-verify against DB so revoked / deleted users are rejected
    user = await db.get(User, user_id)
    if user is None:
        logger.warning("User from valid JWT not found in DB", user_id=user_id)
        raise _CREDENTIALS_EXCEPTION

    return user


async def get_caller(
    current_user: Annotated[User, Depends(get_current_user)],
) -> Caller:
    caller = Caller.from_user(current_user)
    bind_request_context(caller_id=caller.id, caller_role=caller.role.value, tenant_id=caller.tenant_id)
    return caller


def check_roles(caller: Caller, roles) -> Caller:
    """Raises 403 when the caller's role is not in ``roles``."""
    allowed = frozenset(roles)
    if caller.role not in allowed:
        logger.warning(
            "Role not allowed for endpoint",
            caller_id=caller.id,
            role=caller.role.value,
            allowed=sorted(role.value for role in allowed),
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient privileges",
        )
    return caller


def require_roles(*roles: UserRole):
    """
    Endpoint-level role list, e.g. ``Depends(require_roles(UserRole.admin))``.
    Raises 403 when the caller's role is not listed.
    """

    async def dependency(caller: Annotated[Caller, Depends(get_caller)]) -> Caller:
        return check_roles(caller, roles)

    return dependency


def get_query_spec(
    page: Annotated[Optional[str], Query(description="1-based page number")] = None,
    limit: Annotated[Optional[str], Query(description="Page size")] = None,
    search: Annotated[Optional[str], Query(description="Case-insensitive substring")] = None,
    sort: Annotated[Optional[str], Query(description="field, field:asc, field:desc or -field")] = None,
) -> QuerySpec:
    # Raw strings: unparsable or non-positive values fall back to the defaults
    return QuerySpec.from_params(
        page,
        limit,
        search,
        sort,
        default_limit=settings.DEFAULT_PAGE_LIMIT,
        max_limit=settings.MAX_PAGE_LIMIT,
    )


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentCaller = Annotated[Caller, Depends(get_caller)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
ListParams = Annotated[QuerySpec, Depends(get_query_spec)]

STAFF = (UserRole.super_admin, UserRole.admin, UserRole.manager)
SALES_STAFF = (UserRole.super_admin, UserRole.admin, UserRole.manager, UserRole.sales)
ADMINS = (UserRole.super_admin, UserRole.admin)
