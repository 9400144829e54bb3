"""
api/routes/auth.py
------------------
Authentication endpoints.

POST /api/auth/register  - Self-registration into an existing company.
POST /api/auth/login     - Exchange credentials for a JWT access token
                           (OAuth2 form data: username = email).
GET  /api/auth/me        - Return the authenticated user's profile.
PUT  /api/auth/me        - Update the authenticated user's name / email / password.
"""

from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from crm_backend.core.config import settings
from crm_backend.core.security import create_access_token
from crm_backend.dependencies import CurrentUser, DbSession
from crm_backend.schemas.user import (
    ProfileUpdate,
    TokenResponse,
    UserRead,
    UserRegister,
)
from crm_backend.services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(body: UserRegister, db: DbSession) -> UserRead:
    """
    Create a new user account inside an existing company.
    Default role is 'user'; a staff member can promote it later.
    """
    try:
        user = await UserService.register_user(db, body)
        return UserRead.model_validate(user)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and receive a JWT access token",
)
async def login(
    # The "username" field of the OAuth2 form contains the email address.
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: DbSession,
) -> TokenResponse:
    user = await UserService.authenticate(db, form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(
        subject=user.id,
        tenant_id=user.company_id,
        role=user.role,
        expires_delta=expires,
    )

    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=int(expires.total_seconds()),
        user=UserRead.model_validate(user),
    )


@router.get(
    "/me",
    response_model=UserRead,
    summary="Get the currently authenticated user",
)
async def get_me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)


@router.put(
    "/me",
    response_model=UserRead,
    summary="Update the currently authenticated user",
)
async def update_me(body: ProfileUpdate, current_user: CurrentUser, db: DbSession) -> UserRead:
    try:
        user = await UserService.update_profile(db, current_user, body)
        return UserRead.model_validate(user)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
