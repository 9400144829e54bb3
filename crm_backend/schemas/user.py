"""
schemas/user.py
---------------
Pydantic models for users, registration, login and profile updates.

Security note:
  - hashed_password is NEVER included in any response schema.
  - Passwords require min 8 chars; enforce stronger rules in production.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from crm_backend.models.user import UserRole
from crm_backend.schemas.common import InputModel, PageMeta, ReadModel


class UserCreate(InputModel):
    """Used by staff to create a user. company_id is honoured for super admins only."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole = UserRole.user
    company_id: Optional[str] = None


class UserUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    role: Optional[UserRole] = None


class UserRegister(InputModel):
    """Self-registration endpoint - company_id comes from request body."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    company_id: str = Field(..., description="UUID of the company to join")


class ProfileUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)


class UserRead(ReadModel):
    id: str
    name: str
    email: EmailStr
    role: UserRole
    company_id: Optional[str] = None
    created_at: datetime


class UserSummary(ReadModel):
    id: str
    name: str
    email: EmailStr


class UserPage(PageMeta):
    users: list[UserRead]


class TokenResponse(ReadModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user: UserRead
