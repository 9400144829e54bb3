"""
models/user.py
--------------
User ORM model with roles and company binding.

Role design:
  - 'super_admin': platform operator, not bound to any company.
  - 'admin':       manages users and data of their own company.
  - 'manager', 'sales', 'support', 'user': company staff.

The hashed_password column stores bcrypt hashes only - plain text is
never stored and never logged.
"""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class UserRole(str, PyEnum):
    super_admin = "super_admin"
    admin = "admin"
    manager = "manager"
    sales = "sales"
    support = "support"
    user = "user"


PRIVILEGED_ROLES = frozenset({UserRole.super_admin, UserRole.admin})


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.user.value
    )
    # Null only for super admins
    company_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    # Relationships
    company: Mapped[Optional["Company"]] = relationship(  # noqa: F821
        "Company", back_populates="users"
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"
