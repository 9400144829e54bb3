"""
models/company.py
-----------------
Company (tenant) ORM model.

A company is the root of the multi-tenancy boundary: every other record is
reachable from exactly one company through zero or more foreign-key hops.
Deleting a company removes everything below it.
"""

from typing import Optional

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

_OWNED = "all, delete-orphan"


class Company(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    siren: Mapped[Optional[str]] = mapped_column(String(20), unique=True)
    siret: Mapped[Optional[str]] = mapped_column(String(20), unique=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20))
    naf_code: Mapped[Optional[str]] = mapped_column(String(20))
    revenue: Mapped[Optional[float]] = mapped_column(Float)
    ebit: Mapped[Optional[float]] = mapped_column(Float)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    market_share: Mapped[Optional[float]] = mapped_column(Float)

    # Relationships
    users: Mapped[list["User"]] = relationship(  # noqa: F821
        "User", back_populates="company", cascade=_OWNED
    )
    clients: Mapped[list["Client"]] = relationship(  # noqa: F821
        "Client", back_populates="company", cascade=_OWNED
    )
    contents: Mapped[list["Content"]] = relationship("Content", cascade=_OWNED)  # noqa: F821
    tags: Mapped[list["Tag"]] = relationship("Tag", cascade=_OWNED)  # noqa: F821
    categories: Mapped[list["Category"]] = relationship("Category", cascade=_OWNED)  # noqa: F821
    templates: Mapped[list["Template"]] = relationship("Template", cascade=_OWNED)  # noqa: F821
    media: Mapped[list["Media"]] = relationship("Media", cascade=_OWNED)  # noqa: F821
    blog_categories: Mapped[list["BlogCategory"]] = relationship(  # noqa: F821
        "BlogCategory", cascade=_OWNED
    )
    blogs: Mapped[list["Blog"]] = relationship("Blog", cascade=_OWNED)  # noqa: F821
    course_categories: Mapped[list["CourseCategory"]] = relationship(  # noqa: F821
        "CourseCategory", cascade=_OWNED
    )
    courses: Mapped[list["Course"]] = relationship("Course", cascade=_OWNED)  # noqa: F821

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name}>"
