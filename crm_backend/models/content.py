"""
models/content.py
-----------------
CMS content pages / posts and their tag links.

Slugs are unique per company, not globally.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, CompanyOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class ContentStatus(str, PyEnum):
    draft = "draft"
    published = "published"
    archived = "archived"


class ContentVisibility(str, PyEnum):
    public = "public"
    private = "private"
    password_protected = "password_protected"


class Content(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "contents"
    __table_args__ = (UniqueConstraint("company_id", "slug"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text)
    author_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    category_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="SET NULL"), index=True
    )
    template_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("templates.id", ondelete="SET NULL"), index=True
    )
    featured_image_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("media.id", ondelete="SET NULL")
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ContentStatus.draft.value, index=True
    )
    visibility: Mapped[str] = mapped_column(
        String(30), nullable=False, default=ContentVisibility.public.value
    )
    # bcrypt hash, only for password_protected content
    password_hash: Mapped[Optional[str]] = mapped_column(String(255))
    publish_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    meta_title: Mapped[Optional[str]] = mapped_column(String(255))
    meta_description: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    author: Mapped[Optional["User"]] = relationship("User")  # noqa: F821
    category: Mapped[Optional["Category"]] = relationship("Category")  # noqa: F821
    template: Mapped[Optional["Template"]] = relationship("Template")  # noqa: F821
    featured_image: Mapped[Optional["Media"]] = relationship("Media")  # noqa: F821
    tag_links: Mapped[list["ContentTag"]] = relationship(
        back_populates="content", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Content id={self.id} slug={self.slug}>"


class ContentTag(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "content_tags"
    __table_args__ = (UniqueConstraint("content_id", "tag_id"),)

    content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("contents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content: Mapped["Content"] = relationship(back_populates="tag_links")
    tag: Mapped["Tag"] = relationship("Tag", back_populates="content_links")  # noqa: F821
