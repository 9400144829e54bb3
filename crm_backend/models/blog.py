"""
models/blog.py
--------------
Blog posts and blog categories (many-to-many).

``slug`` is the public identifier used by the unauthenticated blog API.
"""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import JSON, Column, ForeignKey, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, CompanyOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Audience(str, PyEnum):
    english = "english"
    french = "french"
    all = "all"


blog_category_links = Table(
    "blog_category_links",
    Base.metadata,
    Column("blog_id", String(36), ForeignKey("blogs.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "category_id",
        String(36),
        ForeignKey("blog_categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class BlogCategory(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "blog_categories"
    __table_args__ = (UniqueConstraint("company_id", "slug"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)


class Blog(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "blogs"
    __table_args__ = (UniqueConstraint("company_id", "slug"),)

    slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    excerpt: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String(2048), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    published_on: Mapped[str] = mapped_column(String(50), nullable=False)
    audience: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Audience.all.value
    )
    html_content: Mapped[Optional[str]] = mapped_column(Text)
    # [{"heading": str, "paragraphs": [str, ...]}, ...]
    sections: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)

    categories: Mapped[list["BlogCategory"]] = relationship(secondary=blog_category_links)

    def __repr__(self) -> str:
        return f"<Blog id={self.id} slug={self.slug}>"
