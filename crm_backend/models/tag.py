"""
models/tag.py
-------------
CMS tag. ``count`` mirrors the number of ContentTag links and is kept in
step with them inside the same transaction.
"""

from typing import Optional

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, CompanyOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Tag(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("company_id", "slug"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    content_links: Mapped[list["ContentTag"]] = relationship(  # noqa: F821
        "ContentTag", back_populates="tag", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Tag id={self.id} slug={self.slug} count={self.count}>"
