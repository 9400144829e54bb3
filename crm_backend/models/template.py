"""
models/template.py
------------------
CMS page template (HTML skeleton plus optional CSS / JS).
"""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from crm_backend.db.base import Base, CompanyOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class TemplateType(str, PyEnum):
    page = "page"
    post = "post"
    product = "product"
    landing_page = "landing_page"
    custom = "custom"


class Template(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "templates"
    __table_args__ = (UniqueConstraint("company_id", "slug"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    html_structure: Mapped[str] = mapped_column(Text, nullable=False)
    css_styles: Mapped[Optional[str]] = mapped_column(Text)
    js_scripts: Mapped[Optional[str]] = mapped_column(Text)
    template_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    preview_image_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("media.id", ondelete="SET NULL")
    )
    created_by: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL")
    )

    def __repr__(self) -> str:
        return f"<Template id={self.id} slug={self.slug}>"
