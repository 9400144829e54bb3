"""
models/course.py
----------------
Training courses and course categories (many-to-many).
"""

from typing import Optional

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, CompanyOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin
from crm_backend.models.blog import Audience

course_category_links = Table(
    "course_category_links",
    Base.metadata,
    Column("course_id", String(36), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "category_id",
        String(36),
        ForeignKey("course_categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class CourseCategory(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "course_categories"
    __table_args__ = (UniqueConstraint("company_id", "slug"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)


class Course(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "courses"
    __table_args__ = (UniqueConstraint("company_id", "slug"),)

    slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    long_description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String(2048), nullable=False)
    audience: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Audience.all.value
    )
    level: Mapped[str] = mapped_column(String(50), nullable=False)
    duration: Mapped[str] = mapped_column(String(50), nullable=False)
    modules: Mapped[int] = mapped_column(Integer, nullable=False)
    learning_outcomes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # [{"title": str, "duration": str}, ...]
    module_details: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)

    categories: Mapped[list["CourseCategory"]] = relationship(secondary=course_category_links)

    def __repr__(self) -> str:
        return f"<Course id={self.id} slug={self.slug}>"
