"""
schemas/blog.py
---------------
Pydantic models for blogs, courses and their categories.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from crm_backend.models.blog import Audience
from crm_backend.schemas.common import CompanyScopedInput, InputModel, PageMeta, ReadModel


class CategoryLabelCreate(CompanyScopedInput):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class CategoryLabelUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class CategoryLabelRead(ReadModel):
    id: str
    company_id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CategoryLabelSummary(ReadModel):
    id: str
    name: str
    slug: str


class BlogCategoryPage(PageMeta):
    blog_categories: list[CategoryLabelRead]


class CourseCategoryPage(PageMeta):
    course_categories: list[CategoryLabelRead]


# ── Blogs ─────────────────────────────────────────────────────────────────────

class BlogSection(BaseModel):
    heading: str = Field(..., min_length=1)
    paragraphs: list[str] = []


class BlogCreate(CompanyScopedInput):
    slug: str = Field(..., min_length=1, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    excerpt: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1, max_length=2048)
    author: str = Field(..., min_length=1, max_length=255)
    published_on: str = Field(..., min_length=1, max_length=50)
    audience: Audience = Audience.all
    html_content: Optional[str] = None
    sections: list[BlogSection] = []
    category_ids: list[str] = []


class BlogUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    excerpt: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, min_length=1, max_length=2048)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    published_on: Optional[str] = Field(None, min_length=1, max_length=50)
    audience: Optional[Audience] = None
    html_content: Optional[str] = None
    sections: Optional[list[BlogSection]] = None
    category_ids: Optional[list[str]] = None


class BlogRead(ReadModel):
    id: str
    company_id: str
    slug: str
    title: str
    excerpt: str
    image: str
    author: str
    published_on: str
    audience: Audience
    html_content: Optional[str] = None
    sections: list[BlogSection]
    categories: list[CategoryLabelSummary]
    created_at: datetime
    updated_at: datetime


class BlogPage(PageMeta):
    blogs: list[BlogRead]


# ── Courses ───────────────────────────────────────────────────────────────────

class ModuleDetail(BaseModel):
    title: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)


class CourseCreate(CompanyScopedInput):
    slug: str = Field(..., min_length=1, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    long_description: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1, max_length=2048)
    audience: Audience = Audience.all
    level: str = Field(..., min_length=1, max_length=50)
    duration: str = Field(..., min_length=1, max_length=50)
    modules: int = Field(..., ge=0)
    learning_outcomes: list[str] = []
    module_details: list[ModuleDetail] = []
    category_ids: list[str] = []


class CourseUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    long_description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, min_length=1, max_length=2048)
    audience: Optional[Audience] = None
    level: Optional[str] = Field(None, min_length=1, max_length=50)
    duration: Optional[str] = Field(None, min_length=1, max_length=50)
    modules: Optional[int] = Field(None, ge=0)
    learning_outcomes: Optional[list[str]] = None
    module_details: Optional[list[ModuleDetail]] = None
    category_ids: Optional[list[str]] = None


class CourseRead(ReadModel):
    id: str
    company_id: str
    slug: str
    title: str
    description: str
    long_description: str
    image: str
    audience: Audience
    level: str
    duration: str
    modules: int
    learning_outcomes: list[str]
    module_details: list[ModuleDetail]
    categories: list[CategoryLabelSummary]
    created_at: datetime
    updated_at: datetime


class CoursePage(PageMeta):
    courses: list[CourseRead]
