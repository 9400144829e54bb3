"""
schemas/cms.py
--------------
Pydantic models for CMS content, tags, categories and templates.

Slugs are optional on create: a missing slug is derived from the title /
name.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from crm_backend.models.content import ContentStatus, ContentVisibility
from crm_backend.models.template import TemplateType
from crm_backend.schemas.common import CompanyScopedInput, InputModel, PageMeta, ReadModel


# ── Content ───────────────────────────────────────────────────────────────────

class ContentCreate(CompanyScopedInput):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    body: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    template_id: Optional[str] = None
    featured_image_id: Optional[str] = None
    status: ContentStatus = ContentStatus.draft
    visibility: ContentVisibility = ContentVisibility.public
    password: Optional[str] = Field(None, min_length=4, max_length=128)
    publish_date: Optional[datetime] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None


class ContentUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    body: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    template_id: Optional[str] = None
    featured_image_id: Optional[str] = None
    status: Optional[ContentStatus] = None
    visibility: Optional[ContentVisibility] = None
    password: Optional[str] = Field(None, min_length=4, max_length=128)
    publish_date: Optional[datetime] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None


class ContentRead(ReadModel):
    id: str
    company_id: str
    title: str
    slug: str
    body: str
    excerpt: Optional[str] = None
    author_id: Optional[str] = None
    category_id: Optional[str] = None
    template_id: Optional[str] = None
    featured_image_id: Optional[str] = None
    status: ContentStatus
    visibility: ContentVisibility
    publish_date: Optional[datetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ContentPage(PageMeta):
    contents: list[ContentRead]


# ── Tags ──────────────────────────────────────────────────────────────────────

class TagCreate(CompanyScopedInput):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class TagUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class TagRead(ReadModel):
    id: str
    company_id: str
    name: str
    slug: str
    description: Optional[str] = None
    count: int
    created_at: datetime
    updated_at: datetime


class TagPage(PageMeta):
    tags: list[TagRead]


# ── Categories ────────────────────────────────────────────────────────────────

class CategoryCreate(CompanyScopedInput):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    featured_image_id: Optional[str] = None
    sort_order: int = 0
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None


class CategoryUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    featured_image_id: Optional[str] = None
    sort_order: Optional[int] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None


class CategoryRead(ReadModel):
    id: str
    company_id: str
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    featured_image_id: Optional[str] = None
    sort_order: int
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CategoryPage(PageMeta):
    categories: list[CategoryRead]


# ── Templates ─────────────────────────────────────────────────────────────────

class TemplateCreate(CompanyScopedInput):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    html_structure: str = Field(..., min_length=1)
    css_styles: Optional[str] = None
    js_scripts: Optional[str] = None
    template_type: TemplateType
    is_default: bool = False
    preview_image_id: Optional[str] = None


class TemplateUpdate(InputModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    html_structure: Optional[str] = Field(None, min_length=1)
    css_styles: Optional[str] = None
    js_scripts: Optional[str] = None
    template_type: Optional[TemplateType] = None
    is_default: Optional[bool] = None
    preview_image_id: Optional[str] = None


class TemplateRead(ReadModel):
    id: str
    company_id: str
    name: str
    slug: str
    description: Optional[str] = None
    html_structure: str
    css_styles: Optional[str] = None
    js_scripts: Optional[str] = None
    template_type: TemplateType
    is_default: bool
    preview_image_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TemplatePage(PageMeta):
    templates: list[TemplateRead]
