"""
api/routes/public.py
--------------------
Unauthenticated read access to published blogs and courses.

GET /api/blogs            ?category=<id or slug>&audience=&company_id=
GET /api/blogs/{slug}
GET /api/courses          same filters
GET /api/courses/{slug}
"""

from typing import Optional

from fastapi import APIRouter

from crm_backend.dependencies import DbSession, ListParams
from crm_backend.models.blog import Audience
from crm_backend.schemas.blog import BlogPage, BlogRead, CoursePage, CourseRead
from crm_backend.services.publication_service import blogs, courses

router = APIRouter(prefix="/api", tags=["Public"])


@router.get("/blogs", response_model=BlogPage, summary="List blogs")
async def list_blogs(
    db: DbSession,
    spec: ListParams,
    category: Optional[str] = None,
    audience: Optional[Audience] = None,
    company_id: Optional[str] = None,
) -> BlogPage:
    page = await blogs.list_public(
        db, spec, audience=audience and audience.value, category=category, company_id=company_id
    )
    return BlogPage(blogs=[BlogRead.model_validate(b) for b in page.items], **page.meta())


@router.get("/blogs/{slug}", response_model=BlogRead, summary="Get a blog by slug")
async def get_blog(slug: str, db: DbSession, company_id: Optional[str] = None) -> BlogRead:
    return BlogRead.model_validate(await blogs.get_public(db, slug, company_id))


@router.get("/courses", response_model=CoursePage, summary="List courses")
async def list_courses(
    db: DbSession,
    spec: ListParams,
    category: Optional[str] = None,
    audience: Optional[Audience] = None,
    company_id: Optional[str] = None,
) -> CoursePage:
    page = await courses.list_public(
        db, spec, audience=audience and audience.value, category=category, company_id=company_id
    )
    return CoursePage(courses=[CourseRead.model_validate(c) for c in page.items], **page.meta())


@router.get("/courses/{slug}", response_model=CourseRead, summary="Get a course by slug")
async def get_course(slug: str, db: DbSession, company_id: Optional[str] = None) -> CourseRead:
    return CourseRead.model_validate(await courses.get_public(db, slug, company_id))
