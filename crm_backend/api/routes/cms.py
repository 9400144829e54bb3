"""
api/routes/cms.py
-----------------
Content management, all under /api/cms and scoped to the caller's company.

/contents            pages and posts; tags attached via /contents/{id}/tags/{tag_id}
/tags                plus /tags/usage/{min_count} and /tags/content/{content_id}
/categories          hierarchical; ?parent_id= or ?root=true
/templates           ?template_type= and ?is_default=
/blog-categories     /blogs
/course-categories   /courses

Create / update: super admin, admin, manager. Delete: super admin, admin.
"""

from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from crm_backend.dependencies import (
    ADMINS,
    STAFF,
    CurrentCaller,
    DbSession,
    ListParams,
    require_roles,
)
from crm_backend.models.blog import Audience
from crm_backend.models.content import ContentStatus, ContentVisibility
from crm_backend.models.template import TemplateType
from crm_backend.schemas.blog import (
    BlogCategoryPage,
    BlogCreate,
    BlogPage,
    BlogRead,
    BlogUpdate,
    CategoryLabelCreate,
    CategoryLabelRead,
    CategoryLabelUpdate,
    CourseCategoryPage,
    CourseCreate,
    CoursePage,
    CourseRead,
    CourseUpdate,
)
from crm_backend.schemas.cms import (
    CategoryCreate,
    CategoryPage,
    CategoryRead,
    CategoryUpdate,
    ContentCreate,
    ContentPage,
    ContentRead,
    ContentUpdate,
    TagCreate,
    TagPage,
    TagRead,
    TagUpdate,
    TemplateCreate,
    TemplatePage,
    TemplateRead,
    TemplateUpdate,
)
from crm_backend.schemas.common import MessageResponse
from crm_backend.services.category_service import CategoryService
from crm_backend.services.content_service import ContentService
from crm_backend.services.label_service import LabelService, blog_categories, course_categories
from crm_backend.services.publication_service import PublicationService, blogs, courses
from crm_backend.services.tag_service import TagService
from crm_backend.services.template_service import TemplateService
from crm_backend.tenancy.caller import Caller

router = APIRouter(prefix="/api/cms", tags=["CMS"])

Editor = Annotated[Caller, Depends(require_roles(*STAFF))]
Admin = Annotated[Caller, Depends(require_roles(*ADMINS))]


def _conflict(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


# ── Contents ──────────────────────────────────────────────────────────────────

@router.post(
    "/contents",
    response_model=ContentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create content",
)
async def create_content(body: ContentCreate, db: DbSession, caller: Editor) -> ContentRead:
    try:
        return ContentRead.model_validate(await ContentService.create_content(db, caller, body))
    except ValueError as exc:
        raise _conflict(exc)


@router.get("/contents", response_model=ContentPage, summary="List content")
async def list_contents(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    content_status: Annotated[Optional[ContentStatus], Query(alias="status")] = None,
    visibility: Optional[ContentVisibility] = None,
    category_id: Optional[str] = None,
    template_id: Optional[str] = None,
    author_id: Optional[str] = None,
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    publish_from: Optional[datetime] = None,
    publish_to: Optional[datetime] = None,
    personal: bool = False,
) -> ContentPage:
    page = await ContentService.list_contents(
        db,
        caller,
        spec,
        status=content_status,
        visibility=visibility,
        category_id=category_id,
        template_id=template_id,
        author_id=author_id,
        created_from=created_from,
        created_to=created_to,
        publish_from=publish_from,
        publish_to=publish_to,
        personal=personal,
    )
    return ContentPage(contents=[ContentRead.model_validate(c) for c in page.items], **page.meta())


@router.get("/contents/{content_id}", response_model=ContentRead, summary="Get content")
async def get_content(content_id: str, db: DbSession, caller: CurrentCaller) -> ContentRead:
    return ContentRead.model_validate(await ContentService.get_content(db, caller, content_id))


@router.put("/contents/{content_id}", response_model=ContentRead, summary="Update content")
async def update_content(
    content_id: str, body: ContentUpdate, db: DbSession, caller: Editor
) -> ContentRead:
    try:
        content = await ContentService.update_content(db, caller, content_id, body)
        return ContentRead.model_validate(content)
    except ValueError as exc:
        raise _conflict(exc)


@router.delete("/contents/{content_id}", response_model=MessageResponse, summary="Delete content")
async def delete_content(content_id: str, db: DbSession, caller: Admin) -> MessageResponse:
    await ContentService.delete_content(db, caller, content_id)
    return MessageResponse(message="Content deleted")


@router.post(
    "/contents/{content_id}/tags/{tag_id}",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Attach a tag to content",
)
async def attach_tag(content_id: str, tag_id: str, db: DbSession, caller: Editor) -> TagRead:
    try:
        return TagRead.model_validate(await TagService.attach(db, caller, content_id, tag_id))
    except ValueError as exc:
        raise _conflict(exc)


@router.delete(
    "/contents/{content_id}/tags/{tag_id}",
    response_model=TagRead,
    summary="Detach a tag from content",
)
async def detach_tag(content_id: str, tag_id: str, db: DbSession, caller: Editor) -> TagRead:
    return TagRead.model_validate(await TagService.detach(db, caller, content_id, tag_id))


# ── Tags ──────────────────────────────────────────────────────────────────────

@router.post(
    "/tags",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tag",
)
async def create_tag(body: TagCreate, db: DbSession, caller: Editor) -> TagRead:
    try:
        return TagRead.model_validate(await TagService.create_tag(db, caller, body))
    except ValueError as exc:
        raise _conflict(exc)


@router.get("/tags", response_model=TagPage, summary="List tags")
async def list_tags(db: DbSession, caller: CurrentCaller, spec: ListParams) -> TagPage:
    page = await TagService.list_tags(db, caller, spec)
    return TagPage(tags=[TagRead.model_validate(t) for t in page.items], **page.meta())


@router.get(
    "/tags/usage/{min_count}",
    response_model=TagPage,
    summary="List tags used at least min_count times",
)
async def list_tags_by_usage(
    min_count: int, db: DbSession, caller: CurrentCaller, spec: ListParams
) -> TagPage:
    page = await TagService.list_by_usage(db, caller, spec, min_count)
    return TagPage(tags=[TagRead.model_validate(t) for t in page.items], **page.meta())


@router.get(
    "/tags/content/{content_id}",
    response_model=TagPage,
    summary="List the tags of a content item",
)
async def list_tags_for_content(
    content_id: str, db: DbSession, caller: CurrentCaller, spec: ListParams
) -> TagPage:
    page = await TagService.list_for_content(db, caller, content_id, spec)
    return TagPage(tags=[TagRead.model_validate(t) for t in page.items], **page.meta())


@router.get("/tags/{tag_id}", response_model=TagRead, summary="Get a tag")
async def get_tag(tag_id: str, db: DbSession, caller: CurrentCaller) -> TagRead:
    return TagRead.model_validate(await TagService.get_tag(db, caller, tag_id))


@router.put("/tags/{tag_id}", response_model=TagRead, summary="Update a tag")
async def update_tag(tag_id: str, body: TagUpdate, db: DbSession, caller: Editor) -> TagRead:
    try:
        return TagRead.model_validate(await TagService.update_tag(db, caller, tag_id, body))
    except ValueError as exc:
        raise _conflict(exc)


@router.delete("/tags/{tag_id}", response_model=MessageResponse, summary="Delete a tag")
async def delete_tag(tag_id: str, db: DbSession, caller: Admin) -> MessageResponse:
    await TagService.delete_tag(db, caller, tag_id)
    return MessageResponse(message="Tag deleted")


# ── Categories ────────────────────────────────────────────────────────────────

@router.post(
    "/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(body: CategoryCreate, db: DbSession, caller: Editor) -> CategoryRead:
    try:
        return CategoryRead.model_validate(await CategoryService.create_category(db, caller, body))
    except ValueError as exc:
        raise _conflict(exc)


@router.get("/categories", response_model=CategoryPage, summary="List categories")
async def list_categories(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    parent_id: Optional[str] = None,
    root: bool = False,
) -> CategoryPage:
    page = await CategoryService.list_categories(
        db, caller, spec, parent_id=parent_id, root_only=root
    )
    return CategoryPage(
        categories=[CategoryRead.model_validate(c) for c in page.items], **page.meta()
    )


@router.get("/categories/{category_id}", response_model=CategoryRead, summary="Get a category")
async def get_category(category_id: str, db: DbSession, caller: CurrentCaller) -> CategoryRead:
    return CategoryRead.model_validate(await CategoryService.get_category(db, caller, category_id))


@router.put("/categories/{category_id}", response_model=CategoryRead, summary="Update a category")
async def update_category(
    category_id: str, body: CategoryUpdate, db: DbSession, caller: Editor
) -> CategoryRead:
    try:
        category = await CategoryService.update_category(db, caller, category_id, body)
        return CategoryRead.model_validate(category)
    except ValueError as exc:
        raise _conflict(exc)


@router.delete(
    "/categories/{category_id}", response_model=MessageResponse, summary="Delete a category"
)
async def delete_category(category_id: str, db: DbSession, caller: Admin) -> MessageResponse:
    await CategoryService.delete_category(db, caller, category_id)
    return MessageResponse(message="Category deleted")


# ── Templates ─────────────────────────────────────────────────────────────────

@router.post(
    "/templates",
    response_model=TemplateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a template",
)
async def create_template(body: TemplateCreate, db: DbSession, caller: Editor) -> TemplateRead:
    try:
        return TemplateRead.model_validate(await TemplateService.create_template(db, caller, body))
    except ValueError as exc:
        raise _conflict(exc)


@router.get("/templates", response_model=TemplatePage, summary="List templates")
async def list_templates(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    template_type: Optional[TemplateType] = None,
    is_default: Optional[bool] = None,
    personal: bool = False,
) -> TemplatePage:
    page = await TemplateService.list_templates(
        db, caller, spec, template_type=template_type, is_default=is_default, personal=personal
    )
    return TemplatePage(
        templates=[TemplateRead.model_validate(t) for t in page.items], **page.meta()
    )


@router.get("/templates/{template_id}", response_model=TemplateRead, summary="Get a template")
async def get_template(template_id: str, db: DbSession, caller: CurrentCaller) -> TemplateRead:
    return TemplateRead.model_validate(await TemplateService.get_template(db, caller, template_id))


@router.put("/templates/{template_id}", response_model=TemplateRead, summary="Update a template")
async def update_template(
    template_id: str, body: TemplateUpdate, db: DbSession, caller: Editor
) -> TemplateRead:
    try:
        template = await TemplateService.update_template(db, caller, template_id, body)
        return TemplateRead.model_validate(template)
    except ValueError as exc:
        raise _conflict(exc)


@router.delete(
    "/templates/{template_id}", response_model=MessageResponse, summary="Delete a template"
)
async def delete_template(template_id: str, db: DbSession, caller: Admin) -> MessageResponse:
    await TemplateService.delete_template(db, caller, template_id)
    return MessageResponse(message="Template deleted")


# ── Blog / course categories ──────────────────────────────────────────────────

def _add_label_routes(path: str, service: LabelService, page_model: type, key: str) -> None:
    label = service.repository.label

    @router.post(
        path,
        response_model=CategoryLabelRead,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {label.lower()}",
    )
    async def create(body: CategoryLabelCreate, db: DbSession, caller: Editor):
        try:
            return CategoryLabelRead.model_validate(await service.create(db, caller, body))
        except ValueError as exc:
            raise _conflict(exc)

    @router.get(path, response_model=page_model, summary=f"List {label.lower()} entries")
    async def list_labels(db: DbSession, caller: CurrentCaller, spec: ListParams):
        page = await service.list(db, caller, spec)
        return page_model(
            **{key: [CategoryLabelRead.model_validate(r) for r in page.items]}, **page.meta()
        )

    @router.get(f"{path}/{{record_id}}", response_model=CategoryLabelRead, summary=f"Get a {label.lower()}")
    async def get(record_id: str, db: DbSession, caller: CurrentCaller):
        return CategoryLabelRead.model_validate(await service.get(db, caller, record_id))

    @router.put(f"{path}/{{record_id}}", response_model=CategoryLabelRead, summary=f"Update a {label.lower()}")
    async def update(record_id: str, body: CategoryLabelUpdate, db: DbSession, caller: Editor):
        try:
            return CategoryLabelRead.model_validate(await service.update(db, caller, record_id, body))
        except ValueError as exc:
            raise _conflict(exc)

    @router.delete(f"{path}/{{record_id}}", response_model=MessageResponse, summary=f"Delete a {label.lower()}")
    async def delete(record_id: str, db: DbSession, caller: Admin):
        await service.delete(db, caller, record_id)
        return MessageResponse(message=f"{label} deleted")


_add_label_routes("/blog-categories", blog_categories, BlogCategoryPage, "blog_categories")
_add_label_routes("/course-categories", course_categories, CourseCategoryPage, "course_categories")


# ── Blogs / courses ───────────────────────────────────────────────────────────

def _add_publication_routes(
    path: str,
    service: PublicationService,
    create_model: type,
    update_model: type,
    read_model: type,
    page_model: type,
    key: str,
) -> None:
    label = service.repository.label

    @router.post(
        path,
        response_model=read_model,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {label.lower()}",
    )
    async def create(body: create_model, db: DbSession, caller: Editor):
        try:
            return read_model.model_validate(await service.create(db, caller, body))
        except ValueError as exc:
            raise _conflict(exc)

    @router.get(path, response_model=page_model, summary=f"List {label.lower()} entries")
    async def list_records(
        db: DbSession,
        caller: CurrentCaller,
        spec: ListParams,
        audience: Optional[Audience] = None,
        category: Optional[str] = None,
    ):
        page = await service.list(db, caller, spec, audience=audience, category=category)
        return page_model(**{key: [read_model.model_validate(r) for r in page.items]}, **page.meta())

    @router.get(f"{path}/{{record_id}}", response_model=read_model, summary=f"Get a {label.lower()}")
    async def get(record_id: str, db: DbSession, caller: CurrentCaller):
        return read_model.model_validate(await service.get(db, caller, record_id))

    @router.put(f"{path}/{{record_id}}", response_model=read_model, summary=f"Update a {label.lower()}")
    async def update(record_id: str, body: update_model, db: DbSession, caller: Editor):
        try:
            return read_model.model_validate(await service.update(db, caller, record_id, body))
        except ValueError as exc:
            raise _conflict(exc)

    @router.delete(f"{path}/{{record_id}}", response_model=MessageResponse, summary=f"Delete a {label.lower()}")
    async def delete(record_id: str, db: DbSession, caller: Admin):
        await service.delete(db, caller, record_id)
        return MessageResponse(message=f"{label} deleted")


_add_publication_routes("/blogs", blogs, BlogCreate, BlogUpdate, BlogRead, BlogPage, "blogs")
_add_publication_routes(
    "/courses", courses, CourseCreate, CourseUpdate, CourseRead, CoursePage, "courses"
)
