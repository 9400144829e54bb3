"""
api/routes/media.py
-------------------
Media library metadata. Uploading the files themselves is handled by the
object store the ``file_url`` points to.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status

from crm_backend.dependencies import ADMINS, STAFF, CurrentCaller, DbSession, ListParams, require_roles
from crm_backend.models.media import MediaType
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.media import MediaCreate, MediaPage, MediaRead, MediaUpdate
from crm_backend.services.media_service import MediaService
from crm_backend.tenancy.caller import Caller

router = APIRouter(prefix="/api/media", tags=["Media"])


@router.post(
    "",
    response_model=MediaRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a media file",
)
async def create_media(
    body: MediaCreate,
    db: DbSession,
    caller: Annotated[Caller, Depends(require_roles(*STAFF))],
) -> MediaRead:
    return MediaRead.model_validate(await MediaService.create_media(db, caller, body))


@router.get("", response_model=MediaPage, summary="List media")
async def list_media(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    media_type: Optional[MediaType] = None,
    mime_type: Optional[str] = None,
    personal: bool = False,
) -> MediaPage:
    page = await MediaService.list_media(
        db, caller, spec, media_type=media_type, mime_type=mime_type, personal=personal
    )
    return MediaPage(media=[MediaRead.model_validate(m) for m in page.items], **page.meta())


@router.get("/{media_id}", response_model=MediaRead, summary="Get a media record")
async def get_media(media_id: str, db: DbSession, caller: CurrentCaller) -> MediaRead:
    return MediaRead.model_validate(await MediaService.get_media(db, caller, media_id))


@router.put("/{media_id}", response_model=MediaRead, summary="Update media metadata")
async def update_media(
    media_id: str,
    body: MediaUpdate,
    db: DbSession,
    caller: Annotated[Caller, Depends(require_roles(*STAFF))],
) -> MediaRead:
    return MediaRead.model_validate(await MediaService.update_media(db, caller, media_id, body))


@router.delete("/{media_id}", response_model=MessageResponse, summary="Delete a media record")
async def delete_media(
    media_id: str,
    db: DbSession,
    caller: Annotated[Caller, Depends(require_roles(*ADMINS))],
) -> MessageResponse:
    await MediaService.delete_media(db, caller, media_id)
    return MessageResponse(message="Media deleted")
