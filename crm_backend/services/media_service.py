"""
services/media_service.py
-------------------------
Media library records. The files themselves live in an external object
store; only their metadata is managed here.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.models.media import Media
from crm_backend.schemas.media import MediaCreate, MediaUpdate
from crm_backend.services.crud import ScopedRepository, resolve_company
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

media = ScopedRepository(
    "media",
    search_fields=("title", "alt_text", "caption", "description"),
    default_sort="created_at:desc",
)


class MediaService:

    @staticmethod
    async def create_media(db: AsyncSession, caller: Caller, data: MediaCreate) -> Media:
        values = data.model_dump()
        values["company_id"] = await resolve_company(db, caller, data.company_id)
        values["uploaded_by"] = caller.id
        return await media.create(db, values)

    @staticmethod
    async def list_media(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        media_type: Optional[str] = None,
        mime_type: Optional[str] = None,
        personal: bool = False,
    ) -> Page:
        return await media.list(
            db,
            caller,
            spec,
            personal=personal,
            filters={"media_type": media_type, "mime_type": mime_type},
        )

    @staticmethod
    async def get_media(db: AsyncSession, caller: Caller, media_id: str) -> Media:
        return await media.get(db, caller, media_id)

    @staticmethod
    async def update_media(
        db: AsyncSession, caller: Caller, media_id: str, data: MediaUpdate
    ) -> Media:
        record = await media.get(db, caller, media_id, Operation.write)
        return await media.update(db, record, data.model_dump(exclude_unset=True))

    @staticmethod
    async def delete_media(db: AsyncSession, caller: Caller, media_id: str) -> None:
        record = await media.get(db, caller, media_id, Operation.delete)
        await media.delete(db, record)
