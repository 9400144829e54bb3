"""
services/note_service.py
------------------------
Free-text notes on a client. Tenant chain: note → client → company.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.models.note import Note
from crm_backend.schemas.note import NoteCreate, NoteUpdate
from crm_backend.services.client_service import clients
from crm_backend.services.crud import ScopedRepository
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

notes = ScopedRepository("note", search_fields=("content",))


class NoteService:

    @staticmethod
    async def create_note(db: AsyncSession, caller: Caller, data: NoteCreate) -> Note:
        await clients.get(db, caller, data.client_id, Operation.write)
        return await notes.create(db, data.model_dump())

    @staticmethod
    async def list_notes(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        client_id: Optional[str] = None,
    ) -> Page:
        return await notes.list(db, caller, spec, parent_id=client_id)

    @staticmethod
    async def get_note(db: AsyncSession, caller: Caller, note_id: str) -> Note:
        return await notes.get(db, caller, note_id)

    @staticmethod
    async def update_note(
        db: AsyncSession, caller: Caller, note_id: str, data: NoteUpdate
    ) -> Note:
        note = await notes.get(db, caller, note_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("client_id") and changes["client_id"] != note.client_id:
            await clients.get(db, caller, changes["client_id"], Operation.write)
        return await notes.update(db, note, changes)

    @staticmethod
    async def delete_note(db: AsyncSession, caller: Caller, note_id: str) -> None:
        note = await notes.get(db, caller, note_id, Operation.delete)
        await notes.delete(db, note)
