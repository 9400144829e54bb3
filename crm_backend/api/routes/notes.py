"""
api/routes/notes.py
-------------------
Notes on a client. ``client_id`` narrows the list to one client.
"""

from typing import Optional

from fastapi import APIRouter, status

from crm_backend.dependencies import CurrentCaller, DbSession, ListParams
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.note import NoteCreate, NotePage, NoteRead, NoteUpdate
from crm_backend.services.note_service import NoteService

router = APIRouter(prefix="/api/notes", tags=["Notes"])


@router.post(
    "",
    response_model=NoteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a note",
)
async def create_note(body: NoteCreate, db: DbSession, caller: CurrentCaller) -> NoteRead:
    return NoteRead.model_validate(await NoteService.create_note(db, caller, body))


@router.get("", response_model=NotePage, summary="List notes")
async def list_notes(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    client_id: Optional[str] = None,
) -> NotePage:
    page = await NoteService.list_notes(db, caller, spec, client_id=client_id)
    return NotePage(notes=[NoteRead.model_validate(n) for n in page.items], **page.meta())


@router.get("/{note_id}", response_model=NoteRead, summary="Get a note")
async def get_note(note_id: str, db: DbSession, caller: CurrentCaller) -> NoteRead:
    return NoteRead.model_validate(await NoteService.get_note(db, caller, note_id))


@router.put("/{note_id}", response_model=NoteRead, summary="Update a note")
async def update_note(
    note_id: str, body: NoteUpdate, db: DbSession, caller: CurrentCaller
) -> NoteRead:
    return NoteRead.model_validate(await NoteService.update_note(db, caller, note_id, body))


@router.delete("/{note_id}", response_model=MessageResponse, summary="Delete a note")
async def delete_note(note_id: str, db: DbSession, caller: CurrentCaller) -> MessageResponse:
    await NoteService.delete_note(db, caller, note_id)
    return MessageResponse(message="Note deleted")
