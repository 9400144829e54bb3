"""
schemas/note.py
---------------
Pydantic models for client notes.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from crm_backend.schemas.common import InputModel, PageMeta, ReadModel


class NoteCreate(InputModel):
    client_id: str
    content: str = Field(..., min_length=1)


class NoteUpdate(InputModel):
    client_id: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)


class NoteRead(ReadModel):
    id: str
    client_id: str
    content: str
    created_at: datetime
    updated_at: datetime


class NotePage(PageMeta):
    notes: list[NoteRead]
