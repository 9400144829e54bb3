"""
schemas/media.py
----------------
Pydantic models for media library entries (metadata only).
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from crm_backend.models.media import MediaType
from crm_backend.schemas.common import CompanyScopedInput, InputModel, PageMeta, ReadModel


class MediaCreate(CompanyScopedInput):
    title: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1, max_length=2048)
    mime_type: str = Field(..., min_length=1, max_length=255)
    file_size: int = Field(..., ge=0)
    media_type: MediaType
    alt_text: Optional[str] = Field(None, max_length=255)
    caption: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    tags: list[str] = []


class MediaUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    alt_text: Optional[str] = Field(None, max_length=255)
    caption: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    tags: Optional[list[str]] = None


class MediaRead(ReadModel):
    id: str
    company_id: str
    title: str
    file_url: str
    mime_type: str
    file_size: int
    media_type: MediaType
    alt_text: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    uploaded_by: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class MediaPage(PageMeta):
    media: list[MediaRead]
