"""
schemas/contact.py
------------------
Pydantic models for client contacts.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from crm_backend.schemas.common import InputModel, PageMeta, ReadModel


class ContactCreate(InputModel):
    client_id: str
    name: str = Field(..., min_length=1, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    job_title: Optional[str] = Field(None, max_length=255)


class ContactUpdate(InputModel):
    client_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    job_title: Optional[str] = Field(None, max_length=255)


class ContactRead(ReadModel):
    id: str
    client_id: str
    name: str
    first_name: str
    email: str
    phone: Optional[str] = None
    job_title: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ContactPage(PageMeta):
    contacts: list[ContactRead]
