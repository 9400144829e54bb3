"""
schemas/interaction.py
----------------------
Pydantic models for interactions.
"""

from datetime import datetime
from typing import Optional

from crm_backend.models.interaction import InteractionType
from crm_backend.schemas.common import InputModel, PageMeta, ReadModel


class InteractionCreate(InputModel):
    lead_id: str
    type: InteractionType = InteractionType.call
    occurred_at: Optional[datetime] = None
    description: Optional[str] = None
    contact_ids: list[str] = []


class InteractionUpdate(InputModel):
    lead_id: Optional[str] = None
    type: Optional[InteractionType] = None
    occurred_at: Optional[datetime] = None
    description: Optional[str] = None


class InteractionRead(ReadModel):
    id: str
    lead_id: str
    type: InteractionType
    occurred_at: datetime
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class InteractionPage(PageMeta):
    interactions: list[InteractionRead]
