"""
schemas/lead.py
---------------
Pydantic models for leads and their status history.

``assigned_user_id`` on create / update hands the lead to another user of
the same company; only admins may do that.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from crm_backend.models.lead import LeadSource, LeadStatus
from crm_backend.schemas.client import ClientSummary
from crm_backend.schemas.common import InputModel, PageMeta, ReadModel
from crm_backend.schemas.interaction import InteractionRead
from crm_backend.schemas.task import TaskRead
from crm_backend.schemas.user import UserSummary


class LeadCreate(InputModel):
    client_id: str
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    source: LeadSource = LeadSource.website
    status: LeadStatus = LeadStatus.start_to_call
    estimated_value: float = Field(0, ge=0)
    assigned_user_id: Optional[str] = None


class LeadUpdate(InputModel):
    client_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    source: Optional[LeadSource] = None
    status: Optional[LeadStatus] = None
    estimated_value: Optional[float] = Field(None, ge=0)
    assigned_user_id: Optional[str] = None


class LeadRead(ReadModel):
    id: str
    client_id: str
    user_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    source: LeadSource
    status: LeadStatus
    estimated_value: float
    client: Optional[ClientSummary] = None
    owner: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class LeadStatusLogRead(ReadModel):
    id: str
    lead_id: str
    previous_status: Optional[str] = None
    new_status: str
    changed_by: Optional[str] = None
    changed_at: datetime
    duration_ms: int


class LeadDetail(LeadRead):
    interactions: list[InteractionRead] = []
    tasks: list[TaskRead] = []
    status_logs: list[LeadStatusLogRead] = []


class LeadPage(PageMeta):
    leads: list[LeadRead]


class LeadStatusLogPage(PageMeta):
    status_logs: list[LeadStatusLogRead]


# Relationships LeadRead reads; loaded up front because lazy loads are not
# available on an async session.
LEAD_RELATIONS = ("client", "owner")
