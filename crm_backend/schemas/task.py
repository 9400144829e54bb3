"""
schemas/task.py
---------------
Pydantic models for tasks.

TaskRead embeds the whole chain up to the client (interaction → lead →
client) so the UI can show where a task comes from without extra calls.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from crm_backend.models.interaction import InteractionType
from crm_backend.models.task import TaskStatus
from crm_backend.schemas.client import ClientSummary
from crm_backend.schemas.common import InputModel, PageMeta, ReadModel
from crm_backend.schemas.user import UserSummary


class TaskCreate(InputModel):
    interaction_id: str
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending
    due_date: datetime
    assigned_to: Optional[str] = Field(
        None, description="Defaults to the caller; only admins may pick someone else"
    )


class TaskUpdate(InputModel):
    interaction_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None


class TaskLead(ReadModel):
    id: str
    name: str
    client: Optional[ClientSummary] = None


class TaskInteraction(ReadModel):
    id: str
    type: InteractionType
    occurred_at: datetime
    lead: Optional[TaskLead] = None


class TaskRead(ReadModel):
    id: str
    interaction_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: datetime
    assigned_to: Optional[str] = None
    interaction: Optional[TaskInteraction] = None
    assignee: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class TaskPage(PageMeta):
    tasks: list[TaskRead]


TASK_RELATIONS = ("interaction.lead.client", "assignee")
