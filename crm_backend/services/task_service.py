"""
services/task_service.py
------------------------
Business logic for tasks. Tenant chain: task → interaction → lead → client
→ company, the deepest chain in the system.

A task belongs to the caller unless an admin hands it to another user of
the same company.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.models.task import Task
from crm_backend.schemas.task import TASK_RELATIONS, TaskCreate, TaskUpdate
from crm_backend.services.crud import ScopedRepository
from crm_backend.services.interaction_service import interactions
from crm_backend.services.user_service import check_assignee
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

tasks = ScopedRepository(
    "task",
    search_fields=("title", "description"),
    default_sort="updated_at:desc",
    populate=TASK_RELATIONS,
)


class TaskService:

    @staticmethod
    async def create_task(db: AsyncSession, caller: Caller, data: TaskCreate) -> Task:
        interaction = await interactions.get(db, caller, data.interaction_id, Operation.write)
        tenant_id = await interactions.tenant_of(db, interaction)
        assignee_id = data.assigned_to or caller.id
        await check_assignee(db, caller, assignee_id, tenant_id)

        values = data.model_dump()
        values["assigned_to"] = assignee_id
        return await tasks.create(db, values, populate=TASK_RELATIONS)

    @staticmethod
    async def list_tasks(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        interaction_id: Optional[str] = None,
        status: Optional[str] = None,
        personal: bool = False,
    ) -> Page:
        return await tasks.list(
            db,
            caller,
            spec,
            parent_id=interaction_id,
            personal=personal,
            filters={"status": status},
        )

    @staticmethod
    async def get_task(db: AsyncSession, caller: Caller, task_id: str) -> Task:
        return await tasks.get(db, caller, task_id, populate=TASK_RELATIONS)

    @staticmethod
    async def update_task(
        db: AsyncSession, caller: Caller, task_id: str, data: TaskUpdate
    ) -> Task:
        task = await tasks.get(db, caller, task_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)

        interaction_id = changes.get("interaction_id") or task.interaction_id
        if "interaction_id" in changes:
            changes["interaction_id"] = interaction_id
        interaction = await interactions.get(
            db,
            caller,
            interaction_id,
            Operation.write if interaction_id != task.interaction_id else Operation.read,
        )

        if "assigned_to" in changes:
            changes["assigned_to"] = changes["assigned_to"] or caller.id
            tenant_id = await interactions.tenant_of(db, interaction)
            await check_assignee(db, caller, changes["assigned_to"], tenant_id)

        return await tasks.update(db, task, changes, populate=TASK_RELATIONS)

    @staticmethod
    async def delete_task(db: AsyncSession, caller: Caller, task_id: str) -> None:
        task = await tasks.get(db, caller, task_id, Operation.delete)
        await tasks.delete(db, task)
