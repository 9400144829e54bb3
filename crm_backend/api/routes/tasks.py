"""
api/routes/tasks.py
-------------------
Tasks attached to interactions.

GET /api/tasks  - filters: interaction_id, status, personal (tasks assigned to me)
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query, status

from crm_backend.dependencies import CurrentCaller, DbSession, ListParams
from crm_backend.models.task import TaskStatus
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.task import TaskCreate, TaskPage, TaskRead, TaskUpdate
from crm_backend.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(body: TaskCreate, db: DbSession, caller: CurrentCaller) -> TaskRead:
    return TaskRead.model_validate(await TaskService.create_task(db, caller, body))


@router.get("", response_model=TaskPage, summary="List tasks")
async def list_tasks(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    interaction_id: Optional[str] = None,
    task_status: Annotated[Optional[TaskStatus], Query(alias="status")] = None,
    personal: bool = False,
) -> TaskPage:
    page = await TaskService.list_tasks(
        db,
        caller,
        spec,
        interaction_id=interaction_id,
        status=task_status,
        personal=personal,
    )
    return TaskPage(tasks=[TaskRead.model_validate(t) for t in page.items], **page.meta())


@router.get("/{task_id}", response_model=TaskRead, summary="Get a task")
async def get_task(task_id: str, db: DbSession, caller: CurrentCaller) -> TaskRead:
    return TaskRead.model_validate(await TaskService.get_task(db, caller, task_id))


@router.put("/{task_id}", response_model=TaskRead, summary="Update a task")
async def update_task(
    task_id: str, body: TaskUpdate, db: DbSession, caller: CurrentCaller
) -> TaskRead:
    return TaskRead.model_validate(await TaskService.update_task(db, caller, task_id, body))


@router.delete("/{task_id}", response_model=MessageResponse, summary="Delete a task")
async def delete_task(task_id: str, db: DbSession, caller: CurrentCaller) -> MessageResponse:
    await TaskService.delete_task(db, caller, task_id)
    return MessageResponse(message="Task deleted")
