"""
api/routes/leads.py
-------------------
Sales leads.

GET /api/leads                     - filters: client_id, status, personal
GET /api/leads/{id}                - lead with interactions, tasks and status history
GET /api/leads/{id}/status-logs    - paginated status history

Only admins may assign a lead to someone other than themselves.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from crm_backend.dependencies import SALES_STAFF, CurrentCaller, DbSession, ListParams, require_roles
from crm_backend.models.lead import LeadStatus
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.interaction import InteractionRead
from crm_backend.schemas.lead import (
    LeadCreate,
    LeadDetail,
    LeadPage,
    LeadRead,
    LeadStatusLogPage,
    LeadStatusLogRead,
    LeadUpdate,
)
from crm_backend.schemas.task import TaskRead
from crm_backend.services.lead_service import LeadService

router = APIRouter(prefix="/api/leads", tags=["Leads"])


@router.post(
    "",
    response_model=LeadRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a lead",
)
async def create_lead(body: LeadCreate, db: DbSession, caller: CurrentCaller) -> LeadRead:
    try:
        lead = await LeadService.create_lead(db, caller, body)
        return LeadRead.model_validate(lead)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=LeadPage, summary="List leads")
async def list_leads(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    client_id: Optional[str] = None,
    lead_status: Annotated[Optional[LeadStatus], Query(alias="status")] = None,
    personal: bool = False,
) -> LeadPage:
    page = await LeadService.list_leads(
        db, caller, spec, client_id=client_id, status=lead_status, personal=personal
    )
    return LeadPage(leads=[LeadRead.model_validate(lead) for lead in page.items], **page.meta())


@router.get("/{lead_id}", response_model=LeadDetail, summary="Get a lead with its activity")
async def get_lead(lead_id: str, db: DbSession, caller: CurrentCaller) -> LeadDetail:
    view = await LeadService.get_lead_detail(db, caller, lead_id)
    # Built field by field: the ORM collections are not loaded on the lead itself
    return LeadDetail(
        **LeadRead.model_validate(view.lead).model_dump(),
        interactions=[InteractionRead.model_validate(i) for i in view.interactions],
        tasks=[TaskRead.model_validate(t) for t in view.tasks],
        status_logs=[LeadStatusLogRead.model_validate(log) for log in view.status_logs],
    )


@router.get(
    "/{lead_id}/status-logs",
    response_model=LeadStatusLogPage,
    summary="List the status history of a lead",
)
async def list_status_logs(
    lead_id: str, db: DbSession, caller: CurrentCaller, spec: ListParams
) -> LeadStatusLogPage:
    page = await LeadService.list_status_logs(db, caller, lead_id, spec)
    return LeadStatusLogPage(
        status_logs=[LeadStatusLogRead.model_validate(log) for log in page.items],
        **page.meta(),
    )


@router.put("/{lead_id}", response_model=LeadRead, summary="Update a lead")
async def update_lead(
    lead_id: str, body: LeadUpdate, db: DbSession, caller: CurrentCaller
) -> LeadRead:
    try:
        lead = await LeadService.update_lead(db, caller, lead_id, body)
        return LeadRead.model_validate(lead)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete(
    "/{lead_id}",
    response_model=MessageResponse,
    summary="Delete a lead",
    dependencies=[Depends(require_roles(*SALES_STAFF))],
)
async def delete_lead(lead_id: str, db: DbSession, caller: CurrentCaller) -> MessageResponse:
    await LeadService.delete_lead(db, caller, lead_id)
    return MessageResponse(message="Lead deleted")
