"""
services/lead_service.py
------------------------
Business logic for sales leads. Tenant chain: lead → client → company.

Status history:
  Every status a lead enters is recorded as a LeadStatusLog row, the first
  one when the lead is created. ``duration_ms`` on a row is the time the lead
  spent in the previous status. The log row is written on the same session
  as the lead change, so both are committed (or rolled back) together.
"""

from datetime import datetime, timezone
from typing import NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.logging import get_logger
from crm_backend.models.interaction import Interaction
from crm_backend.models.lead import Lead, LeadStatusLog
from crm_backend.models.task import Task
from crm_backend.schemas.lead import LEAD_RELATIONS, LeadCreate, LeadUpdate
from crm_backend.schemas.task import TASK_RELATIONS
from crm_backend.services.client_service import clients
from crm_backend.services.crud import ScopedRepository
from crm_backend.services.user_service import check_assignee
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec, loader_options

logger = get_logger(__name__)

leads = ScopedRepository(
    "lead",
    search_fields=("name", "source", "status"),
    default_sort="created_at:desc",
    populate=LEAD_RELATIONS,
)
status_logs = ScopedRepository("lead_status_log", default_sort="changed_at:desc")


class LeadDetailView(NamedTuple):
    lead: Lead
    interactions: list[Interaction]
    tasks: list[Task]
    status_logs: list[LeadStatusLog]


def _elapsed_ms(since: datetime, now: datetime) -> int:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return max(0, int((now - since).total_seconds() * 1000))


async def _record_status(
    db: AsyncSession,
    lead: Lead,
    previous_status: Optional[str],
    changed_by: str,
) -> LeadStatusLog:
    now = datetime.now(timezone.utc)
    duration_ms = 0
    if previous_status is not None:
        result = await db.execute(
            select(LeadStatusLog.changed_at)
            .where(LeadStatusLog.lead_id == lead.id)
            .order_by(LeadStatusLog.changed_at.desc())
            .limit(1)
        )
        entered_at = result.scalar_one_or_none() or lead.created_at
        duration_ms = _elapsed_ms(entered_at, now)

    log = await status_logs.create(
        db,
        {
            "lead_id": lead.id,
            "previous_status": previous_status,
            "new_status": lead.status,
            "changed_by": changed_by,
            "changed_at": now,
            "duration_ms": duration_ms,
        },
    )
    logger.info(
        "Lead status changed",
        lead_id=lead.id,
        previous_status=previous_status,
        new_status=lead.status,
        duration_ms=duration_ms,
    )
    return log


class LeadService:

    @staticmethod
    async def create_lead(db: AsyncSession, caller: Caller, data: LeadCreate) -> Lead:
        client = await clients.get(db, caller, data.client_id, Operation.write)
        owner_id = data.assigned_user_id or caller.id
        await check_assignee(db, caller, owner_id, client.company_id)

        values = data.model_dump(exclude={"assigned_user_id"})
        values["user_id"] = owner_id
        lead = await leads.create(db, values)
        await _record_status(db, lead, None, caller.id)
        return await leads.reload(db, lead.id, LEAD_RELATIONS)

    @staticmethod
    async def list_leads(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        personal: bool = False,
    ) -> Page:
        return await leads.list(
            db,
            caller,
            spec,
            parent_id=client_id,
            personal=personal,
            filters={"status": status},
        )

    @staticmethod
    async def get_lead(db: AsyncSession, caller: Caller, lead_id: str) -> Lead:
        return await leads.get(db, caller, lead_id, populate=LEAD_RELATIONS)

    @staticmethod
    async def get_lead_detail(db: AsyncSession, caller: Caller, lead_id: str) -> LeadDetailView:
        """The lead plus its interactions, their tasks and the status history."""
        lead = await leads.get(db, caller, lead_id, populate=LEAD_RELATIONS)

        interactions = await db.execute(
            select(Interaction)
            .where(Interaction.lead_id == lead.id)
            .order_by(Interaction.occurred_at.desc(), Interaction.id)
        )
        tasks = await db.execute(
            select(Task)
            .where(Task.interaction_id.in_(select(Interaction.id).where(Interaction.lead_id == lead.id)))
            .options(*loader_options(Task, TASK_RELATIONS))
            .order_by(Task.due_date.asc(), Task.id)
        )
        logs = await db.execute(
            select(LeadStatusLog)
            .where(LeadStatusLog.lead_id == lead.id)
            .order_by(LeadStatusLog.changed_at.desc(), LeadStatusLog.id)
        )
        return LeadDetailView(
            lead=lead,
            interactions=list(interactions.scalars().all()),
            tasks=list(tasks.scalars().all()),
            status_logs=list(logs.scalars().all()),
        )

    @staticmethod
    async def list_status_logs(
        db: AsyncSession, caller: Caller, lead_id: str, spec: QuerySpec
    ) -> Page:
        await leads.get(db, caller, lead_id)
        return await status_logs.list(db, caller, spec, parent_id=lead_id)

    @staticmethod
    async def update_lead(
        db: AsyncSession, caller: Caller, lead_id: str, data: LeadUpdate
    ) -> Lead:
        lead = await leads.get(db, caller, lead_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)

        client_id = changes.get("client_id") or lead.client_id
        if "client_id" in changes:
            changes["client_id"] = client_id
        if client_id != lead.client_id:
            await clients.get(db, caller, client_id, Operation.write)

        if "assigned_user_id" in changes:
            owner_id = changes.pop("assigned_user_id") or caller.id
            client = await clients.get(db, caller, client_id)
            await check_assignee(db, caller, owner_id, client.company_id)
            changes["user_id"] = owner_id

        previous_status = lead.status
        lead = await leads.update(db, lead, changes)
        if changes.get("status") and changes["status"] != previous_status:
            await _record_status(db, lead, previous_status, caller.id)
        return await leads.reload(db, lead.id, LEAD_RELATIONS)

    @staticmethod
    async def delete_lead(db: AsyncSession, caller: Caller, lead_id: str) -> None:
        lead = await leads.get(db, caller, lead_id, Operation.delete)
        await leads.delete(db, lead)
