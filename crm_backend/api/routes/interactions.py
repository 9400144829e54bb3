"""
api/routes/interactions.py
--------------------------
Interactions on a lead and the contacts linked to them.

POST   /api/interactions/{id}/contacts/{contact_id}  - link a contact
DELETE /api/interactions/{id}/contacts/{contact_id}  - unlink a contact
"""

from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Query, status

from crm_backend.dependencies import CurrentCaller, DbSession, ListParams
from crm_backend.models.interaction import InteractionType
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.contact import ContactPage, ContactRead
from crm_backend.schemas.interaction import (
    InteractionCreate,
    InteractionPage,
    InteractionRead,
    InteractionUpdate,
)
from crm_backend.services.interaction_service import InteractionService

router = APIRouter(prefix="/api/interactions", tags=["Interactions"])


@router.post(
    "",
    response_model=InteractionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an interaction",
)
async def create_interaction(
    body: InteractionCreate, db: DbSession, caller: CurrentCaller
) -> InteractionRead:
    try:
        interaction = await InteractionService.create_interaction(db, caller, body)
        return InteractionRead.model_validate(interaction)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=InteractionPage, summary="List interactions")
async def list_interactions(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    lead_id: Optional[str] = None,
    interaction_type: Annotated[Optional[InteractionType], Query(alias="type")] = None,
) -> InteractionPage:
    page = await InteractionService.list_interactions(
        db, caller, spec, lead_id=lead_id, type=interaction_type
    )
    return InteractionPage(
        interactions=[InteractionRead.model_validate(i) for i in page.items], **page.meta()
    )


@router.get("/{interaction_id}", response_model=InteractionRead, summary="Get an interaction")
async def get_interaction(
    interaction_id: str, db: DbSession, caller: CurrentCaller
) -> InteractionRead:
    interaction = await InteractionService.get_interaction(db, caller, interaction_id)
    return InteractionRead.model_validate(interaction)


@router.put("/{interaction_id}", response_model=InteractionRead, summary="Update an interaction")
async def update_interaction(
    interaction_id: str, body: InteractionUpdate, db: DbSession, caller: CurrentCaller
) -> InteractionRead:
    interaction = await InteractionService.update_interaction(db, caller, interaction_id, body)
    return InteractionRead.model_validate(interaction)


@router.delete(
    "/{interaction_id}", response_model=MessageResponse, summary="Delete an interaction"
)
async def delete_interaction(
    interaction_id: str, db: DbSession, caller: CurrentCaller
) -> MessageResponse:
    await InteractionService.delete_interaction(db, caller, interaction_id)
    return MessageResponse(message="Interaction deleted")


# ── Contacts ──────────────────────────────────────────────────────────────────

@router.get(
    "/{interaction_id}/contacts",
    response_model=ContactPage,
    summary="List the contacts linked to an interaction",
)
async def list_interaction_contacts(
    interaction_id: str, db: DbSession, caller: CurrentCaller, spec: ListParams
) -> ContactPage:
    page = await InteractionService.list_contacts(db, caller, interaction_id, spec)
    return ContactPage(contacts=[ContactRead.model_validate(c) for c in page.items], **page.meta())


@router.post(
    "/{interaction_id}/contacts/{contact_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Link a contact to an interaction",
)
async def link_contact(
    interaction_id: str, contact_id: str, db: DbSession, caller: CurrentCaller
) -> MessageResponse:
    try:
        await InteractionService.link_contact(db, caller, interaction_id, contact_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return MessageResponse(message="Contact linked")


@router.delete(
    "/{interaction_id}/contacts/{contact_id}",
    response_model=MessageResponse,
    summary="Unlink a contact from an interaction",
)
async def unlink_contact(
    interaction_id: str, contact_id: str, db: DbSession, caller: CurrentCaller
) -> MessageResponse:
    await InteractionService.unlink_contact(db, caller, interaction_id, contact_id)
    return MessageResponse(message="Contact unlinked")
