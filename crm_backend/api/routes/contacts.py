"""
api/routes/contacts.py
----------------------
Contacts of a client. ``client_id`` narrows the list to one client.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from crm_backend.dependencies import CurrentCaller, DbSession, ListParams
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.contact import ContactCreate, ContactPage, ContactRead, ContactUpdate
from crm_backend.services.contact_service import ContactService

router = APIRouter(prefix="/api/contacts", tags=["Contacts"])


@router.post(
    "",
    response_model=ContactRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a contact",
)
async def create_contact(body: ContactCreate, db: DbSession, caller: CurrentCaller) -> ContactRead:
    try:
        contact = await ContactService.create_contact(db, caller, body)
        return ContactRead.model_validate(contact)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=ContactPage, summary="List contacts")
async def list_contacts(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    client_id: Optional[str] = None,
) -> ContactPage:
    page = await ContactService.list_contacts(db, caller, spec, client_id=client_id)
    return ContactPage(contacts=[ContactRead.model_validate(c) for c in page.items], **page.meta())


@router.get("/{contact_id}", response_model=ContactRead, summary="Get a contact")
async def get_contact(contact_id: str, db: DbSession, caller: CurrentCaller) -> ContactRead:
    return ContactRead.model_validate(await ContactService.get_contact(db, caller, contact_id))


@router.put("/{contact_id}", response_model=ContactRead, summary="Update a contact")
async def update_contact(
    contact_id: str, body: ContactUpdate, db: DbSession, caller: CurrentCaller
) -> ContactRead:
    try:
        contact = await ContactService.update_contact(db, caller, contact_id, body)
        return ContactRead.model_validate(contact)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("/{contact_id}", response_model=MessageResponse, summary="Delete a contact")
async def delete_contact(contact_id: str, db: DbSession, caller: CurrentCaller) -> MessageResponse:
    await ContactService.delete_contact(db, caller, contact_id)
    return MessageResponse(message="Contact deleted")
