"""
services/contact_service.py
---------------------------
Business logic for client contacts. Tenant chain: contact → client → company.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.models.contact import Contact
from crm_backend.schemas.contact import ContactCreate, ContactUpdate
from crm_backend.services.client_service import clients
from crm_backend.services.crud import ScopedRepository
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

contacts = ScopedRepository(
    "contact",
    search_fields=("name", "first_name", "email", "phone", "job_title"),
    default_sort="name:asc",
)

_EMAIL_CONFLICT = "A contact with this email already exists"


class ContactService:

    @staticmethod
    async def create_contact(db: AsyncSession, caller: Caller, data: ContactCreate) -> Contact:
        # Writing under a client requires write access to that client
        await clients.get(db, caller, data.client_id, Operation.write)
        values = data.model_dump()
        if values.get("email"):
            values["email"] = values["email"].lower()
        return await contacts.create(db, values, conflict=_EMAIL_CONFLICT)

    @staticmethod
    async def list_contacts(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        client_id: Optional[str] = None,
    ) -> Page:
        return await contacts.list(db, caller, spec, parent_id=client_id)

    @staticmethod
    async def get_contact(db: AsyncSession, caller: Caller, contact_id: str) -> Contact:
        return await contacts.get(db, caller, contact_id)

    @staticmethod
    async def update_contact(
        db: AsyncSession, caller: Caller, contact_id: str, data: ContactUpdate
    ) -> Contact:
        contact = await contacts.get(db, caller, contact_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("client_id") and changes["client_id"] != contact.client_id:
            await clients.get(db, caller, changes["client_id"], Operation.write)
        if changes.get("email"):
            changes["email"] = changes["email"].lower()
        return await contacts.update(db, contact, changes, conflict=_EMAIL_CONFLICT)

    @staticmethod
    async def delete_contact(db: AsyncSession, caller: Caller, contact_id: str) -> None:
        contact = await contacts.get(db, caller, contact_id, Operation.delete)
        await contacts.delete(db, contact)
