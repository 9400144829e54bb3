"""
services/client_service.py
--------------------------
Business logic for clients, the customer accounts of a company.

Clients are the top of the CRM tenant chain: contacts, leads and notes hang
off a client, interactions and tasks off a lead.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.models.client import Client
from crm_backend.schemas.client import ClientCreate, ClientUpdate
from crm_backend.services.crud import ScopedRepository, resolve_company
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

clients = ScopedRepository(
    "client",
    search_fields=("name", "description", "market_segment", "siren", "siret", "postal_code"),
    default_sort="created_at:desc",
)


class ClientService:

    @staticmethod
    async def create_client(db: AsyncSession, caller: Caller, data: ClientCreate) -> Client:
        values = data.model_dump()
        values["company_id"] = await resolve_company(db, caller, data.company_id)
        return await clients.create(db, values)

    @staticmethod
    async def list_clients(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        company_id: Optional[str] = None,
    ) -> Page:
        return await clients.list(db, caller, spec, parent_id=company_id)

    @staticmethod
    async def get_client(db: AsyncSession, caller: Caller, client_id: str) -> Client:
        return await clients.get(db, caller, client_id)

    @staticmethod
    async def update_client(
        db: AsyncSession, caller: Caller, client_id: str, data: ClientUpdate
    ) -> Client:
        client = await clients.get(db, caller, client_id, Operation.write)
        return await clients.update(db, client, data.model_dump(exclude_unset=True))

    @staticmethod
    async def delete_client(db: AsyncSession, caller: Caller, client_id: str) -> None:
        """Removes the client with its contacts, notes and leads (and everything under them)."""
        client = await clients.get(db, caller, client_id, Operation.delete)
        await clients.delete(db, client)
