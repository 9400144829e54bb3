"""
services/interaction_service.py
-------------------------------
Business logic for interactions (calls, emails, meetings) on a lead and
the contacts that took part in them.

Tenant chain: interaction → lead → client → company. A contact can only be
linked to an interaction of its own company.
"""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.core.errors import NotFoundError
from crm_backend.core.logging import get_logger
from crm_backend.models.contact import Contact
from crm_backend.models.interaction import Interaction, InteractionContact
from crm_backend.schemas.interaction import InteractionCreate, InteractionUpdate
from crm_backend.services.contact_service import contacts
from crm_backend.services.crud import ScopedRepository
from crm_backend.services.lead_service import leads
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

logger = get_logger(__name__)

interactions = ScopedRepository(
    "interaction",
    search_fields=("description", "type"),
    default_sort="occurred_at:desc",
)


async def _find_link(
    db: AsyncSession, interaction_id: str, contact_id: str
) -> Optional[InteractionContact]:
    result = await db.execute(
        select(InteractionContact).where(
            InteractionContact.interaction_id == interaction_id,
            InteractionContact.contact_id == contact_id,
        )
    )
    return result.scalar_one_or_none()


async def _link_contacts(
    db: AsyncSession,
    caller: Caller,
    interaction: Interaction,
    tenant_id: Optional[str],
    contact_ids: Iterable[str],
) -> None:
    for contact_id in dict.fromkeys(contact_ids):
        await contacts.get_in_company(db, caller, contact_id, tenant_id)
        if await _find_link(db, interaction.id, contact_id) is not None:
            raise ValueError("Contact is already linked to this interaction")
        db.add(InteractionContact(interaction_id=interaction.id, contact_id=contact_id))
        logger.info("Contact linked", interaction_id=interaction.id, contact_id=contact_id)
    await db.flush()


class InteractionService:

    @staticmethod
    async def create_interaction(
        db: AsyncSession, caller: Caller, data: InteractionCreate
    ) -> Interaction:
        lead = await leads.get(db, caller, data.lead_id, Operation.write)
        values = data.model_dump(exclude={"contact_ids"}, exclude_none=True)
        interaction = await interactions.create(db, values)
        if data.contact_ids:
            tenant_id = await leads.tenant_of(db, lead)
            await _link_contacts(db, caller, interaction, tenant_id, data.contact_ids)
        return interaction

    @staticmethod
    async def list_interactions(
        db: AsyncSession,
        caller: Caller,
        spec: QuerySpec,
        lead_id: Optional[str] = None,
        type: Optional[str] = None,
    ) -> Page:
        return await interactions.list(
            db, caller, spec, parent_id=lead_id, filters={"type": type}
        )

    @staticmethod
    async def get_interaction(
        db: AsyncSession, caller: Caller, interaction_id: str
    ) -> Interaction:
        return await interactions.get(db, caller, interaction_id)

    @staticmethod
    async def update_interaction(
        db: AsyncSession, caller: Caller, interaction_id: str, data: InteractionUpdate
    ) -> Interaction:
        interaction = await interactions.get(db, caller, interaction_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("lead_id", interaction.lead_id) != interaction.lead_id:
            await leads.get(db, caller, changes["lead_id"], Operation.write)
        return await interactions.update(db, interaction, changes)

    @staticmethod
    async def delete_interaction(db: AsyncSession, caller: Caller, interaction_id: str) -> None:
        """Removes the interaction with its tasks and contact links."""
        interaction = await interactions.get(db, caller, interaction_id, Operation.delete)
        await interactions.delete(db, interaction)

    # ── Contacts ──────────────────────────────────────────────────────────────

    @staticmethod
    async def list_contacts(
        db: AsyncSession, caller: Caller, interaction_id: str, spec: QuerySpec
    ) -> Page:
        await interactions.get(db, caller, interaction_id)
        linked = select(InteractionContact.contact_id).where(
            InteractionContact.interaction_id == interaction_id
        )
        return await contacts.list(db, caller, spec, where=[Contact.id.in_(linked)])

    @staticmethod
    async def link_contact(
        db: AsyncSession, caller: Caller, interaction_id: str, contact_id: str
    ) -> None:
        interaction = await interactions.get(db, caller, interaction_id, Operation.write)
        tenant_id = await interactions.tenant_of(db, interaction)
        await _link_contacts(db, caller, interaction, tenant_id, [contact_id])

    @staticmethod
    async def unlink_contact(
        db: AsyncSession, caller: Caller, interaction_id: str, contact_id: str
    ) -> None:
        await interactions.get(db, caller, interaction_id, Operation.write)
        link = await _find_link(db, interaction_id, contact_id)
        if link is None:
            raise NotFoundError("interaction_contact", contact_id)
        await db.delete(link)
        await db.flush()
        logger.info("Contact unlinked", interaction_id=interaction_id, contact_id=contact_id)
