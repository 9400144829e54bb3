"""
models/interaction.py
---------------------
Interactions (calls, emails, meetings) held on a lead, and the contacts
that took part in them.

Tenant chain: interaction → lead → client → company.
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class InteractionType(str, PyEnum):
    call = "call"
    email = "email"
    meeting = "meeting"


class Interaction(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "interactions"

    lead_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InteractionType.call.value
    )
    description: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    lead: Mapped["Lead"] = relationship("Lead", back_populates="interactions")  # noqa: F821
    tasks: Mapped[list["Task"]] = relationship(  # noqa: F821
        "Task", back_populates="interaction", cascade="all, delete-orphan"
    )
    contact_links: Mapped[list["InteractionContact"]] = relationship(
        back_populates="interaction", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Interaction id={self.id} type={self.type}>"


class InteractionContact(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "interaction_contacts"
    __table_args__ = (UniqueConstraint("interaction_id", "contact_id"),)

    interaction_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("interactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    interaction: Mapped["Interaction"] = relationship(back_populates="contact_links")
    contact: Mapped["Contact"] = relationship(  # noqa: F821
        "Contact", back_populates="interaction_links"
    )
