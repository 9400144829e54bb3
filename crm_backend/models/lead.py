"""
models/lead.py
--------------
Sales leads and their status history.

Tenant chain: lead → client → company.
Every status transition appends a LeadStatusLog row carrying the time the
lead spent in the previous status (milliseconds).
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class LeadSource(str, PyEnum):
    website = "website"
    referral = "referral"
    event = "event"
    outbound = "outbound"
    inbound = "inbound"


class LeadStatus(str, PyEnum):
    start_to_call = "Start-to-Call"
    call_to_connect = "Call-to-Connect"
    connect_to_contact = "Connect-to-Contact"
    contact_to_demo = "Contact-to-Demo"
    demo_to_close = "Demo-to-Close"
    lost = "Lost"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Lead(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "leads"

    client_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Owning sales person
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LeadSource.website.value
    )
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=LeadStatus.start_to_call.value, index=True
    )
    estimated_value: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # Relationships
    client: Mapped["Client"] = relationship("Client", back_populates="leads")  # noqa: F821
    owner: Mapped[Optional["User"]] = relationship("User")  # noqa: F821
    interactions: Mapped[list["Interaction"]] = relationship(  # noqa: F821
        "Interaction", back_populates="lead", cascade="all, delete-orphan"
    )
    status_logs: Mapped[list["LeadStatusLog"]] = relationship(
        back_populates="lead", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Lead id={self.id} status={self.status}>"


class LeadStatusLog(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "lead_status_logs"

    lead_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    previous_status: Mapped[Optional[str]] = mapped_column(String(30))
    new_status: Mapped[str] = mapped_column(String(30), nullable=False)
    changed_by: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    duration_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    lead: Mapped["Lead"] = relationship(back_populates="status_logs")
    changed_by_user: Mapped[Optional["User"]] = relationship("User")  # noqa: F821
