"""
models/client.py
----------------
Client ORM model: a customer account of a company. First hop of the
tenant chain for contacts, leads and notes.
"""

from typing import Optional

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, CompanyOwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Client(Base, UUIDPrimaryKeyMixin, CompanyOwnedMixin, TimestampMixin):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    market_segment: Mapped[Optional[str]] = mapped_column(String(255))
    siren: Mapped[Optional[str]] = mapped_column(String(20), unique=True)
    siret: Mapped[Optional[str]] = mapped_column(String(20), unique=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20))
    naf_code: Mapped[Optional[str]] = mapped_column(String(20))
    revenue: Mapped[Optional[float]] = mapped_column(Float)
    ebit: Mapped[Optional[float]] = mapped_column(Float)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    market_share: Mapped[Optional[float]] = mapped_column(Float)

    # Relationships
    company: Mapped["Company"] = relationship("Company", back_populates="clients")  # noqa: F821
    contacts: Mapped[list["Contact"]] = relationship(  # noqa: F821
        "Contact", back_populates="client", cascade="all, delete-orphan"
    )
    leads: Mapped[list["Lead"]] = relationship(  # noqa: F821
        "Lead", back_populates="client", cascade="all, delete-orphan"
    )
    notes: Mapped[list["Note"]] = relationship(  # noqa: F821
        "Note", back_populates="client", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Client id={self.id} name={self.name}>"
