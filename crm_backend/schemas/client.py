"""
schemas/client.py
-----------------
Pydantic models for clients.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from crm_backend.schemas.common import InputModel, PageMeta, ReadModel


class _ClientFields(InputModel):
    description: Optional[str] = None
    market_segment: Optional[str] = Field(None, max_length=255)
    siren: Optional[str] = Field(None, max_length=20)
    siret: Optional[str] = Field(None, max_length=20)
    postal_code: Optional[str] = Field(None, max_length=20)
    naf_code: Optional[str] = Field(None, max_length=20)
    revenue: Optional[float] = None
    ebit: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    market_share: Optional[float] = None


class ClientCreate(_ClientFields):
    name: str = Field(..., min_length=1, max_length=255)
    company_id: Optional[str] = Field(
        None, description="Required for super admins, defaults to the caller's company otherwise"
    )


class ClientUpdate(_ClientFields):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class ClientRead(ReadModel):
    id: str
    company_id: str
    name: str
    description: Optional[str] = None
    market_segment: Optional[str] = None
    siren: Optional[str] = None
    siret: Optional[str] = None
    postal_code: Optional[str] = None
    naf_code: Optional[str] = None
    revenue: Optional[float] = None
    ebit: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    market_share: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class ClientSummary(ReadModel):
    id: str
    name: str


class ClientPage(PageMeta):
    clients: list[ClientRead]
