"""
schemas/company.py
------------------
Pydantic request/response models for Company (the tenant).

Naming convention:
  CompanyCreate  → inbound request body
  CompanyRead    → outbound response body
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from crm_backend.schemas.common import InputModel, PageMeta, ReadModel


class _CompanyFields(InputModel):
    siren: Optional[str] = Field(None, max_length=20)
    siret: Optional[str] = Field(None, max_length=20)
    postal_code: Optional[str] = Field(None, max_length=20)
    naf_code: Optional[str] = Field(None, max_length=20)
    revenue: Optional[float] = None
    ebit: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    market_share: Optional[float] = None


class CompanyCreate(_CompanyFields):
    name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        examples=["Acme Corp"],
        description="Unique company / tenant name",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class CompanyUpdate(_CompanyFields):
    name: Optional[str] = Field(None, min_length=2, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class CompanyRead(ReadModel):
    id: str
    name: str
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


class CompanyPage(PageMeta):
    companies: list[CompanyRead]
