"""
schemas/common.py
-----------------
Shared pieces of the request / response models.

List responses all use the same envelope: the entity collection under its
plural name plus ``total``, ``page``, ``limit`` and ``pages``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class InputModel(BaseModel):
    """Base for request bodies. Enum fields (defaults included) are dumped as their plain values."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class CompanyScopedInput(InputModel):
    """Create body for top-level records. company_id is honoured for super admins only."""
    company_id: Optional[str] = None


class ReadModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class MessageResponse(BaseModel):
    message: str
