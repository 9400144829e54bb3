"""
services/company_service.py
---------------------------
Business logic for companies, the tenants of the system.

Service layer is responsible for:
  - Constructing queries
  - Enforcing business rules (e.g. unique names)
  - Returning domain objects (ORM models) to the route layer
  - Never returning HTTP responses (that's the route's job)
"""

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.models.company import Company
from crm_backend.schemas.company import CompanyCreate, CompanyUpdate
from crm_backend.services.crud import ScopedRepository
from crm_backend.tenancy.access import Operation
from crm_backend.tenancy.caller import Caller
from crm_backend.tenancy.pagination import Page, QuerySpec

companies = ScopedRepository(
    "company",
    search_fields=("name", "siren", "siret", "postal_code", "naf_code"),
    default_sort="name:asc",
)


class CompanyService:

    @staticmethod
    async def create_company(db: AsyncSession, data: CompanyCreate) -> Company:
        """
        Create a new company.
        Raises ValueError if the name or SIREN / SIRET is already taken.
        """
        return await companies.create(
            db,
            data.model_dump(),
            conflict=f"Company '{data.name}' already exists",
        )

    @staticmethod
    async def list_companies(db: AsyncSession, caller: Caller, spec: QuerySpec) -> Page:
        return await companies.list(db, caller, spec)

    @staticmethod
    async def get_company(db: AsyncSession, caller: Caller, company_id: str) -> Company:
        return await companies.get(db, caller, company_id)

    @staticmethod
    async def update_company(
        db: AsyncSession, caller: Caller, company_id: str, data: CompanyUpdate
    ) -> Company:
        company = await companies.get(db, caller, company_id, Operation.write)
        changes = data.model_dump(exclude_unset=True)
        return await companies.update(
            db, company, changes, conflict="Company name or registration number already in use"
        )

    @staticmethod
    async def delete_company(db: AsyncSession, caller: Caller, company_id: str) -> None:
        """Deletes the company together with everything it owns."""
        company = await companies.get(db, caller, company_id, Operation.delete)
        await companies.delete(db, company)
