"""
api/routes/companies.py
-----------------------
Company (tenant) management.

POST   /api/companies        - super admin: onboard a company
GET    /api/companies        - super admin: list every company
GET    /api/companies/{id}   - super admin, or a member of that company
PUT    /api/companies/{id}   - super admin, or an admin of that company
DELETE /api/companies/{id}   - super admin: delete a company and all its data
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from crm_backend.dependencies import ADMINS, CurrentCaller, DbSession, ListParams, require_roles
from crm_backend.models.user import UserRole
from crm_backend.schemas.common import MessageResponse
from crm_backend.schemas.company import CompanyCreate, CompanyPage, CompanyRead, CompanyUpdate
from crm_backend.services.company_service import CompanyService
from crm_backend.tenancy.caller import Caller

router = APIRouter(prefix="/api/companies", tags=["Companies"])

SuperAdmin = Annotated[Caller, Depends(require_roles(UserRole.super_admin))]


@router.post(
    "",
    response_model=CompanyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Onboard a new company",
)
async def create_company(body: CompanyCreate, db: DbSession, caller: SuperAdmin) -> CompanyRead:
    try:
        company = await CompanyService.create_company(db, body)
        return CompanyRead.model_validate(company)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=CompanyPage, summary="List companies")
async def list_companies(db: DbSession, caller: SuperAdmin, spec: ListParams) -> CompanyPage:
    page = await CompanyService.list_companies(db, caller, spec)
    return CompanyPage(
        companies=[CompanyRead.model_validate(c) for c in page.items], **page.meta()
    )


@router.get("/{company_id}", response_model=CompanyRead, summary="Get a company")
async def get_company(company_id: str, db: DbSession, caller: CurrentCaller) -> CompanyRead:
    company = await CompanyService.get_company(db, caller, company_id)
    return CompanyRead.model_validate(company)


@router.put("/{company_id}", response_model=CompanyRead, summary="Update a company")
async def update_company(
    company_id: str,
    body: CompanyUpdate,
    db: DbSession,
    caller: Annotated[Caller, Depends(require_roles(*ADMINS))],
) -> CompanyRead:
    try:
        company = await CompanyService.update_company(db, caller, company_id, body)
        return CompanyRead.model_validate(company)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("/{company_id}", response_model=MessageResponse, summary="Delete a company")
async def delete_company(company_id: str, db: DbSession, caller: SuperAdmin) -> MessageResponse:
    await CompanyService.delete_company(db, caller, company_id)
    return MessageResponse(message="Company deleted")
