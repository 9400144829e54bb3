"""
api/routes/clients.py
---------------------
Client accounts of a company.

Create / update: super admin, admin, manager, sales.
Delete:          super admin, admin.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from crm_backend.dependencies import (
    ADMINS,
    SALES_STAFF,
    CurrentCaller,
    DbSession,
    ListParams,
    require_roles,
)
from crm_backend.schemas.client import ClientCreate, ClientPage, ClientRead, ClientUpdate
from crm_backend.schemas.common import MessageResponse
from crm_backend.services.client_service import ClientService
from crm_backend.tenancy.caller import Caller

router = APIRouter(prefix="/api/clients", tags=["Clients"])


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a client",
)
async def create_client(
    body: ClientCreate,
    db: DbSession,
    caller: Annotated[Caller, Depends(require_roles(*SALES_STAFF))],
) -> ClientRead:
    try:
        client = await ClientService.create_client(db, caller, body)
        return ClientRead.model_validate(client)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=ClientPage, summary="List clients")
async def list_clients(
    db: DbSession,
    caller: CurrentCaller,
    spec: ListParams,
    company_id: Optional[str] = None,
) -> ClientPage:
    page = await ClientService.list_clients(db, caller, spec, company_id=company_id)
    return ClientPage(clients=[ClientRead.model_validate(c) for c in page.items], **page.meta())


@router.get("/{client_id}", response_model=ClientRead, summary="Get a client")
async def get_client(client_id: str, db: DbSession, caller: CurrentCaller) -> ClientRead:
    return ClientRead.model_validate(await ClientService.get_client(db, caller, client_id))


@router.put("/{client_id}", response_model=ClientRead, summary="Update a client")
async def update_client(
    client_id: str,
    body: ClientUpdate,
    db: DbSession,
    caller: Annotated[Caller, Depends(require_roles(*SALES_STAFF))],
) -> ClientRead:
    try:
        client = await ClientService.update_client(db, caller, client_id, body)
        return ClientRead.model_validate(client)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("/{client_id}", response_model=MessageResponse, summary="Delete a client")
async def delete_client(
    client_id: str,
    db: DbSession,
    caller: Annotated[Caller, Depends(require_roles(*ADMINS))],
) -> MessageResponse:
    await ClientService.delete_client(db, caller, client_id)
    return MessageResponse(message="Client deleted")
