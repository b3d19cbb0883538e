"""Client record routes.

Every endpoint is owner-scoped: regular accounts only see and change their
own records, admins see all of them. Records owned by someone else answer
exactly like missing ones.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_client_repo
from api.models import (
    ClientCreateRequest,
    ClientMutationResponse,
    ClientResponse,
    ClientStatsResponse,
    ClientUpdateRequest,
    MessageResponse,
)
from api.security import get_current_claims
from domain.model.client import ClientStatus
from domain.model.errors import DuplicateError, ValidationError
from domain.model.identity import Claims, owner_scope
from domain.model.query import SortDirection
from port.client_repository import ClientRepository
from services.client_service import ClientFilters, ClientService, RemovalResult

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/clients",
    tags=["clients"],
    dependencies=[Depends(get_current_claims)],
)


def get_client_service(repo: ClientRepository = Depends(get_client_repo)) -> ClientService:
    return ClientService(repo)


@router.post("", response_model=ClientMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: ClientCreateRequest,
    claims: Claims = Depends(get_current_claims),
    service: ClientService = Depends(get_client_service),
):
    try:
        client = service.create(request.model_dump(exclude_none=True), owner_id=claims.id)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return ClientMutationResponse(
        message="Client created successfully",
        client=ClientResponse.from_domain(client),
    )


@router.get("", response_model=list[ClientResponse])
async def list_clients(
    name: Optional[str] = None,
    tax_id: Optional[str] = Query(None, alias="taxId"),
    status_filter: Optional[ClientStatus] = Query(None, alias="status"),
    city: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[SortDirection] = None,
    claims: Claims = Depends(get_current_claims),
    service: ClientService = Depends(get_client_service),
):
    filters = ClientFilters(
        name=name,
        tax_id=tax_id,
        city=city,
        status=status_filter,
        sort_by=sort_by,
        order=order,
    )
    try:
        clients = service.list(filters, scope_owner_id=owner_scope(claims))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [ClientResponse.from_domain(c) for c in clients]


@router.get("/my-stats", response_model=ClientStatsResponse)
async def get_my_stats(
    claims: Claims = Depends(get_current_claims),
    service: ClientService = Depends(get_client_service),
):
    """Counts over the caller's own records, admin or not."""
    return ClientStatsResponse.from_domain(service.owner_stats(claims.id))


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    claims: Claims = Depends(get_current_claims),
    service: ClientService = Depends(get_client_service),
):
    client = service.get(client_id, scope_owner_id=owner_scope(claims))
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return ClientResponse.from_domain(client)


@router.patch("/{client_id}", response_model=ClientMutationResponse)
async def update_client(
    client_id: str,
    request: ClientUpdateRequest,
    claims: Claims = Depends(get_current_claims),
    service: ClientService = Depends(get_client_service),
):
    try:
        client = service.update(
            client_id,
            request.model_dump(exclude_unset=True),
            scope_owner_id=owner_scope(claims),
        )
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if client is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found or no permission",
        )
    return ClientMutationResponse(
        message="Client updated successfully",
        client=ClientResponse.from_domain(client),
    )


@router.delete("/{client_id}", response_model=MessageResponse)
async def delete_client(
    client_id: str,
    claims: Claims = Depends(get_current_claims),
    service: ClientService = Depends(get_client_service),
):
    result = service.remove(client_id, scope_owner_id=owner_scope(claims))
    if result == RemovalResult.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    if result == RemovalResult.FAILED:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete client")
    return MessageResponse(message="Client deleted successfully")
