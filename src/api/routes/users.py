"""Account management routes.

Endpoints:
- GET /users: List accounts with filters
- GET /users/inactive: Accounts without a login in 30 days (admin)
- GET /users/notifications: Inactive-account summary (admin)
- GET /users/{id}: Account details
- PUT /users/{id}: Edit own profile, or any profile as admin
- PUT /users/{id}/password: Change own password
- DELETE /users/{id}: Delete an account and its clients (admin)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_account_repo, get_client_repo, get_password_hasher
from api.models import (
    AccountResponse,
    AccountUpdateRequest,
    InactiveAccounts,
    MessageResponse,
    NotificationsResponse,
    PasswordChangeRequest,
)
from api.security import get_current_claims, require_admin
from domain.model.account import Role
from domain.model.errors import (
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from domain.model.identity import Claims
from domain.model.query import SortDirection
from port.account_repository import AccountRepository
from port.client_repository import ClientRepository
from port.password_hasher import PasswordHasher
from services import account_service
from services.account_service import AccountFilters

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_claims)],
)


@router.get("", response_model=list[AccountResponse])
async def list_users(
    name: Optional[str] = None,
    email: Optional[str] = None,
    role: Optional[Role] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[SortDirection] = None,
    repo: AccountRepository = Depends(get_account_repo),
):
    filters = AccountFilters(name=name, email=email, role=role, sort_by=sort_by, order=order)
    try:
        accounts = account_service.list_accounts(repo, filters)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [AccountResponse.from_domain(a) for a in accounts]


@router.get("/inactive", response_model=list[AccountResponse])
async def list_inactive_users(
    _: Claims = Depends(require_admin),
    repo: AccountRepository = Depends(get_account_repo),
):
    return [AccountResponse.from_domain(a) for a in account_service.find_inactive(repo)]


@router.get("/notifications", response_model=NotificationsResponse)
async def get_notifications(
    _: Claims = Depends(require_admin),
    repo: AccountRepository = Depends(get_account_repo),
):
    summary = account_service.notifications(repo)
    return NotificationsResponse(
        inactive_users=InactiveAccounts(
            count=len(summary.inactive),
            users=[AccountResponse.from_domain(a) for a in summary.inactive],
        ),
        total_users=summary.total_accounts,
        last_update=summary.last_update,
    )


@router.get("/{account_id}", response_model=AccountResponse)
async def get_user(account_id: str, repo: AccountRepository = Depends(get_account_repo)):
    try:
        account = account_service.get_account(repo, account_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return AccountResponse.from_domain(account)


@router.put("/{account_id}", response_model=AccountResponse)
async def update_user(
    account_id: str,
    request: AccountUpdateRequest,
    claims: Claims = Depends(get_current_claims),
    repo: AccountRepository = Depends(get_account_repo),
):
    try:
        account = account_service.update_account(
            repo, claims, account_id,
            name=request.name,
            email=request.email,
            role=request.role,
        )
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return AccountResponse.from_domain(account)


@router.put("/{account_id}/password", response_model=MessageResponse)
def change_password(
    account_id: str,
    request: PasswordChangeRequest,
    claims: Claims = Depends(get_current_claims),
    repo: AccountRepository = Depends(get_account_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    try:
        account_service.change_password(
            repo, hasher, claims, account_id,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MessageResponse(message="Password updated successfully")


@router.delete("/{account_id}", response_model=MessageResponse)
async def delete_user(
    account_id: str,
    claims: Claims = Depends(require_admin),
    account_repo: AccountRepository = Depends(get_account_repo),
    client_repo: ClientRepository = Depends(get_client_repo),
):
    try:
        result = account_service.delete_account(account_repo, client_repo, claims, account_id)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if not result.deleted:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.message)
    return MessageResponse(message=result.message)
