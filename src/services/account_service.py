"""Account management: listing, profile edits, password changes, deletion.

Deleting an account also deletes every client record it owns.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from domain.model.account import Account, Role
from domain.model.errors import NotFoundError, PermissionDeniedError, ValidationError
from domain.model.identity import Claims, can_access
from domain.model.query import Predicate, Operator, Query, SortDirection, resolve_sort
from port.account_repository import AccountRepository
from port.client_repository import ClientRepository
from port.password_hasher import PasswordHasher
from services.auth_service import validate_password

logger = logging.getLogger(__name__)

INACTIVE_AFTER_DAYS = 30

SORTABLE_FIELDS = {
    'name': 'name',
    'email': 'email',
    'role': 'role',
    'createdAt': 'created_at',
    'created_at': 'created_at',
    'lastLogin': 'last_login',
    'last_login': 'last_login',
}


@dataclass
class AccountFilters:
    name: str | None = None
    email: str | None = None
    role: Role | None = None
    sort_by: str | None = None
    order: SortDirection | None = None


@dataclass
class Notifications:
    inactive: list[Account]
    total_accounts: int
    last_update: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class DeletionResult:
    message: str
    deleted_clients: int
    deleted: bool = True


def list_accounts(repo: AccountRepository, filters: AccountFilters) -> list[Account]:
    query = (
        Query()
        .contains('name', filters.name)
        .contains('email', filters.email)
        .eq('role', filters.role)
    )
    query.sort = resolve_sort(filters.sort_by, filters.order, SORTABLE_FIELDS)
    return repo.find(query)


def find_inactive(
    repo: AccountRepository,
    days: int = INACTIVE_AFTER_DAYS,
    now: datetime | None = None,
) -> list[Account]:
    """Accounts that never logged in since before the cutoff, or last logged in before it."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    query = Query().any_of(
        [Predicate('last_login', Operator.IS_NULL), Predicate('created_at', Operator.LT, cutoff)],
        [Predicate('last_login', Operator.LT, cutoff)],
    ).order_by('created_at', SortDirection.ASC)
    return repo.find(query)


def notifications(repo: AccountRepository, now: datetime | None = None) -> Notifications:
    return Notifications(
        inactive=find_inactive(repo, now=now),
        total_accounts=repo.count(),
    )


def get_account(repo: AccountRepository, account_id: str) -> Account:
    account = repo.get_by_id(account_id)
    if account is None:
        raise NotFoundError("Account not found")
    return account


def update_account(
    repo: AccountRepository,
    claims: Claims,
    account_id: str,
    name: str | None = None,
    email: str | None = None,
    role: Role | None = None,
) -> Account:
    """Edit profile fields. Only the account itself or an admin may do this.

    A role change requested by a non-admin is dropped.
    """
    if not can_access(claims, account_id):
        raise PermissionDeniedError("You can only edit your own profile")

    changes = {'name': name, 'email': email}
    if claims.is_admin:
        changes['role'] = role
    changes = {k: v for k, v in changes.items() if v is not None}

    if changes:
        if not repo.update(account_id, changes):
            raise NotFoundError("Account not found")
        logger.info("Account updated", extra={"accountId": account_id, "fields": sorted(changes)})

    return get_account(repo, account_id)


def change_password(
    repo: AccountRepository,
    hasher: PasswordHasher,
    claims: Claims,
    account_id: str,
    current_password: str,
    new_password: str,
) -> None:
    """Replace a local password. Admins cannot change other accounts' passwords."""
    if claims.id != account_id:
        raise PermissionDeniedError("You can only change your own password")

    account = get_account(repo, account_id)
    if not account.can_use_password:
        raise ValidationError("Accounts that sign in with Google cannot change password")
    if not hasher.verify(current_password, account.password_hash):
        raise ValidationError("Current password is incorrect")
    validate_password(new_password, label="New password")

    repo.update(account_id, {'password_hash': hasher.hash(new_password)})
    logger.info("Password changed", extra={"accountId": account_id})


def delete_account(
    account_repo: AccountRepository,
    client_repo: ClientRepository,
    claims: Claims,
    account_id: str,
) -> DeletionResult:
    """Delete an account and every client record it owns."""
    if claims.id == account_id:
        raise PermissionDeniedError("You cannot delete your own account")
    get_account(account_repo, account_id)

    owned = Query().eq('owner_id', account_id)
    client_count = client_repo.count(owned)
    if client_count > 0:
        client_repo.delete(owned)

    if not account_repo.delete(account_id):
        logger.error(
            "Account vanished after its clients were deleted",
            extra={"accountId": account_id, "deletedClients": client_count},
        )
        return DeletionResult(message="Failed to delete account", deleted_clients=client_count, deleted=False)

    logger.info("Account deleted", extra={"accountId": account_id, "deletedClients": client_count})
    if client_count > 0:
        return DeletionResult(message=f"Account and {client_count} client(s) deleted", deleted_clients=client_count)
    return DeletionResult(message="Account deleted", deleted_clients=0)
