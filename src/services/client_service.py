"""Client records: CRUD and filtered listing, scoped by owner.

Every read and write takes an optional scope_owner_id. When it is set, only
records owned by that account are visible; None means an unrestricted admin.
A record outside the scope is indistinguishable from a missing one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from domain.model.client import ClientRecord, ClientStats, ClientStatus, editable_values
from domain.model.query import Query, SortDirection, resolve_sort
from port.client_repository import ClientRepository

logger = logging.getLogger(__name__)

OWNER_FIELD = 'owner_id'

SORTABLE_FIELDS = {
    'name': 'display_name',
    'displayName': 'display_name',
    'display_name': 'display_name',
    'taxId': 'tax_id',
    'tax_id': 'tax_id',
    'legalName': 'legal_name',
    'legal_name': 'legal_name',
    'city': 'city',
    'state': 'state',
    'status': 'status',
    'createdAt': 'created_at',
    'created_at': 'created_at',
    'updatedAt': 'updated_at',
    'updated_at': 'updated_at',
}


class RemovalResult(str, Enum):
    DELETED = 'deleted'
    NOT_FOUND = 'not_found'
    FAILED = 'failed'


@dataclass
class ClientFilters:
    name: str | None = None
    tax_id: str | None = None
    city: str | None = None
    status: ClientStatus | None = None
    sort_by: str | None = None
    order: SortDirection | None = None


class ClientService:
    """Owner-scoped access to client records."""

    def __init__(self, repo: ClientRepository):
        self.repo = repo

    def create(self, data: dict[str, Any], owner_id: str) -> ClientRecord:
        """Create a record owned by owner_id, whatever owner the data names."""
        client = self.repo.create(ClientRecord.create(data, owner_id))
        logger.info("Client record created", extra={"clientId": client.id, "ownerId": owner_id})
        return client

    def list(self, filters: ClientFilters, scope_owner_id: str | None = None) -> list[ClientRecord]:
        query = (
            Query()
            .eq(OWNER_FIELD, scope_owner_id)
            .contains('display_name', filters.name)
            .contains('tax_id', filters.tax_id)
            .eq('status', filters.status)
            .contains('city', filters.city)
        )
        query.sort = resolve_sort(filters.sort_by, filters.order, SORTABLE_FIELDS)
        return self.repo.find(query)

    def get(self, client_id: str, scope_owner_id: str | None = None) -> ClientRecord | None:
        return self.repo.find_one(Query.by_id(client_id, OWNER_FIELD, scope_owner_id))

    def update(
        self,
        client_id: str,
        patch: dict[str, Any],
        scope_owner_id: str | None = None,
    ) -> ClientRecord | None:
        """Apply the fields present in patch. None when missing or out of scope."""
        if self.get(client_id, scope_owner_id) is None:
            return None

        changes = editable_values(patch)
        if 'status' in changes:
            changes['status'] = ClientStatus(changes['status'])
        if changes:
            self.repo.update(client_id, changes)
            logger.info("Client record updated", extra={"clientId": client_id, "fields": sorted(changes)})
        return self.get(client_id)

    def remove(self, client_id: str, scope_owner_id: str | None = None) -> RemovalResult:
        if self.get(client_id, scope_owner_id) is None:
            return RemovalResult.NOT_FOUND

        if self.repo.delete(Query.by_id(client_id)) == 0:
            logger.warning("Client record vanished before deletion", extra={"clientId": client_id})
            return RemovalResult.FAILED

        logger.info("Client record deleted", extra={"clientId": client_id})
        return RemovalResult.DELETED

    # ── aggregation ──────────────────────────────────────────

    def count_by_owner(self, owner_id: str) -> int:
        return self.repo.count(Query().eq(OWNER_FIELD, owner_id))

    def list_by_status(self, status: ClientStatus, scope_owner_id: str | None = None) -> list[ClientRecord]:
        return self.repo.find(Query().eq('status', status).eq(OWNER_FIELD, scope_owner_id))

    def owner_stats(self, owner_id: str) -> ClientStats:
        return ClientStats.compute(
            total=self.count_by_owner(owner_id),
            active=len(self.list_by_status(ClientStatus.ACTIVE, owner_id)),
            inactive=len(self.list_by_status(ClientStatus.INACTIVE, owner_id)),
        )
