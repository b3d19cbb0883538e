# domain/model/client.py

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ClientStatus(str, Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    SUSPENDED = 'suspended'


# Fields a caller may set on create or patch. Identity, ownership and
# timestamps are managed by ClientRecord itself.
EDITABLE_FIELDS = frozenset({
    'display_name', 'tax_id', 'legal_name',
    'state_registration', 'municipal_registration',
    'postal_code', 'street', 'number', 'complement', 'district',
    'city', 'state', 'country',
    'phone', 'email', 'website',
    'status', 'notes',
})

REQUIRED_FIELDS = frozenset({
    'display_name', 'tax_id', 'legal_name',
    'postal_code', 'street', 'number', 'district', 'city', 'state', 'country',
    'status',
})


@dataclass
class ClientRecord:
    """Business profile owned by exactly one account."""
    id: str
    owner_id: str
    display_name: str
    tax_id: str
    legal_name: str
    postal_code: str
    street: str
    number: str
    district: str
    city: str
    state: str
    created_at: datetime
    updated_at: datetime
    country: str = 'Brasil'
    state_registration: str | None = None
    municipal_registration: str | None = None
    complement: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    status: ClientStatus = ClientStatus.ACTIVE
    notes: str | None = None

    @staticmethod
    def create(data: dict[str, Any], owner_id: str) -> ClientRecord:
        """Build a new record for owner_id.

        Any owner, id or timestamp present in data is ignored.
        """
        values = editable_values(data)
        if 'status' in values:
            values['status'] = ClientStatus(values['status'])

        now = datetime.now(timezone.utc)
        return ClientRecord(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            **values,
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def editable_values(data: dict[str, Any]) -> dict[str, Any]:
    """Keep only caller-editable keys. Required fields cannot be cleared."""
    return {
        k: v for k, v in data.items()
        if k in EDITABLE_FIELDS and not (v is None and k in REQUIRED_FIELDS)
    }


@dataclass(frozen=True)
class ClientStats:
    """Per-owner client summary."""
    total: int
    active: int
    inactive: int
    active_percent: int

    @staticmethod
    def compute(total: int, active: int, inactive: int) -> ClientStats:
        percent = 0
        if total > 0:
            # half-up, not banker's rounding
            percent = math.floor(active * 100 / total + 0.5)
        return ClientStats(total=total, active=active, inactive=inactive, active_percent=percent)
