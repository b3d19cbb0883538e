from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.model.identity import Claims, ExternalIdentity


class Role(str, Enum):
    ADMIN = 'admin'
    USER = 'user'


class Provider(str, Enum):
    LOCAL = 'local'
    GOOGLE = 'google'


@dataclass(frozen=True)
class AccountProfile:
    """Public view of an account. Never carries the password hash."""
    id: str
    name: str
    email: str
    role: Role

    def to_claims(self) -> Claims:
        from domain.model.identity import Claims
        return Claims(id=self.id, email=self.email, role=self.role)


@dataclass
class Account:
    """Domain model representing a login identity."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    role: Role = Role.USER
    provider: Provider = Provider.LOCAL
    password_hash: str | None = None
    external_id: str | None = None
    photo_url: str | None = None
    last_login: datetime | None = None

    @staticmethod
    def create_local(
        name: str,
        email: str,
        password_hash: str,
        role: Role | None = None,
    ) -> Account:
        now = datetime.now(timezone.utc)
        return Account(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            role=role or Role.USER,
            provider=Provider.LOCAL,
            password_hash=password_hash,
        )

    @staticmethod
    def create_external(identity: ExternalIdentity) -> Account:
        """New Google-backed account. Has no password and starts as a plain user."""
        now = datetime.now(timezone.utc)
        return Account(
            id=uuid.uuid4().hex,
            name=identity.name,
            email=identity.email,
            created_at=now,
            updated_at=now,
            role=Role.USER,
            provider=Provider.GOOGLE,
            external_id=identity.external_id,
            photo_url=identity.photo_url,
        )

    @property
    def can_use_password(self) -> bool:
        return self.provider == Provider.LOCAL and bool(self.password_hash)

    def profile(self) -> AccountProfile:
        return AccountProfile(id=self.id, name=self.name, email=self.email, role=self.role)
