"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from domain.model.account import Account, AccountProfile, Provider, Role
from domain.model.client import ClientRecord, ClientStats, ClientStatus


# ── auth ────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    """Request model for account registration."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str
    role: Optional[Role] = None


class LoginRequest(BaseModel):
    """Request model for password login.

    The email is matched exactly against the stored value, so it is not
    validated or normalized here.
    """
    email: str
    password: str


class GoogleTokenRequest(BaseModel):
    """Google Sign-In ID token issued to the frontend."""
    credential: str = Field(..., min_length=1)


class ProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    role: Role

    @classmethod
    def from_domain(cls, profile: AccountProfile) -> "ProfileResponse":
        return cls(id=profile.id, name=profile.name, email=profile.email, role=profile.role)


class RegisterResponse(BaseModel):
    message: str
    user: ProfileResponse


class AuthResponse(BaseModel):
    """Response model for successful login."""
    access_token: str
    token_type: str = "bearer"
    user: ProfileResponse


# ── accounts ────────────────────────────────────────────────


class AccountResponse(BaseModel):
    """Account as exposed over the API. The password hash is never included."""
    id: str
    name: str
    email: str
    role: Role
    provider: Provider
    photo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            role=account.role,
            provider=account.provider,
            photo_url=account.photo_url,
            created_at=account.created_at,
            updated_at=account.updated_at,
            last_login=account.last_login,
        )


class AccountUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str


class InactiveAccounts(BaseModel):
    count: int
    users: list[AccountResponse]


class NotificationsResponse(BaseModel):
    inactive_users: InactiveAccounts
    total_users: int
    last_update: datetime


class MessageResponse(BaseModel):
    message: str


# ── clients ─────────────────────────────────────────────────


class ClientCreateRequest(BaseModel):
    """Request model for a new client record.

    Unknown keys (including any owner id) are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    display_name: str = Field(..., min_length=1)
    tax_id: str = Field(..., min_length=1)
    legal_name: str = Field(..., min_length=1)
    state_registration: Optional[str] = None
    municipal_registration: Optional[str] = None
    postal_code: str
    street: str
    number: str
    complement: Optional[str] = None
    district: str
    city: str
    state: str
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    status: Optional[ClientStatus] = None
    notes: Optional[str] = None


class ClientUpdateRequest(BaseModel):
    """Partial update. Only fields present in the body are applied."""
    model_config = ConfigDict(extra="ignore")

    display_name: Optional[str] = Field(None, min_length=1)
    tax_id: Optional[str] = Field(None, min_length=1)
    legal_name: Optional[str] = Field(None, min_length=1)
    state_registration: Optional[str] = None
    municipal_registration: Optional[str] = None
    postal_code: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    status: Optional[ClientStatus] = None
    notes: Optional[str] = None


class ClientResponse(BaseModel):
    id: str
    owner_id: str
    display_name: str
    tax_id: str
    legal_name: str
    state_registration: Optional[str] = None
    municipal_registration: Optional[str] = None
    postal_code: str
    street: str
    number: str
    complement: Optional[str] = None
    district: str
    city: str
    state: str
    country: str
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    status: ClientStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, client: ClientRecord) -> "ClientResponse":
        return cls(**client.to_dict())


class ClientMutationResponse(BaseModel):
    message: str
    client: ClientResponse


class ClientStatsResponse(BaseModel):
    total: int
    active: int
    inactive: int
    active_percent: int

    @classmethod
    def from_domain(cls, stats: ClientStats) -> "ClientStatsResponse":
        return cls(
            total=stats.total,
            active=stats.active,
            inactive=stats.inactive,
            active_percent=stats.active_percent,
        )
