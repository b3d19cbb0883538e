from dataclasses import dataclass

from domain.model.account import Role


@dataclass(frozen=True)
class Claims:
    """Identity claims carried by a bearer token."""
    id: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class ExternalIdentity:
    """Verified identity returned by an external provider."""
    email: str
    name: str
    external_id: str
    photo_url: str | None = None


# ── ownership ───────────────────────────────────────────────


def can_access(claims: Claims, owner_id: str | None) -> bool:
    """Admins reach everything; everyone else only what they own."""
    return claims.role == Role.ADMIN or claims.id == owner_id


def owner_scope(claims: Claims) -> str | None:
    """Owner id to constrain queries with, or None for an unrestricted admin."""
    if claims.role == Role.ADMIN:
        return None
    return claims.id
