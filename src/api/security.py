"""Access guard and role guard dependencies.

Routes compose them explicitly: get_current_claims authenticates the bearer
token, require_role(...) additionally checks the caller's role. Both run
before the handler body.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_token_issuer
from domain.model.account import Role
from domain.model.identity import Claims
from services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Claims:
    """Decoded claims of the caller. Raises 401 if the token is missing or unusable."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    claims = issuer.decode(credentials.credentials)
    if claims is None:
        raise _unauthorized("Invalid authentication credentials")
    return claims


def require_role(role: Role) -> Callable[..., Claims]:
    """Dependency factory: authenticated caller with the given role, else 403."""

    def _check_role(claims: Claims = Depends(get_current_claims)) -> Claims:
        if claims.role != role:
            logger.info("Role check failed", extra={"accountId": claims.id, "requiredRole": role.value})
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return claims

    return _check_role


require_admin = require_role(Role.ADMIN)
