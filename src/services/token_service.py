"""Bearer token issuing and validation (HS256 JWT)."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.account import Role
from domain.model.identity import Claims

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24


class TokenIssuer:
    """Signs and verifies stateless access tokens with a shared secret.

    Both the password and the Google login flows use the same lifetime.
    Issuing and decoding never touch storage.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = JWT_ALGORITHM,
        lifetime: timedelta = timedelta(hours=JWT_EXPIRATION_HOURS),
    ):
        if not secret_key:
            raise ValueError("Token signing secret must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, claims: Claims, now: datetime | None = None) -> str:
        """Create a signed token embedding {sub, email, role}."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": claims.id,
            "email": claims.email,
            "role": claims.role.value,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Claims | None:
        """Verify a token and return its claims, or None if unusable.

        Malformed, tampered and expired tokens are all treated the same.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None
        try:
            role = Role(payload.get("role"))
        except ValueError:
            return None
        return Claims(id=user_id, email=email, role=role)
