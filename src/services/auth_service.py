"""Auth service — registration and login flows.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from domain.model.account import Account, AccountProfile, Role
from domain.model.errors import AuthenticationError, DuplicateError, ValidationError
from domain.model.identity import ExternalIdentity
from port.account_repository import AccountRepository
from port.identity_provider import IdentityProvider
from port.password_hasher import PasswordHasher
from services.identity_service import link_or_create_external_identity, validate_local_credentials
from services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 6
INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AuthResult:
    """Issued token plus the public profile it was issued for."""
    access_token: str
    user: AccountProfile


def validate_password(password: str, label: str = "Password") -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"{label} must be at least {PASSWORD_MIN_LENGTH} characters")


def register(
    repo: AccountRepository,
    hasher: PasswordHasher,
    name: str,
    email: str,
    password: str,
    role: Role | None = None,
) -> Account:
    """Register a new local account.

    Raises:
        DuplicateError: email already registered
        ValidationError: password too short
    """
    if repo.get_by_email(email):
        raise DuplicateError("Email already registered")

    validate_password(password)
    account = Account.create_local(
        name=name,
        email=email,
        password_hash=hasher.hash(password),
        role=role,
    )
    return repo.create(account)


def login(
    repo: AccountRepository,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
    email: str,
    password: str,
) -> AuthResult:
    """Authenticate with email and password.

    Updates last_login, then issues a token. The error message is the same
    whether the email is unknown or the password is wrong.

    Raises:
        AuthenticationError: invalid credentials
    """
    profile = validate_local_credentials(repo, hasher, email, password)
    if profile is None:
        raise AuthenticationError(INVALID_CREDENTIALS)

    repo.update_last_login(profile.id, datetime.now(timezone.utc))
    token = issuer.issue(profile.to_claims())

    logger.info("Account logged in", extra={"accountId": profile.id, "provider": "local"})
    return AuthResult(access_token=token, user=profile)


def login_with_external(
    repo: AccountRepository,
    provider: IdentityProvider,
    issuer: TokenIssuer,
    credential: str,
) -> AuthResult:
    """Authenticate with a Google ID token.

    Raises:
        ExternalIdentityError: provider rejected the credential
    """
    return _complete_external_login(repo, issuer, provider.verify(credential))


def login_with_authorization_code(
    repo: AccountRepository,
    provider: IdentityProvider,
    issuer: TokenIssuer,
    code: str,
) -> AuthResult:
    """Authenticate with the code Google sends to the OAuth callback.

    Raises:
        ExternalIdentityError: code exchange or token verification failed
    """
    return _complete_external_login(repo, issuer, provider.exchange_code(code))


def _complete_external_login(
    repo: AccountRepository,
    issuer: TokenIssuer,
    identity: ExternalIdentity,
) -> AuthResult:
    # last_login is updated here, right after linking; issuing the token
    # does not update it a second time.
    account = link_or_create_external_identity(repo, identity)
    repo.update_last_login(account.id, datetime.now(timezone.utc))

    profile = account.profile()
    token = issuer.issue(profile.to_claims())

    logger.info("Account logged in", extra={"accountId": account.id, "provider": "google"})
    return AuthResult(access_token=token, user=profile)
