"""Identity verification: local credentials and external identity linking.

Storage and hashing failures propagate to the caller unchanged.
"""

import logging

from domain.model.account import Account, AccountProfile, Provider
from domain.model.identity import ExternalIdentity
from port.account_repository import AccountRepository
from port.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)


def validate_local_credentials(
    repo: AccountRepository,
    hasher: PasswordHasher,
    email: str,
    password: str,
) -> AccountProfile | None:
    """Check an email/password pair.

    Returns the account's public profile on success, None otherwise.
    Accounts without a local password are rejected without hashing.
    """
    account = repo.get_by_email(email)
    if account is None:
        return None
    if not account.can_use_password:
        return None
    if not hasher.verify(password, account.password_hash):
        return None
    return account.profile()


def link_or_create_external_identity(repo: AccountRepository, identity: ExternalIdentity) -> Account:
    """Return the account for a verified Google identity, creating it if needed.

    An existing account with the same email becomes a Google account. Its
    local password is cleared, so it can no longer sign in with a password.
    """
    existing = repo.get_by_email(identity.email)
    if existing is None:
        account = repo.create(Account.create_external(identity))
        logger.info("Account created from external identity", extra={"accountId": account.id})
        return account

    if existing.provider == Provider.LOCAL:
        logger.warning("Local account converted to Google sign-in", extra={"accountId": existing.id})

    repo.update(existing.id, {
        'external_id': identity.external_id,
        'photo_url': identity.photo_url,
        'provider': Provider.GOOGLE,
        'password_hash': None,
    })
    return repo.get_by_id(existing.id)
