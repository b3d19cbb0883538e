"""Composition point: builds repositories and collaborators for route handlers.

Tests replace any of these through app.dependency_overrides.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import HTTPException

from adapter.crypto.bcrypt_hasher import BcryptPasswordHasher
from adapter.external.google_identity import GoogleIdentityProvider
from adapter.mongodb.account_repository import MongoAccountRepository
from adapter.mongodb.client_repository import MongoClientRepository
from adapter.mongodb.connection import get_mongodb_client
from port.account_repository import AccountRepository
from port.client_repository import ClientRepository
from port.identity_provider import IdentityProvider
from port.password_hasher import PasswordHasher
from services.token_service import TokenIssuer
from utils.config import Settings, load_settings


@lru_cache
def get_settings() -> Settings:
    """Environment settings, read once per process."""
    return load_settings()


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    settings = get_settings()
    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[settings.database_name]


def get_account_repo() -> AccountRepository:
    return MongoAccountRepository(_get_db())


def get_client_repo() -> ClientRepository:
    return MongoClientRepository(_get_db())


def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher(rounds=get_settings().bcrypt_rounds)


def get_token_issuer() -> TokenIssuer:
    settings = get_settings()
    return TokenIssuer(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        lifetime=timedelta(hours=settings.jwt_expiration_hours),
    )


def get_identity_provider() -> IdentityProvider:
    settings = get_settings()
    return GoogleIdentityProvider(
        settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_callback_url,
    )
