"""Process configuration read from the environment."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24
    bcrypt_rounds: int = 10
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_callback_url: str = "http://localhost:8000/auth/google/callback"
    frontend_url: str = "http://localhost:3001"
    mongo_url: str | None = None
    database_name: str = "clientdesk"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build Settings from environment variables.

    Raises:
        ValueError: JWT_SECRET_KEY is missing
    """
    secret = os.getenv("JWT_SECRET_KEY")
    if not secret:
        raise ValueError(
            "JWT_SECRET_KEY environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )

    return Settings(
        jwt_secret_key=secret,
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expiration_hours=int(os.getenv("JWT_EXPIRATION_HOURS", "24")),
        bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "10")),
        google_client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
        google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET") or None,
        google_callback_url=os.getenv("GOOGLE_CALLBACK_URL", "http://localhost:8000/auth/google/callback"),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3001").rstrip("/"),
        mongo_url=os.getenv("MONGO_URL"),
        database_name=os.getenv("MONGODB_DATABASE", "clientdesk"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
