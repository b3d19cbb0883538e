#!/usr/bin/env python3
"""Seed demo accounts into MongoDB.

Creates a mix of recently active, inactive (no login for 30+ days) and
never-logged-in accounts so the /users/inactive and /users/notifications
endpoints have something to show. Existing emails are skipped.

Usage:
    python scripts/seed_accounts.py [--password PASSWORD]
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from adapter.crypto.bcrypt_hasher import BcryptPasswordHasher
from adapter.mongodb.account_repository import MongoAccountRepository
from adapter.mongodb.connection import get_mongodb_client
from domain.model.account import Role
from services import auth_service
from utils.config import load_settings
from utils.logging import setup_structured_logging

logger = logging.getLogger("seed_accounts")

# (name, email, role, days since last login or None, days since creation)
DEMO_ACCOUNTS = [
    ("João Silva", "joao@example.com", Role.USER, 0, 90),
    ("Maria Santos", "maria@example.com", Role.USER, 5, 90),
    ("Pedro Admin", "pedro@example.com", Role.ADMIN, 2, 90),
    ("Ana Costa", "ana@example.com", Role.USER, 35, 120),
    ("Carlos Inativo", "carlos@example.com", Role.USER, 45, 120),
    ("Julia Antiga", "julia@example.com", Role.USER, 60, 120),
    ("Roberto Nunca Logou", "roberto@example.com", Role.USER, None, 40),
    ("Lucia Sem Login", "lucia@example.com", Role.USER, None, 50),
]


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--password", default="123456", help="password for every demo account")
    args = parser.parse_args()

    load_dotenv()
    settings = load_settings()
    setup_structured_logging(settings.log_level)

    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        logger.error("MongoDB unavailable")
        return 1

    repo = MongoAccountRepository(client[settings.database_name])
    repo.ensure_indexes()
    hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    now = datetime.now(timezone.utc)

    created = 0
    for name, email, role, login_days, created_days in DEMO_ACCOUNTS:
        if repo.get_by_email(email):
            logger.info("Skipping existing account", extra={"email": email})
            continue

        account = auth_service.register(repo, hasher, name=name, email=email, password=args.password, role=role)
        repo.update(account.id, {
            'created_at': now - timedelta(days=created_days),
            'last_login': now - timedelta(days=login_days) if login_days is not None else None,
        })
        created += 1

    logger.info("Demo accounts seeded", extra={"created": created})
    return 0


if __name__ == "__main__":
    sys.exit(main())
