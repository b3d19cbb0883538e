"""MongoDB implementation of AccountRepository."""

from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import ACCOUNTS_COLLECTION_NAME
from adapter.mongodb.query import to_filter, to_sort
from domain.model.account import Account, Provider, Role
from domain.model.errors import DuplicateError
from domain.model.query import Query

logger = getLogger(__name__)


class MongoAccountRepository:
    def __init__(self, db: Database):
        self.collection = db[ACCOUNTS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for accounts collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_accounts_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_accounts_created_at')
            create_index_safe(self.collection, [('last_login', 1)], 'idx_accounts_last_login')
            return True
        except PyMongoError as e:
            logger.error("Failed to create accounts indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> Account:
        """Convert MongoDB document to Account domain model."""
        return Account(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            role=Role(doc.get('role', Role.USER.value)),
            provider=Provider(doc.get('provider', Provider.LOCAL.value)),
            password_hash=doc.get('password_hash'),
            external_id=doc.get('external_id'),
            photo_url=doc.get('photo_url'),
            last_login=doc.get('last_login'),
        )

    def _to_document(self, account: Account) -> dict:
        return {
            '_id': account.id,
            'name': account.name,
            'email': account.email,
            'created_at': account.created_at,
            'updated_at': account.updated_at,
            'role': account.role.value,
            'provider': account.provider.value,
            'password_hash': account.password_hash,
            'external_id': account.external_id,
            'photo_url': account.photo_url,
            'last_login': account.last_login,
        }

    # ── write operations ─────────────────────────────────────

    def create(self, account: Account) -> Account:
        """Insert a new account and return it."""
        try:
            self.collection.insert_one(self._to_document(account))
        except DuplicateKeyError as e:
            logger.warning("Account creation failed: email already exists", extra={"email": account.email})
            raise DuplicateError("Email already registered") from e
        except PyMongoError as e:
            logger.error("Failed to create account", extra={"email": account.email, "error": str(e)})
            raise

        logger.info("Account created", extra={"accountId": account.id, "provider": account.provider.value})
        return account

    def update(self, account_id: str, fields: dict[str, Any]) -> int:
        """Set fields on an account. Return matched count."""
        values = {k: v.value if isinstance(v, (Role, Provider)) else v for k, v in fields.items()}
        values['updated_at'] = datetime.now(timezone.utc)
        try:
            result = self.collection.update_one({'_id': account_id}, {'$set': values})
        except DuplicateKeyError as e:
            raise DuplicateError("Email already registered") from e
        except PyMongoError as e:
            logger.error("Failed to update account", extra={"accountId": account_id, "error": str(e)})
            raise
        return result.matched_count

    def update_last_login(self, account_id: str, at: datetime) -> bool:
        """Update the last login timestamp for an account. Return True if successful."""
        try:
            result = self.collection.update_one(
                {'_id': account_id},
                {'$set': {'last_login': at, 'updated_at': at}},
            )
        except PyMongoError as e:
            logger.error("Failed to update last_login", extra={"accountId": account_id, "error": str(e)})
            raise

        if result.matched_count > 0:
            logger.debug("Updated last_login", extra={"accountId": account_id})
            return True
        return False

    def delete(self, account_id: str) -> int:
        try:
            result = self.collection.delete_one({'_id': account_id})
        except PyMongoError as e:
            logger.error("Failed to delete account", extra={"accountId": account_id, "error": str(e)})
            raise
        return result.deleted_count

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> Account | None:
        """Find an account by email. Return Account or None if not found."""
        doc = self.collection.find_one({'email': email})
        return self._to_domain(doc) if doc else None

    def get_by_id(self, account_id: str) -> Account | None:
        """Find an account by ID. Return Account or None if not found."""
        doc = self.collection.find_one({'_id': account_id})
        return self._to_domain(doc) if doc else None

    def find(self, query: Query) -> list[Account]:
        cursor = self.collection.find(to_filter(query))
        sort = to_sort(query)
        if sort:
            cursor = cursor.sort(sort)
        return [self._to_domain(doc) for doc in cursor]

    def count(self, query: Query | None = None) -> int:
        return self.collection.count_documents(to_filter(query) if query else {})
