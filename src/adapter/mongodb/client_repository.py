"""MongoDB implementation of ClientRepository."""

from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import CLIENTS_COLLECTION_NAME
from adapter.mongodb.query import to_filter, to_sort
from domain.model.client import ClientRecord, ClientStatus
from domain.model.errors import DuplicateError
from domain.model.query import Query

logger = getLogger(__name__)


class MongoClientRepository:
    def __init__(self, db: Database):
        self.collection = db[CLIENTS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for clients collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('tax_id', 1)], 'idx_clients_tax_id', unique=True)
            create_index_safe(self.collection, [('owner_id', 1), ('created_at', -1)], 'idx_clients_owner')
            create_index_safe(self.collection, [('owner_id', 1), ('status', 1)], 'idx_clients_owner_status')
            return True
        except PyMongoError as e:
            logger.error("Failed to create clients indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> ClientRecord:
        """Convert MongoDB document to ClientRecord domain model."""
        values = dict(doc)
        values['id'] = values.pop('_id')
        values['status'] = ClientStatus(values.get('status', ClientStatus.ACTIVE.value))
        return ClientRecord(**values)

    def _to_document(self, client: ClientRecord) -> dict:
        doc = client.to_dict()
        doc['_id'] = doc.pop('id')
        doc['status'] = client.status.value
        return doc

    # ── write operations ─────────────────────────────────────

    def create(self, client: ClientRecord) -> ClientRecord:
        try:
            self.collection.insert_one(self._to_document(client))
        except DuplicateKeyError as e:
            logger.warning("Client creation failed: tax id already exists", extra={"ownerId": client.owner_id})
            raise DuplicateError("A client with this tax id already exists") from e
        except PyMongoError as e:
            logger.error("Failed to create client", extra={"ownerId": client.owner_id, "error": str(e)})
            raise

        logger.info("Client created", extra={"clientId": client.id, "ownerId": client.owner_id})
        return client

    def update(self, client_id: str, fields: dict[str, Any]) -> int:
        values = {k: v.value if isinstance(v, ClientStatus) else v for k, v in fields.items()}
        values['updated_at'] = datetime.now(timezone.utc)
        try:
            result = self.collection.update_one({'_id': client_id}, {'$set': values})
        except DuplicateKeyError as e:
            raise DuplicateError("A client with this tax id already exists") from e
        except PyMongoError as e:
            logger.error("Failed to update client", extra={"clientId": client_id, "error": str(e)})
            raise
        return result.matched_count

    def delete(self, query: Query) -> int:
        try:
            result = self.collection.delete_many(to_filter(query))
        except PyMongoError as e:
            logger.error("Failed to delete clients", extra={"error": str(e)})
            raise
        return result.deleted_count

    # ── read operations ──────────────────────────────────────

    def find_one(self, query: Query) -> ClientRecord | None:
        doc = self.collection.find_one(to_filter(query))
        return self._to_domain(doc) if doc else None

    def find(self, query: Query) -> list[ClientRecord]:
        cursor = self.collection.find(to_filter(query))
        sort = to_sort(query)
        if sort:
            cursor = cursor.sort(sort)
        return [self._to_domain(doc) for doc in cursor]

    def count(self, query: Query) -> int:
        return self.collection.count_documents(to_filter(query))
