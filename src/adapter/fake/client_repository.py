"""In-memory implementation of ClientRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from adapter.fake import query as query_eval
from domain.model.client import ClientRecord
from domain.model.errors import DuplicateError
from domain.model.query import Query


class FakeClientRepository:
    def __init__(self):
        self.store: dict[str, ClientRecord] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, client: ClientRecord) -> ClientRecord:
        if any(c.tax_id == client.tax_id for c in self.store.values()):
            raise DuplicateError("A client with this tax id already exists")
        self.store[client.id] = replace(client)
        return replace(client)

    def update(self, client_id: str, fields: dict[str, Any]) -> int:
        client = self.store.get(client_id)
        if not client:
            return 0

        for key, value in fields.items():
            setattr(client, key, value)
        client.updated_at = datetime.now(timezone.utc)
        return 1

    def delete(self, query: Query) -> int:
        doomed = [c.id for c in query_eval.apply(self.store.values(), query)]
        for client_id in doomed:
            del self.store[client_id]
        return len(doomed)

    # ── read operations ──────────────────────────────────────

    def find_one(self, query: Query) -> ClientRecord | None:
        results = query_eval.apply(self.store.values(), query)
        return replace(results[0]) if results else None

    def find(self, query: Query) -> list[ClientRecord]:
        return [replace(c) for c in query_eval.apply(self.store.values(), query)]

    def count(self, query: Query) -> int:
        return len(query_eval.apply(self.store.values(), query))
