from typing import Any, Protocol

from domain.model.client import ClientRecord
from domain.model.query import Query


class ClientRepository(Protocol):
    """Protocol defining the interface for client record data access."""

    def create(self, client: ClientRecord) -> ClientRecord:
        """Persist a new client record. Raise DuplicateError if the tax id is taken."""
        ...

    def find_one(self, query: Query) -> ClientRecord | None:
        """Return the first record matching the query, or None."""
        ...

    def find(self, query: Query) -> list[ClientRecord]:
        """Return records matching the query, in the query's sort order."""
        ...

    def count(self, query: Query) -> int: ...

    def update(self, client_id: str, fields: dict[str, Any]) -> int:
        """Set the given fields and refresh updated_at. Return affected row count."""
        ...

    def delete(self, query: Query) -> int:
        """Delete every record matching the query. Return affected row count."""
        ...
