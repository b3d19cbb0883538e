from datetime import datetime
from typing import Any, Protocol

from domain.model.account import Account
from domain.model.query import Query


class AccountRepository(Protocol):
    """Protocol defining the interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account. Raise DuplicateError if the email is taken."""
        ...

    def get_by_email(self, email: str) -> Account | None:
        """Find an account by exact email. Return Account or None if not found."""
        ...

    def get_by_id(self, account_id: str) -> Account | None:
        """Find an account by ID. Return Account or None if not found."""
        ...

    def find(self, query: Query) -> list[Account]:
        """Return accounts matching the query, in the query's sort order."""
        ...

    def count(self, query: Query | None = None) -> int:
        """Count accounts matching the query (all accounts when None)."""
        ...

    def update(self, account_id: str, fields: dict[str, Any]) -> int:
        """Set the given fields and refresh updated_at. Return affected row count."""
        ...

    def update_last_login(self, account_id: str, at: datetime) -> bool:
        """Update the last login timestamp for an account. Return True if successful."""
        ...

    def delete(self, account_id: str) -> int:
        """Delete an account. Return affected row count."""
        ...
