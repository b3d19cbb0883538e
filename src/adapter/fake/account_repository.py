"""In-memory implementation of AccountRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from adapter.fake import query as query_eval
from domain.model.account import Account
from domain.model.errors import DuplicateError
from domain.model.query import Query


class FakeAccountRepository:
    def __init__(self):
        self.store: dict[str, Account] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, account: Account) -> Account:
        if any(a.email == account.email for a in self.store.values()):
            raise DuplicateError("Email already registered")
        self.store[account.id] = replace(account)
        return replace(account)

    def update(self, account_id: str, fields: dict[str, Any]) -> int:
        account = self.store.get(account_id)
        if not account:
            return 0

        email = fields.get('email')
        if email and any(a.email == email and a.id != account_id for a in self.store.values()):
            raise DuplicateError("Email already registered")

        for key, value in fields.items():
            setattr(account, key, value)
        account.updated_at = datetime.now(timezone.utc)
        return 1

    def update_last_login(self, account_id: str, at: datetime) -> bool:
        account = self.store.get(account_id)
        if not account:
            return False

        account.last_login = at
        account.updated_at = at
        return True

    def delete(self, account_id: str) -> int:
        return 1 if self.store.pop(account_id, None) else 0

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> Account | None:
        for account in self.store.values():
            if account.email == email:
                return replace(account)
        return None

    def get_by_id(self, account_id: str) -> Account | None:
        account = self.store.get(account_id)
        return replace(account) if account else None

    def find(self, query: Query) -> list[Account]:
        return [replace(a) for a in query_eval.apply(self.store.values(), query)]

    def count(self, query: Query | None = None) -> int:
        if query is None:
            return len(self.store)
        return len(query_eval.apply(self.store.values(), query))
