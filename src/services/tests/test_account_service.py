"""Tests for account management: listing, edits, passwords and cascade delete."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from adapter.fake.account_repository import FakeAccountRepository
from adapter.fake.client_repository import FakeClientRepository
from adapter.fake.password_hasher import FakePasswordHasher
from domain.model.account import Account, Role
from domain.model.client import ClientRecord
from domain.model.errors import DuplicateError, NotFoundError, PermissionDeniedError, ValidationError
from domain.model.identity import Claims, ExternalIdentity
from domain.model.query import SortDirection
from services import account_service
from services.account_service import AccountFilters

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def claims_for(account: Account) -> Claims:
    return account.profile().to_claims()


class AccountServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeAccountRepository()
        self.clients = FakeClientRepository()
        self.hasher = FakePasswordHasher()
        self.admin = self.repo.create(Account.create_local('Root', 'root@example.com', 'hashed:rootpw', Role.ADMIN))
        self.ana = self.repo.create(Account.create_local('Ana', 'ana@example.com', 'hashed:secret1'))
        self.bob = self.repo.create(Account.create_local('Bob', 'bob@example.com', 'hashed:secret2'))

    def add_clients(self, owner: Account, count: int):
        for n in range(count):
            self.clients.create(ClientRecord.create({
                'display_name': f'{owner.name} {n}', 'tax_id': f'{owner.id}-{n}', 'legal_name': 'LTDA',
                'postal_code': '0', 'street': 'Rua', 'number': '1', 'district': 'Centro',
                'city': 'Recife', 'state': 'PE',
            }, owner.id))


class TestListing(AccountServiceTestCase):

    def test_filters(self):
        found = account_service.list_accounts(self.repo, AccountFilters(name='An'))
        self.assertEqual([a.email for a in found], ['ana@example.com'])

        admins = account_service.list_accounts(self.repo, AccountFilters(role=Role.ADMIN))
        self.assertEqual([a.id for a in admins], [self.admin.id])

    def test_sort_by_name(self):
        found = account_service.list_accounts(self.repo, AccountFilters(sort_by='name', order=SortDirection.DESC))
        self.assertEqual([a.name for a in found], ['Root', 'Bob', 'Ana'])

    def test_invalid_sort(self):
        with self.assertRaises(ValidationError):
            account_service.list_accounts(self.repo, AccountFilters(sort_by='password_hash'))

    def test_get_missing(self):
        with self.assertRaises(NotFoundError):
            account_service.get_account(self.repo, 'missing')


class TestInactive(AccountServiceTestCase):

    def setUp(self):
        super().setUp()
        old = NOW - timedelta(days=60)
        # never logged in, created long ago
        self.repo.update(self.admin.id, {'created_at': old, 'last_login': None})
        # logged in long ago
        self.repo.update(self.ana.id, {'created_at': old, 'last_login': NOW - timedelta(days=31)})
        # recently active
        self.repo.update(self.bob.id, {'created_at': old, 'last_login': NOW - timedelta(days=2)})

    def test_find_inactive(self):
        found = account_service.find_inactive(self.repo, now=NOW)
        self.assertEqual(sorted(a.id for a in found), sorted([self.admin.id, self.ana.id]))

    def test_new_account_without_login_is_not_inactive(self):
        fresh = self.repo.create(Account.create_local('New', 'new@example.com', 'hashed:x'))
        self.repo.update(fresh.id, {'created_at': NOW - timedelta(days=1)})

        found = account_service.find_inactive(self.repo, now=NOW)
        self.assertNotIn(fresh.id, [a.id for a in found])

    def test_notifications(self):
        summary = account_service.notifications(self.repo, now=NOW)

        self.assertEqual(len(summary.inactive), 2)
        self.assertEqual(summary.total_accounts, 3)
        self.assertIsNotNone(summary.last_update)


class TestUpdateAccount(AccountServiceTestCase):

    def test_user_edits_own_profile(self):
        updated = account_service.update_account(self.repo, claims_for(self.ana), self.ana.id, name='Ana Maria')
        self.assertEqual(updated.name, 'Ana Maria')

    def test_user_cannot_edit_others(self):
        with self.assertRaises(PermissionDeniedError):
            account_service.update_account(self.repo, claims_for(self.ana), self.bob.id, name='X')
        self.assertEqual(self.repo.get_by_id(self.bob.id).name, 'Bob')

    def test_user_role_change_is_ignored(self):
        updated = account_service.update_account(self.repo, claims_for(self.ana), self.ana.id, role=Role.ADMIN)
        self.assertEqual(updated.role, Role.USER)

    def test_admin_can_change_role(self):
        updated = account_service.update_account(self.repo, claims_for(self.admin), self.bob.id, role=Role.ADMIN)
        self.assertEqual(updated.role, Role.ADMIN)

    def test_admin_edit_of_missing_account(self):
        with self.assertRaises(NotFoundError):
            account_service.update_account(self.repo, claims_for(self.admin), 'missing', name='X')

    def test_email_taken(self):
        with self.assertRaises(DuplicateError):
            account_service.update_account(self.repo, claims_for(self.ana), self.ana.id, email='bob@example.com')


class TestChangePassword(AccountServiceTestCase):

    def test_change_own_password(self):
        account_service.change_password(
            self.repo, self.hasher, claims_for(self.ana), self.ana.id, 'secret1', 'newsecret'
        )
        self.assertEqual(self.repo.get_by_id(self.ana.id).password_hash, 'hashed:newsecret')

    def test_admin_cannot_change_others_password(self):
        with self.assertRaises(PermissionDeniedError):
            account_service.change_password(
                self.repo, self.hasher, claims_for(self.admin), self.ana.id, 'secret1', 'newsecret'
            )

    def test_wrong_current_password(self):
        with self.assertRaises(ValidationError) as ctx:
            account_service.change_password(
                self.repo, self.hasher, claims_for(self.ana), self.ana.id, 'wrong', 'newsecret'
            )
        self.assertEqual(str(ctx.exception), "Current password is incorrect")

    def test_new_password_too_short(self):
        with self.assertRaises(ValidationError):
            account_service.change_password(
                self.repo, self.hasher, claims_for(self.ana), self.ana.id, 'secret1', '123'
            )
        self.assertEqual(self.repo.get_by_id(self.ana.id).password_hash, 'hashed:secret1')

    def test_google_account(self):
        gio = self.repo.create(Account.create_external(
            ExternalIdentity(email='gio@example.com', name='Gio', external_id='g-1')
        ))
        with self.assertRaises(ValidationError):
            account_service.change_password(self.repo, self.hasher, claims_for(gio), gio.id, 'x', 'newsecret')
        self.assertEqual(self.hasher.verify_calls, [])


class TestDeleteAccount(AccountServiceTestCase):

    def test_cascade(self):
        self.add_clients(self.ana, 3)
        self.add_clients(self.bob, 2)

        result = account_service.delete_account(self.repo, self.clients, claims_for(self.admin), self.ana.id)

        self.assertEqual(result.message, "Account and 3 client(s) deleted")
        self.assertEqual(result.deleted_clients, 3)
        self.assertIsNone(self.repo.get_by_id(self.ana.id))
        self.assertTrue(all(c.owner_id == self.bob.id for c in self.clients.store.values()))
        self.assertEqual(len(self.clients.store), 2)

    def test_account_without_clients(self):
        result = account_service.delete_account(self.repo, self.clients, claims_for(self.admin), self.bob.id)
        self.assertEqual(result.message, "Account deleted")

    def test_account_delete_failure_is_reported(self):
        self.add_clients(self.ana, 2)

        with patch.object(self.repo, 'delete', return_value=0):
            result = account_service.delete_account(self.repo, self.clients, claims_for(self.admin), self.ana.id)

        self.assertFalse(result.deleted)
        self.assertEqual(result.message, "Failed to delete account")
        self.assertEqual(result.deleted_clients, 2)

    def test_cannot_delete_self(self):
        with self.assertRaises(PermissionDeniedError):
            account_service.delete_account(self.repo, self.clients, claims_for(self.admin), self.admin.id)

    def test_missing_account(self):
        with self.assertRaises(NotFoundError):
            account_service.delete_account(self.repo, self.clients, claims_for(self.admin), 'missing')


if __name__ == '__main__':
    unittest.main()
