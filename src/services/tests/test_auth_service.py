"""Tests for registration and the two login flows."""

import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from adapter.fake.account_repository import FakeAccountRepository
from adapter.fake.identity_provider import FakeIdentityProvider
from adapter.fake.password_hasher import FakePasswordHasher
from domain.model.account import Provider, Role
from domain.model.errors import AuthenticationError, DuplicateError, ExternalIdentityError, ValidationError
from domain.model.identity import ExternalIdentity
from services import auth_service
from services.token_service import TokenIssuer


class AuthServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeAccountRepository()
        self.hasher = FakePasswordHasher()
        self.issuer = TokenIssuer("test-secret")


class TestRegister(AuthServiceTestCase):

    def test_register_hashes_password(self):
        account = auth_service.register(self.repo, self.hasher, 'Ana', 'ana@example.com', 'secret1')

        self.assertEqual(account.password_hash, 'hashed:secret1')
        self.assertEqual(account.provider, Provider.LOCAL)
        self.assertEqual(account.role, Role.USER)
        self.assertIsNotNone(self.repo.get_by_email('ana@example.com'))

    def test_register_with_role(self):
        account = auth_service.register(self.repo, self.hasher, 'Ana', 'ana@example.com', 'secret1', Role.ADMIN)
        self.assertEqual(account.role, Role.ADMIN)

    def test_duplicate_email(self):
        auth_service.register(self.repo, self.hasher, 'Ana', 'ana@example.com', 'secret1')

        with self.assertRaises(DuplicateError):
            auth_service.register(self.repo, self.hasher, 'Other', 'ana@example.com', 'secret2')
        self.assertEqual(self.repo.count(), 1)

    def test_short_password(self):
        with self.assertRaises(ValidationError):
            auth_service.register(self.repo, self.hasher, 'Ana', 'ana@example.com', '12345')
        self.assertEqual(self.repo.count(), 0)


class TestLogin(AuthServiceTestCase):

    def setUp(self):
        super().setUp()
        self.account = auth_service.register(self.repo, self.hasher, 'Ana', 'ana@example.com', 'secret1')

    def test_login_issues_token_for_account(self):
        result = auth_service.login(self.repo, self.hasher, self.issuer, 'ana@example.com', 'secret1')

        claims = self.issuer.decode(result.access_token)
        self.assertEqual(claims.id, self.account.id)
        self.assertEqual(claims.email, 'ana@example.com')
        self.assertEqual(result.user.id, self.account.id)

    def test_login_updates_last_login_once(self):
        started = datetime.now(timezone.utc)
        with patch.object(self.repo, 'update_last_login', wraps=self.repo.update_last_login) as spy:
            auth_service.login(self.repo, self.hasher, self.issuer, 'ana@example.com', 'secret1')

        spy.assert_called_once()
        self.assertGreaterEqual(self.repo.get_by_id(self.account.id).last_login, started)

    def test_unknown_email_and_wrong_password_look_the_same(self):
        with self.assertRaises(AuthenticationError) as unknown:
            auth_service.login(self.repo, self.hasher, self.issuer, 'bob@example.com', 'secret1')
        with self.assertRaises(AuthenticationError) as wrong:
            auth_service.login(self.repo, self.hasher, self.issuer, 'ana@example.com', 'nope')

        self.assertEqual(str(unknown.exception), str(wrong.exception))
        self.assertIsNone(self.repo.get_by_id(self.account.id).last_login)


class TestLoginWithExternal(AuthServiceTestCase):

    def setUp(self):
        super().setUp()
        self.provider = FakeIdentityProvider({
            'good-credential': ExternalIdentity(email='gio@example.com', name='Gio', external_id='g-1'),
        })

    def test_first_login_creates_account(self):
        result = auth_service.login_with_external(self.repo, self.provider, self.issuer, 'good-credential')

        account = self.repo.get_by_email('gio@example.com')
        self.assertEqual(account.provider, Provider.GOOGLE)
        self.assertIsNotNone(account.last_login)
        self.assertEqual(self.issuer.decode(result.access_token).id, account.id)

    def test_updates_last_login_once(self):
        with patch.object(self.repo, 'update_last_login', wraps=self.repo.update_last_login) as spy:
            auth_service.login_with_external(self.repo, self.provider, self.issuer, 'good-credential')
        spy.assert_called_once()

    def test_rejected_credential(self):
        with self.assertRaises(ExternalIdentityError):
            auth_service.login_with_external(self.repo, self.provider, self.issuer, 'bad-credential')
        self.assertEqual(self.repo.count(), 0)

    def test_linked_account_can_no_longer_use_password(self):
        auth_service.register(self.repo, self.hasher, 'Gio', 'gio@example.com', 'secret1')
        auth_service.login_with_external(self.repo, self.provider, self.issuer, 'good-credential')

        with self.assertRaises(AuthenticationError):
            auth_service.login(self.repo, self.hasher, self.issuer, 'gio@example.com', 'secret1')

class TestLoginWithAuthorizationCode(AuthServiceTestCase):

    def setUp(self):
        super().setUp()
        self.provider = FakeIdentityProvider(codes={
            'good-code': ExternalIdentity(email='gio@example.com', name='Gio', external_id='g-1'),
        })

    def test_code_login_creates_account(self):
        with patch.object(self.repo, 'update_last_login', wraps=self.repo.update_last_login) as spy:
            result = auth_service.login_with_authorization_code(self.repo, self.provider, self.issuer, 'good-code')

        account = self.repo.get_by_email('gio@example.com')
        self.assertEqual(account.provider, Provider.GOOGLE)
        self.assertEqual(account.external_id, 'g-1')
        self.assertIsNotNone(account.last_login)
        self.assertEqual(result.user.id, account.id)
        self.assertEqual(self.issuer.decode(result.access_token).id, account.id)
        spy.assert_called_once()

    def test_bad_code(self):
        with self.assertRaises(ExternalIdentityError):
            auth_service.login_with_authorization_code(self.repo, self.provider, self.issuer, 'used-code')
        self.assertEqual(self.repo.count(), 0)



if __name__ == '__main__':
    unittest.main()
