"""Tests for the MongoDB account and client repositories."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import ACCOUNTS_COLLECTION_NAME, CLIENTS_COLLECTION_NAME
from adapter.mongodb.account_repository import MongoAccountRepository
from adapter.mongodb.client_repository import MongoClientRepository
from domain.model.account import Account, Provider, Role
from domain.model.client import ClientRecord, ClientStatus
from domain.model.errors import DuplicateError
from domain.model.query import Query


def _mock_db():
    collection = MagicMock()
    db = MagicMock()
    db.__getitem__.return_value = collection
    return db, collection


class TestMongoAccountRepository(unittest.TestCase):

    def setUp(self):
        self.db, self.collection = _mock_db()
        self.repo = MongoAccountRepository(self.db)
        self.now = datetime(2026, 3, 1, tzinfo=timezone.utc)

    def test_uses_accounts_collection(self):
        self.db.__getitem__.assert_called_with(ACCOUNTS_COLLECTION_NAME)

    def test_get_by_email_converts_document(self):
        self.collection.find_one.return_value = {
            '_id': 'u-1',
            'name': 'Ana',
            'email': 'ana@example.com',
            'created_at': self.now,
            'updated_at': self.now,
            'role': 'admin',
            'provider': 'google',
            'external_id': 'g-1',
        }

        account = self.repo.get_by_email('ana@example.com')

        self.assertEqual(account.id, 'u-1')
        self.assertEqual(account.role, Role.ADMIN)
        self.assertEqual(account.provider, Provider.GOOGLE)
        self.assertIsNone(account.password_hash)
        self.collection.find_one.assert_called_once_with({'email': 'ana@example.com'})

    def test_get_by_id_missing(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_id('nope'))

    def test_create_writes_enum_values(self):
        account = Account.create_local('Ana', 'ana@example.com', 'digest')

        self.repo.create(account)

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], account.id)
        self.assertEqual(doc['role'], 'user')
        self.assertEqual(doc['provider'], 'local')
        self.assertEqual(doc['password_hash'], 'digest')

    def test_create_duplicate_raises_domain_error(self):
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with self.assertRaises(DuplicateError):
            self.repo.create(Account.create_local('Ana', 'ana@example.com', 'digest'))

    def test_create_storage_error_propagates(self):
        self.collection.insert_one.side_effect = PyMongoError("connection reset")

        with self.assertRaises(PyMongoError):
            self.repo.create(Account.create_local('Ana', 'ana@example.com', 'digest'))

    def test_update_sets_updated_at_and_unwraps_enums(self):
        self.collection.update_one.return_value = MagicMock(matched_count=1)

        self.assertEqual(self.repo.update('u-1', {'role': Role.ADMIN}), 1)

        filter_doc, update_doc = self.collection.update_one.call_args[0]
        self.assertEqual(filter_doc, {'_id': 'u-1'})
        self.assertEqual(update_doc['$set']['role'], 'admin')
        self.assertIn('updated_at', update_doc['$set'])

    def test_update_last_login(self):
        self.collection.update_one.return_value = MagicMock(matched_count=0)
        self.assertFalse(self.repo.update_last_login('u-1', self.now))

        self.collection.update_one.return_value = MagicMock(matched_count=1)
        self.assertTrue(self.repo.update_last_login('u-1', self.now))

    def test_delete_returns_deleted_count(self):
        self.collection.delete_one.return_value = MagicMock(deleted_count=1)
        self.assertEqual(self.repo.delete('u-1'), 1)
        self.collection.delete_one.assert_called_once_with({'_id': 'u-1'})

    def test_count_without_query(self):
        self.collection.count_documents.return_value = 4
        self.assertEqual(self.repo.count(), 4)
        self.collection.count_documents.assert_called_once_with({})

    def test_ensure_indexes_creates_unique_email(self):
        self.assertTrue(self.repo.ensure_indexes())

        first = self.collection.create_index.call_args_list[0]
        self.assertEqual(first[0][0], [('email', 1)])
        self.assertTrue(first[1]['unique'])


class TestMongoClientRepository(unittest.TestCase):

    def setUp(self):
        self.db, self.collection = _mock_db()
        self.repo = MongoClientRepository(self.db)
        self.now = datetime(2026, 3, 1, tzinfo=timezone.utc)

    def _client(self) -> ClientRecord:
        return ClientRecord.create({
            'display_name': 'Loja', 'tax_id': '123', 'legal_name': 'Loja LTDA',
            'postal_code': '00000-000', 'street': 'Rua A', 'number': '1',
            'district': 'Centro', 'city': 'Recife', 'state': 'PE',
        }, owner_id='u-1')

    def test_uses_clients_collection(self):
        self.db.__getitem__.assert_called_with(CLIENTS_COLLECTION_NAME)

    def test_create_maps_id(self):
        client = self._client()

        self.repo.create(client)

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], client.id)
        self.assertNotIn('id', doc)
        self.assertEqual(doc['status'], 'active')

    def test_create_duplicate_tax_id(self):
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with self.assertRaises(DuplicateError):
            self.repo.create(self._client())

    def test_find_one_round_trips_document(self):
        client = self._client()
        doc = client.to_dict()
        doc['_id'] = doc.pop('id')
        doc['status'] = 'suspended'
        self.collection.find_one.return_value = doc

        found = self.repo.find_one(Query.by_id(client.id, 'owner_id', 'u-1'))

        self.assertEqual(found.id, client.id)
        self.assertEqual(found.status, ClientStatus.SUSPENDED)
        self.collection.find_one.assert_called_once_with(
            {'$and': [{'_id': client.id}, {'owner_id': 'u-1'}]}
        )

    def test_find_applies_sort(self):
        cursor = MagicMock()
        cursor.sort.return_value = []
        self.collection.find.return_value = cursor

        result = self.repo.find(Query().eq('owner_id', 'u-1').order_by('city'))

        self.assertEqual(result, [])
        self.collection.find.assert_called_once_with({'owner_id': 'u-1'})
        cursor.sort.assert_called_once_with([('city', 1)])

    def test_update_unwraps_status(self):
        self.collection.update_one.return_value = MagicMock(matched_count=1)

        self.repo.update('c-1', {'status': ClientStatus.INACTIVE})

        update_doc = self.collection.update_one.call_args[0][1]
        self.assertEqual(update_doc['$set']['status'], 'inactive')
        self.assertIn('updated_at', update_doc['$set'])

    def test_delete_by_owner(self):
        self.collection.delete_many.return_value = MagicMock(deleted_count=3)

        self.assertEqual(self.repo.delete(Query().eq('owner_id', 'u-1')), 3)
        self.collection.delete_many.assert_called_once_with({'owner_id': 'u-1'})

    def test_delete_storage_error_propagates(self):
        self.collection.delete_many.side_effect = PyMongoError("timeout")

        with self.assertRaises(PyMongoError):
            self.repo.delete(Query.by_id('c-1'))


if __name__ == '__main__':
    unittest.main()
