"""Unit tests for MongoUserRepository: document mapping and driver error translation."""

import unittest
from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DuplicateUserError, StorageError


def _user_doc(**overrides) -> dict:
    doc = {
        '_id': 'user-1',
        'username': 'alice',
        'email': 'alice@example.com',
        'password_hash': '$2b$10$hash',
        'dob': datetime(1990, 5, 17),
        'super_coin_bal': 99,
        'created_at': datetime(2026, 1, 1, tzinfo=timezone.utc),
        'updated_at': datetime(2026, 1, 1, tzinfo=timezone.utc),
    }
    doc.update(overrides)
    return doc


class MongoRepoTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)


class TestCreate(MongoRepoTestCase):

    def test_uses_users_collection(self):
        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)

    def test_create_inserts_document_with_default_balance(self):
        user = self.repo.create('alice', 'alice@example.com', 'hash', date(1990, 5, 17))

        self.collection.insert_one.assert_called_once()
        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['username'], 'alice')
        self.assertEqual(doc['super_coin_bal'], 99)
        self.assertEqual(doc['dob'], datetime(1990, 5, 17, tzinfo=timezone.utc))
        self.assertEqual(user.dob, date(1990, 5, 17))
        self.assertEqual(user.id, doc['_id'])

    def test_create_duplicate_key_raises_duplicate_user(self):
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")

        with self.assertRaises(DuplicateUserError):
            self.repo.create('alice', 'alice@example.com', 'hash', date(1990, 5, 17))

    def test_create_other_failure_raises_storage_error(self):
        self.collection.insert_one.side_effect = PyMongoError("connection reset")

        with self.assertRaises(StorageError):
            self.repo.create('alice', 'alice@example.com', 'hash', date(1990, 5, 17))


class TestGetByUsername(MongoRepoTestCase):

    def test_found(self):
        self.collection.find_one.return_value = _user_doc()

        user = self.repo.get_by_username('alice')

        self.collection.find_one.assert_called_once_with({'username': 'alice'})
        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.dob, date(1990, 5, 17))
        self.assertEqual(user.super_coin_bal, 99)

    def test_missing_balance_defaults(self):
        doc = _user_doc()
        del doc['super_coin_bal']
        self.collection.find_one.return_value = doc

        self.assertEqual(self.repo.get_by_username('alice').super_coin_bal, 99)

    def test_not_found(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_username('nobody'))

    def test_driver_error_raises_storage_error(self):
        self.collection.find_one.side_effect = PyMongoError("timeout")

        with self.assertRaises(StorageError):
            self.repo.get_by_username('alice')


class TestUpdateProfile(MongoRepoTestCase):

    def test_single_conditional_update(self):
        self.collection.find_one_and_update.return_value = _user_doc(username='alice2')

        user = self.repo.update_profile('alice', 'alice2', 'new@example.com', date(2000, 1, 2))

        args, kwargs = self.collection.find_one_and_update.call_args
        self.assertEqual(args[0], {'username': 'alice'})
        changes = args[1]['$set']
        self.assertEqual(changes['username'], 'alice2')
        self.assertEqual(changes['email'], 'new@example.com')
        self.assertEqual(changes['dob'], datetime(2000, 1, 2, tzinfo=timezone.utc))
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)
        self.assertEqual(user.username, 'alice2')

    def test_omitted_fields_not_set(self):
        self.collection.find_one_and_update.return_value = _user_doc(username='alice2')

        self.repo.update_profile('alice', 'alice2')

        changes = self.collection.find_one_and_update.call_args[0][1]['$set']
        self.assertNotIn('email', changes)
        self.assertNotIn('dob', changes)

    def test_no_match_returns_none(self):
        self.collection.find_one_and_update.return_value = None
        self.assertIsNone(self.repo.update_profile('ghost', 'alice2'))

    def test_duplicate_key_raises_duplicate_user(self):
        self.collection.find_one_and_update.side_effect = DuplicateKeyError("E11000 duplicate key error")

        with self.assertRaises(DuplicateUserError):
            self.repo.update_profile('alice', 'bob')

    def test_driver_error_raises_storage_error(self):
        self.collection.find_one_and_update.side_effect = PyMongoError("boom")

        with self.assertRaises(StorageError):
            self.repo.update_profile('alice', 'bob')


class TestEnsureIndexes(MongoRepoTestCase):

    def test_creates_unique_username_and_email_indexes(self):
        self.repo.ensure_indexes()

        calls = self.collection.create_index.call_args_list
        self.assertEqual(calls[0].args[0], [('username', 1)])
        self.assertTrue(calls[0].kwargs['unique'])
        self.assertEqual(calls[1].args[0], [('email', 1)])
        self.assertTrue(calls[1].kwargs['unique'])

    def test_email_index_not_unique_when_disabled(self):
        repo = MongoUserRepository(self.db, unique_email=False)
        repo.ensure_indexes()

        email_call = self.collection.create_index.call_args_list[1]
        self.assertFalse(email_call.kwargs['unique'])

    def test_conflicting_index_is_recreated(self):
        self.collection.create_index.side_effect = [
            OperationFailure("Index with name: idx_users_username already exists with different options"),
            None,
            None,
        ]
        self.collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'idx_users_username': {'key': [('username', 1)]},
        }

        self.repo.ensure_indexes()
        self.collection.drop_index.assert_called_once_with('idx_users_username')

    def test_unique_index_failure_raises_storage_error(self):
        self.collection.create_index.side_effect = PyMongoError("not authorized")

        with self.assertRaises(StorageError):
            self.repo.ensure_indexes()

    def test_existing_duplicates_block_unique_username_index(self):
        self.collection.create_index.side_effect = DuplicateKeyError(
            "E11000 duplicate key error collection: accounts.users index: idx_users_username"
        )

        with self.assertRaises(StorageError):
            self.repo.ensure_indexes()

    def test_unresolved_unique_conflict_raises_storage_error(self):
        self.collection.create_index.side_effect = OperationFailure(
            "Index with name: idx_users_username already exists with different options"
        )
        self.collection.index_information.return_value = {'_id_': {'key': [('_id', 1)]}}

        with self.assertRaises(StorageError):
            self.repo.ensure_indexes()

    def test_non_unique_email_index_failure_is_tolerated(self):
        repo = MongoUserRepository(self.db, unique_email=False)
        self.collection.create_index.side_effect = [None, PyMongoError("not authorized")]

        repo.ensure_indexes()
        self.assertEqual(self.collection.create_index.call_count, 2)


class TestPing(MongoRepoTestCase):

    @patch('adapter.mongodb.connection.ping')
    def test_ping_delegates_to_client(self, mock_ping):
        mock_ping.return_value = True
        self.assertTrue(self.repo.ping())
        mock_ping.assert_called_once_with(self.collection.database.client)


if __name__ == '__main__':
    unittest.main()
