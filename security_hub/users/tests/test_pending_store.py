"""
待确认密钥存储测试
"""
import json
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase
from redis.exceptions import ConnectionError as RedisConnectionError

from users.exceptions import PersistenceFailureError
from users.totp.pending_store import (
    LocalPendingStore,
    PendingEnrollment,
    RedisPendingStore,
    build_pending_store,
    get_pending_key,
)


class LocalPendingStoreTestCase(SimpleTestCase):
    def setUp(self):
        self.store = LocalPendingStore(ttl_seconds=600)

    def test_take_and_clear_is_one_shot(self):
        self.store.put("sess-1", 7, "SECRET1")

        entry = self.store.take_and_clear("sess-1")
        self.assertEqual((entry.user_id, entry.secret), (7, "SECRET1"))
        self.assertIsNone(self.store.take_and_clear("sess-1"))

    def test_reissue_overwrites(self):
        self.store.put("sess-1", 7, "SECRET1")
        self.store.put("sess-1", 7, "SECRET2")
        self.assertEqual(self.store.take_and_clear("sess-1").secret, "SECRET2")

    def test_sessions_are_isolated(self):
        self.store.put("sess-1", 7, "SECRET1")
        self.assertIsNone(self.store.take_and_clear("sess-2"))
        self.assertIsNotNone(self.store.peek("sess-1"))

    def test_peek_does_not_consume(self):
        self.store.put("sess-1", 7, "SECRET1")
        self.store.peek("sess-1")
        self.assertIsNotNone(self.store.take_and_clear("sess-1"))

    def test_expired_entry_is_not_returned(self):
        with patch("users.totp.pending_store.time.time", return_value=1000.0):
            self.store.put("sess-1", 7, "SECRET1")
        with patch("users.totp.pending_store.time.time", return_value=1601.0):
            self.assertIsNone(self.store.peek("sess-1"))
            self.assertIsNone(self.store.take_and_clear("sess-1"))


class RedisPendingStoreTestCase(SimpleTestCase):
    def setUp(self):
        self.client = MagicMock()
        self.pipe = self.client.pipeline.return_value.__enter__.return_value
        self.store = RedisPendingStore(self.client, ttl_seconds=600)

    def test_put_sets_key_with_ttl(self):
        entry = self.store.put("sess-1", 7, "SECRET1")

        args, kwargs = self.client.set.call_args
        self.assertEqual(args[0], "totp:pending:sess-1")
        self.assertEqual(json.loads(args[1])["secret"], "SECRET1")
        self.assertEqual(kwargs["ex"], 600)
        self.assertEqual(entry.user_id, 7)

    def test_take_and_clear_uses_transaction(self):
        raw = PendingEnrollment("sess-1", 7, "SECRET1", 1000.0).to_json()
        self.pipe.execute.return_value = [raw, 1]

        entry = self.store.take_and_clear("sess-1")

        self.client.pipeline.assert_called_once_with(transaction=True)
        self.pipe.get.assert_called_once_with(get_pending_key("sess-1"))
        self.pipe.delete.assert_called_once_with(get_pending_key("sess-1"))
        self.assertEqual(entry.secret, "SECRET1")

    def test_missing_entry(self):
        self.pipe.execute.return_value = [None, 0]
        self.assertIsNone(self.store.take_and_clear("sess-1"))

    def test_corrupt_entry_is_treated_as_missing(self):
        self.pipe.execute.return_value = ["{not json", 1]
        self.assertIsNone(self.store.take_and_clear("sess-1"))

    def test_redis_failure_surfaces(self):
        self.client.set.side_effect = RedisConnectionError("down")
        with self.assertRaises(PersistenceFailureError):
            self.store.put("sess-1", 7, "SECRET1")

        self.pipe.execute.side_effect = RedisConnectionError("down")
        with self.assertRaises(PersistenceFailureError):
            self.store.take_and_clear("sess-1")


class BuildPendingStoreTestCase(SimpleTestCase):
    def test_local_store_is_shared(self):
        self.assertIs(build_pending_store("local"), build_pending_store())

    def test_redis_store_uses_pending_db(self):
        with patch("users.totp.pending_store.get_redis_client") as get_client:
            store = build_pending_store("redis")
        get_client.assert_called_once_with(db=5)
        self.assertIsInstance(store, RedisPendingStore)

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            build_pending_store("memcached")
