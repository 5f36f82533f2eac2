from django.core.cache import cache
from django.test import SimpleTestCase

from users.exceptions import TooManyAttemptsError
from users.totp.attempt_limiter import AttemptLimiter, get_fail_key


class AttemptLimiterTestCase(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.limiter = AttemptLimiter("confirm", limit=3, window=300)

    def test_locks_after_limit(self):
        for _ in range(2):
            self.limiter.record_failure(42)
        self.assertFalse(self.limiter.is_locked(42))

        self.assertEqual(self.limiter.record_failure(42), 3)
        self.assertTrue(self.limiter.is_locked(42))
        with self.assertRaises(TooManyAttemptsError) as ctx:
            self.limiter.ensure_not_locked(42)
        self.assertEqual(ctx.exception.retry_after, 300)

    def test_reset_clears_counter(self):
        for _ in range(3):
            self.limiter.record_failure(42)
        self.limiter.reset(42)
        self.assertEqual(self.limiter.failures(42), 0)
        self.assertIsNone(cache.get(get_fail_key("confirm", 42)))

    def test_scopes_are_isolated(self):
        for _ in range(3):
            self.limiter.record_failure(42)
        self.assertFalse(AttemptLimiter("disable", limit=3).is_locked(42))

    def test_defaults_from_settings(self):
        limiter = AttemptLimiter("verify")
        self.assertEqual((limiter.limit, limiter.window), (5, 300))
