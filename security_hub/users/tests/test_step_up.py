"""
登录二次验证测试: TOTP 动态码 / 恢复码
"""
import pyotp
from django.test import TestCase, override_settings

from users.exceptions import InvalidCodeError, NotEnabledError, TooManyAttemptsError
from users.recovery import RecoveryCodeService
from users.totp import step_up
from users.tests.factories import User, create_user, reset_twofa_state


class StepUpServiceTestCase(TestCase):
    def setUp(self):
        reset_twofa_state()
        self.secret = pyotp.random_base32()
        self.user = create_user()
        User.objects.filter(pk=self.user.pk).update(totp_secret=self.secret)
        self.user.refresh_from_db()
        self.service = step_up.StepUpService()
        self.session = {}

    def test_session_flags(self):
        step_up.mark_passed(self.session)
        self.assertTrue(step_up.is_passed(self.session))
        self.assertIn(step_up.SESSION_AUTH_TIME, self.session)
        step_up.clear(self.session)
        self.assertEqual(self.session, {})

    def test_totp_code(self):
        method = self.service.verify_login(self.user, pyotp.TOTP(self.secret).now(), self.session)
        self.assertEqual(method, "totp")
        self.assertTrue(step_up.is_passed(self.session))

    def test_recovery_code_is_consumed(self):
        code = RecoveryCodeService().regenerate(self.user)[0]

        self.assertEqual(self.service.verify_login(self.user, code, self.session), "recovery")
        step_up.clear(self.session)
        with self.assertRaises(InvalidCodeError):
            self.service.verify_login(self.user, code, self.session)
        self.assertFalse(step_up.is_passed(self.session))

    def test_not_enabled(self):
        other = create_user(email="bob@example.com", username="bob")
        with self.assertRaises(NotEnabledError):
            self.service.verify_login(other, "123456", self.session)

    def test_locks_after_repeated_failures(self):
        for _ in range(5):
            with self.assertRaises(InvalidCodeError):
                self.service.verify_login(self.user, "WRONG-CODE", self.session)
        with self.assertRaises(TooManyAttemptsError):
            self.service.verify_login(self.user, pyotp.TOTP(self.secret).now(), self.session)

    @override_settings(RECOVERY_CODES={"COUNT": 4, "BLOCKS": 1, "BLOCK_LENGTH": 6, "ALPHABET": "0123456789"})
    def test_digit_only_recovery_code(self):
        codes = RecoveryCodeService().regenerate(self.user)
        code = next(c for c in codes if not pyotp.TOTP(self.secret).verify(c, valid_window=1))

        self.assertEqual(self.service.verify_login(self.user, code, self.session), "recovery")
        self.assertEqual(RecoveryCodeService().remaining(self.user), 3)
