"""
TOTP 解绑测试
"""
from unittest.mock import MagicMock, patch

import pyotp
from django.db import DatabaseError
from django.test import TestCase

from users.exceptions import (
    InvalidCodeError,
    NotEnabledError,
    OperationInProgressError,
    PersistenceFailureError,
    TooManyAttemptsError,
)
from users.models import RecoveryCode
from users.recovery import RecoveryCodeService
from users.totp import step_up
from users.totp.totp_service import TwoFactorDeactivationService
from users.tests.factories import User, create_user, reset_twofa_state


class TwoFactorDeactivationTestCase(TestCase):
    def setUp(self):
        reset_twofa_state()
        self.secret = pyotp.random_base32()
        self.user = create_user()
        User.objects.filter(pk=self.user.pk).update(totp_secret=self.secret)
        self.user.refresh_from_db()
        self.service = TwoFactorDeactivationService()
        self.session = {}
        step_up.mark_passed(self.session)

    def _wrong_code(self):
        totp = pyotp.TOTP(self.secret)
        return next(c for c in ("000000", "111111", "222222") if not totp.verify(c, valid_window=1))

    def test_wrong_code_leaves_secret(self):
        with self.assertRaises(InvalidCodeError):
            self.service.disable(self.user, self._wrong_code(), self.session)

        self.user.refresh_from_db()
        self.assertEqual(self.user.totp_secret, self.secret)
        self.assertTrue(step_up.is_passed(self.session))

    def test_correct_code_clears_secret_then_second_disable_fails(self):
        self.assertTrue(self.service.disable(self.user, pyotp.TOTP(self.secret).now(), self.session))

        self.user.refresh_from_db()
        self.assertIsNone(self.user.totp_secret)
        self.assertFalse(self.user.totp_enabled)
        self.assertFalse(step_up.is_passed(self.session))

        with self.assertRaises(NotEnabledError):
            self.service.disable(self.user, pyotp.TOTP(self.secret).now(), self.session)

    def test_disable_drops_recovery_codes(self):
        RecoveryCodeService().regenerate(self.user)
        self.assertEqual(RecoveryCode.objects.filter(user=self.user).count(), 8)

        self.service.disable(self.user, pyotp.TOTP(self.secret).now(), self.session)

        self.assertFalse(RecoveryCode.objects.filter(user=self.user).exists())

    def test_never_enabled_user(self):
        other = create_user(email="bob@example.com", username="bob")
        with self.assertRaises(NotEnabledError):
            self.service.disable(other, "123456", {})

    def test_not_enabled_failures_count_towards_lockout(self):
        other = create_user(email="bob@example.com", username="bob")
        for _ in range(5):
            with self.assertRaises(NotEnabledError):
                self.service.disable(other, "123456", {})

        with self.assertRaises(TooManyAttemptsError):
            self.service.disable(other, "123456", {})

    def test_user_lock_busy(self):
        lock = MagicMock()
        lock.lock.return_value.__enter__.return_value = False
        lock.lock.return_value.__exit__.return_value = False
        service = TwoFactorDeactivationService(lock_factory=MagicMock(return_value=lock))

        with self.assertRaises(OperationInProgressError):
            service.disable(self.user, pyotp.TOTP(self.secret).now(), self.session)

        self.user.refresh_from_db()
        self.assertEqual(self.user.totp_secret, self.secret)
        self.assertTrue(step_up.is_passed(self.session))

    def test_database_error_keeps_secret_and_recovery_codes(self):
        RecoveryCodeService().regenerate(self.user)

        with patch.object(RecoveryCode.objects, "filter", side_effect=DatabaseError("lock wait timeout")):
            with self.assertRaises(PersistenceFailureError):
                self.service.disable(self.user, pyotp.TOTP(self.secret).now(), self.session)

        self.user.refresh_from_db()
        self.assertEqual(self.user.totp_secret, self.secret)
        self.assertEqual(RecoveryCode.objects.filter(user=self.user).count(), 8)
        self.assertTrue(step_up.is_passed(self.session))
