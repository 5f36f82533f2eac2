"""
二次验证接口测试(五段式响应)
"""
import pyotp
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from users.totp import step_up
from users.tests.factories import User, create_user, reset_twofa_state

ENVELOPE_KEYS = {"success", "code", "message", "data", "request_id"}


class TwoFactorApiTestCase(APITestCase):
    def setUp(self):
        reset_twofa_state()
        self.user = create_user()
        self.client.force_login(self.user)

    def assertEnvelope(self, response, *, success, code, http_status):
        self.assertEqual(response.status_code, http_status)
        body = response.json()
        self.assertEqual(set(body), ENVELOPE_KEYS)
        self.assertEqual(body["success"], success)
        self.assertEqual(body["code"], code)
        self.assertEqual(body["request_id"], response["X-Request-Id"])
        return body["data"]

    def _enable_and_confirm(self) -> str:
        data = self.assertEnvelope(
            self.client.post(reverse("users:2fa_enable")), success=True, code="OK", http_status=200,
        )
        secret = data["secret"]
        self.client.post(reverse("users:2fa_confirm"), {"one_time_password": pyotp.TOTP(secret).now()})
        return secret

    def test_enrollment_flow(self):
        data = self.assertEnvelope(
            self.client.post(reverse("users:2fa_enable")), success=True, code="OK", http_status=200,
        )
        self.assertEqual(set(data), {"image", "secret"})
        self.assertTrue(data["image"].startswith("data:image/png;base64,"))

        status_data = self.client.get(reverse("users:2fa_status")).json()["data"]
        self.assertTrue(status_data["setup_pending"])
        self.assertFalse(status_data["enabled"])

        response = self.client.post(
            reverse("users:2fa_confirm"), {"one_time_password": pyotp.TOTP(data["secret"]).now()},
        )
        self.assertEqual(self.assertEnvelope(response, success=True, code="OK", http_status=200), {"success": True})

        self.user.refresh_from_db()
        self.assertEqual(self.user.totp_secret, data["secret"])
        self.assertTrue(self.client.session[step_up.SESSION_AUTH_PASSED])

        status_data = self.client.get(reverse("users:2fa_status")).json()["data"]
        self.assertEqual(
            status_data,
            {"enabled": True, "setup_pending": False, "recovery_codes_remaining": 0, "step_up_passed": True},
        )

    def test_enable_when_enabled(self):
        self._enable_and_confirm()
        response = self.client.post(reverse("users:2fa_enable"))
        self.assertEnvelope(response, success=False, code="TWOFA.ALREADY_ENABLED", http_status=409)

    def test_confirm_without_enable(self):
        response = self.client.post(reverse("users:2fa_confirm"), {"one_time_password": "123456"})
        self.assertEnvelope(response, success=False, code="TWOFA.NO_PENDING_SECRET", http_status=400)

    def test_confirm_requires_code(self):
        response = self.client.post(reverse("users:2fa_confirm"), {})
        data = self.assertEnvelope(response, success=False, code="COMMON.INVALID_PARAMS", http_status=400)
        self.assertIn("one_time_password", data["fields"])

    def test_disable_failures_are_uniform(self):
        not_enabled = self.client.post(reverse("users:2fa_disable"), {"one_time_password": "123456"})

        secret = self._enable_and_confirm()
        totp = pyotp.TOTP(secret)
        wrong = next(c for c in ("000000", "111111", "222222") if not totp.verify(c, valid_window=1))
        wrong_code = self.client.post(reverse("users:2fa_disable"), {"one_time_password": wrong})

        self.assertEnvelope(not_enabled, success=False, code="TWOFA.VERIFICATION_FAILED", http_status=400)
        self.assertEnvelope(wrong_code, success=False, code="TWOFA.VERIFICATION_FAILED", http_status=400)
        self.assertEqual(not_enabled.json()["message"], wrong_code.json()["message"])

    def test_disable_with_valid_code(self):
        secret = self._enable_and_confirm()
        response = self.client.post(reverse("users:2fa_disable"), {"one_time_password": pyotp.TOTP(secret).now()})

        self.assertEnvelope(response, success=True, code="OK", http_status=200)
        self.user.refresh_from_db()
        self.assertIsNone(self.user.totp_secret)
        self.assertNotIn(step_up.SESSION_AUTH_PASSED, self.client.session)

    def test_disable_confirmation_page(self):
        response = self.client.get(reverse("users:2fa_disable"))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "users/2fa_disable.html")

    def test_recovery_codes_require_step_up(self):
        response = self.client.post(reverse("users:2fa_recovery_codes"))
        self.assertEnvelope(response, success=False, code="TWOFA.NOT_ENABLED", http_status=400)

        User.objects.filter(pk=self.user.pk).update(totp_secret=pyotp.random_base32())
        response = self.client.post(reverse("users:2fa_recovery_codes"))
        self.assertEnvelope(response, success=False, code="TWOFA.STEP_UP_REQUIRED", http_status=403)

    def test_recovery_codes_and_verify(self):
        self._enable_and_confirm()
        data = self.assertEnvelope(
            self.client.post(reverse("users:2fa_recovery_codes")), success=True, code="OK", http_status=200,
        )
        codes = data["codes"]
        self.assertEqual(len(codes), 8)

        response = self.client.post(reverse("users:2fa_verify"), {"one_time_password": codes[0]})
        self.assertEqual(
            self.assertEnvelope(response, success=True, code="OK", http_status=200),
            {"success": True, "method": "recovery"},
        )
        response = self.client.post(reverse("users:2fa_verify"), {"one_time_password": codes[0]})
        self.assertEnvelope(response, success=False, code="TWOFA.INVALID_CODE", http_status=400)

    def test_verify_rate_limit(self):
        self._enable_and_confirm()
        for _ in range(5):
            self.client.post(reverse("users:2fa_verify"), {"one_time_password": "NOT-A-CODE"})
        response = self.client.post(reverse("users:2fa_verify"), {"one_time_password": "NOT-A-CODE"})
        data = self.assertEnvelope(response, success=False, code="TWOFA.TOO_MANY_ATTEMPTS", http_status=429)
        self.assertEqual(data, {"retry_after": 300})

    def test_anonymous_request(self):
        self.client.logout()
        response = self.client.post(reverse("users:2fa_enable"))
        self.assertEnvelope(response, success=False, code="AUTH.UNAUTHORIZED", http_status=403)

    def test_inbound_request_id_is_echoed(self):
        response = self.client.get(reverse("users:2fa_status"), HTTP_X_REQUEST_ID="gateway-req-0001")
        self.assertEqual(response["X-Request-Id"], "gateway-req-0001")
        self.assertEqual(response.json()["request_id"], "gateway-req-0001")

    def test_unsafe_request_id_is_replaced(self):
        response = self.client.get(reverse("users:2fa_status"), HTTP_X_REQUEST_ID="bad id\nX-Injected: 1")
        self.assertNotIn("\n", response["X-Request-Id"])
        self.assertEqual(len(response["X-Request-Id"]), 32)
