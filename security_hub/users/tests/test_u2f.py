from django.urls import reverse
from rest_framework.test import APITestCase
from webauthn.helpers import bytes_to_base64url

from users.models import SecurityKey
from users.u2f.u2f_service import SESSION_REGISTER_DATA
from users.tests.factories import create_user


class U2FRegisterTestCase(APITestCase):
    def setUp(self):
        self.user = create_user()
        self.client.force_login(self.user)
        self.existing = bytes_to_base64url(b"existing-key-handle")
        SecurityKey.objects.create(user=self.user, name="yubikey", credential_id=self.existing, public_key="pk")

    def test_begin_registration(self):
        response = self.client.post(reverse("users:u2f_register"))

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["currentKeys"], [self.existing])

        register_data = data["registerData"]
        self.assertEqual(register_data["rp"]["id"], "testserver")
        self.assertEqual([c["id"] for c in register_data["excludeCredentials"]], [self.existing])
        self.assertEqual(self.client.session[SESSION_REGISTER_DATA], register_data["challenge"])

    def test_challenge_changes_per_call(self):
        first = self.client.post(reverse("users:u2f_register")).json()["data"]["registerData"]["challenge"]
        second = self.client.post(reverse("users:u2f_register")).json()["data"]["registerData"]["challenge"]
        self.assertNotEqual(first, second)
