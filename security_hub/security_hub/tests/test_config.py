"""
配置与密钥来源测试
"""
from unittest.mock import MagicMock, patch

from azure.core.exceptions import ResourceNotFoundError
from django.test import SimpleTestCase

from security_hub.settings.azure_key_vault_client import AzureKeyVaultClient
from security_hub.settings.config import SecretSource, django_secret_key_default, get_int_config


class SecretSourceTestCase(SimpleTestCase):
    def test_unknown_backend(self):
        with self.assertRaises(RuntimeError):
            SecretSource("consul")

    @patch.dict("os.environ", {"REDIS_PASSWORD": "from-env"})
    def test_env_backend_reads_value(self):
        self.assertEqual(SecretSource("env").get("REDIS_PASSWORD", "redis-pd"), "from-env")

    @patch.dict("os.environ", {"REDIS_PASSWORD_NAME": "custom-redis-name", "AZURE_VAULT_URL": "https://kv.example"})
    def test_vault_backend_reads_secret_name(self):
        vault = MagicMock()
        vault.get_secret.return_value = "from-vault"
        with patch("security_hub.settings.azure_key_vault_client.AzureKeyVaultClient", return_value=vault) as client_cls:
            value = SecretSource("vault").get("REDIS_PASSWORD", "redis-pd")

        client_cls.assert_called_once_with("https://kv.example")
        vault.get_secret.assert_called_once_with("custom-redis-name")
        self.assertEqual(value, "from-vault")

    def test_secret_key_default_only_for_dev_and_test(self):
        self.assertIsNotNone(django_secret_key_default("security_hub.settings.dev"))
        self.assertIsNotNone(django_secret_key_default("security_hub.settings.test"))
        self.assertIsNone(django_secret_key_default("security_hub.settings.prod"))
        self.assertIsNone(django_secret_key_default(""))

    @patch.dict("os.environ", {"SECRET_BACKEND": "env"}, clear=True)
    def test_missing_secret_key_is_fatal_in_prod(self):
        with self.assertRaises(RuntimeError):
            SecretSource("env").get(
                "DJANGO_SECRET_KEY", "Django-SECRET-KEY", default=django_secret_key_default("security_hub.settings.prod"),
            )

    @patch.dict("os.environ", {"FAIL_LIMIT_X": "abc"})
    def test_int_config_rejects_garbage(self):
        with self.assertRaises(RuntimeError):
            get_int_config("FAIL_LIMIT_X", 5)


class AzureKeyVaultClientTestCase(SimpleTestCase):
    def setUp(self):
        patcher = patch("security_hub.settings.azure_key_vault_client.SecretClient")
        self.secret_client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        credential = patch("security_hub.settings.azure_key_vault_client.DefaultAzureCredential")
        credential.start()
        self.addCleanup(credential.stop)
        self.client = AzureKeyVaultClient("https://kv.example")
        self.sdk = self.secret_client_cls.return_value

    def test_secret_is_cached(self):
        self.sdk.get_secret.return_value.value = "s3cr3t"
        self.assertEqual(self.client.get_secret("db"), "s3cr3t")
        self.assertEqual(self.client.get_secret("db"), "s3cr3t")
        self.sdk.get_secret.assert_called_once_with("db")

    def test_missing_secret(self):
        self.sdk.get_secret.side_effect = ResourceNotFoundError("missing")
        with self.assertRaises(RuntimeError):
            self.client.get_secret("db")

    def test_empty_secret(self):
        self.sdk.get_secret.return_value.value = None
        with self.assertRaises(RuntimeError):
            self.client.get_secret("db")
