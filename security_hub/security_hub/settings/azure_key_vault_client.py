"""
Azure Key Vault 客户端封装
- 仅在 SECRET_BACKEND=vault 时由 config.py 懒加载
- 同一进程内缓存读取结果, 避免 settings 加载阶段重复请求
"""
from security_hub.settings.utils.logging import get_logger # 导入日志模块
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient
from azure.core.exceptions import ResourceNotFoundError, HttpResponseError # 导入异常处理类

logger = get_logger("security_hub.settings.azure_key_vault_client")

class AzureKeyVaultClient:
    def __init__(self, vault_url: str):
        """
        :param vault_url: Azure Key Vault 的 URL,例如 "https://<your-key-vault-name>.vault.azure.net/"
        """
        self.client = SecretClient(vault_url=vault_url, credential=DefaultAzureCredential()) # 使用默认凭据进行身份验证
        self._cache: dict[str, str] = {} # 缓存读取Secret

    def get_secret(self, secret_name: str) -> str:
        """
        获取指定名称Secret的值(优先读取本地缓存)
        :raises RuntimeError: 未找到密钥 / 值为空 / 请求失败
        """
        if secret_name in self._cache:
            return self._cache[secret_name]

        try:
            secret = self.client.get_secret(secret_name).value
        except ResourceNotFoundError as e:
            logger.critical(f"[Azure-Key-Vault] Secret not found:{secret_name}")
            raise RuntimeError(f"[Azure-Key-Vault]未找到密钥:{secret_name}") from e
        except HttpResponseError as e: # 权限不足或请求格式错误
            logger.critical(f"[Azure-Key-Vault] 请求失败:{secret_name}, 状态码:{e.status_code}")
            raise RuntimeError(f"[Azure-Key-Vault] 获取密钥失败:{secret_name}, 状态码:{e.status_code}") from e

        if secret is None:
            logger.error(f"[Azure-Key-Vault] Secret`{secret_name}`的值为None")
            raise RuntimeError(f"[Azure-Key-Vault]获取密钥`{secret_name}`为空")

        self._cache[secret_name] = secret
        return secret
