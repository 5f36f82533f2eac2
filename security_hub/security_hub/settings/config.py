import logging
import os
from functools import cached_property
from typing import Optional
from decouple import config

# 初始化日志记录器
logger = logging.getLogger("security_hub.settings.config")  # 根据模块名动态获取logger

# === 工具方法:安全读取.env配置项 ===
def get_config(key: str, default: str | None = None) -> str:
    """
    从.env文件中安全读取配置项,支持默认值
    :param key: 配置项名称
    :param default: 默认值
    :return: 配置项值(字符串)
    :raise RuntimeError:若无默认值且环境变量缺失,则终止运行
    """
    try:
        # default=None 时不传入, 缺失配置由 decouple 抛出 UndefinedValueError
        if default is None:
            return str(config(key, cast=str))
        return str(config(key, default=default, cast=str))
    except Exception as e:
        if default is not None:
            logger.warning(f"[Config]配置项{key}缺失,使用默认值{default}")
            return str(default)
        logger.error(f"[Config]缺少必要配置:{key}", exc_info=True)
        raise RuntimeError(f"[Config]缺少必要配置:{key}") from e

def get_int_config(key: str, default: int) -> int:
    """
    读取整数型配置项(非法值直接终止运行, 避免静默使用错误配置)
    """
    raw = get_config(key, default=str(default))
    try:
        return int(raw)
    except ValueError as e:
        logger.error(f"[Config]配置项{key}必须为整数, 当前值:{raw}")
        raise RuntimeError(f"[Config]配置项{key}必须为整数") from e

# === 密钥来源 ===
# env: 直接从 .env / 环境变量读取(开发、测试)
# vault: 从 .env 读取密钥名称, 再到 Azure Key Vault 读取密钥值(生产)
SECRET_BACKEND = get_config("SECRET_BACKEND", default="env").strip().lower()

class SecretSource:
    """
    密钥读取入口
    - 按 SECRET_BACKEND 选择读取方式
    - Vault 客户端懒加载, env 模式下不会初始化 Azure 凭据
    """
    def __init__(self, backend: str):
        if backend not in ("env", "vault"):
            raise RuntimeError(f"[Config]不支持的密钥来源: {backend}, 可选 env / vault")
        self.backend = backend

    @cached_property
    def vault(self):
        # 延迟导入, 避免 env 模式下加载 azure 依赖
        from .azure_key_vault_client import AzureKeyVaultClient
        vault_url = get_config("AZURE_VAULT_URL")
        try:
            return AzureKeyVaultClient(vault_url)
        except Exception as e:
            logger.critical("[Config] Azure Key Vault 客户端初始化失败", exc_info=True)
            raise RuntimeError("[Vault]客户端初始化失败") from e

    def get(self, env_key: str, default_name: str, default: Optional[str] = None) -> str:
        """
        获取密钥值
        :param env_key: env 模式下为密钥值变量名; vault 模式下为"密钥名称"变量名(追加 _NAME 后缀)
        :param default_name: vault 模式下默认密钥名称
        :param default: env 模式下的兜底值(None 表示必填)
        """
        if self.backend == "env":
            return get_config(env_key, default=default)

        secret_name = get_config(f"{env_key}_NAME", default=default_name) # 从.env中获取密钥名称
        try:
            return self.vault.get_secret(secret_name) # 从 Azure Key Vault 中获取密钥值
        except Exception as e:
            logger.error(f"[Vault]获取密钥失败:{secret_name}", exc_info=True)
            raise RuntimeError(f"[Vault]获取密钥失败:{secret_name}") from e

_source = SecretSource(SECRET_BACKEND)

# 仅开发 / 测试环境允许使用内置 SECRET_KEY, 其他环境缺失即终止启动
_INSECURE_SECRET_KEY = "django-insecure-dev-only"

def allows_insecure_secret_key(settings_module: str) -> bool:
    return settings_module.rsplit(".", 1)[-1] in ("dev", "test")

def django_secret_key_default(settings_module: Optional[str] = None) -> Optional[str]:
    if settings_module is None:
        settings_module = os.getenv("DJANGO_SETTINGS_MODULE", "")
    return _INSECURE_SECRET_KEY if allows_insecure_secret_key(settings_module) else None

# === 密钥配置项(封装为类) ===
class SecretConfig:
    """集中管理所有密钥项"""
    DJANGO_SECRET_KEY: str = _source.get("DJANGO_SECRET_KEY", "Django-SECRET-KEY", default=django_secret_key_default())
    REDIS_PASSWORD: str = _source.get("REDIS_PASSWORD", "security-hub-redis-pd", default="")
    DB_PASSWORD: str = _source.get("DB_PASSWORD", "security-hub-mysql-root", default="")
