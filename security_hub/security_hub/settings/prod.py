from decouple import Csv, config
from .base import *
from security_hub.settings.utils.logging import build_logging

DEBUG = False # 生产环境关闭DEBUG模式
ENVIRONMENT = "prod" # 当前运行环境类型
ALLOWED_HOSTS = config("ALLOWED_HOSTS", cast=Csv())

# === 生产环境安全加固 ===
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
CSRF_TRUSTED_ORIGINS = config("CSRF_TRUSTED_ORIGINS", default="", cast=Csv())

LOGGING_CONF = dict(LOGGING_CONF)
LOGGING_CONF.update({
    "ENABLE_CONSOLE": False,
    "ENABLE_FILE": True,
    "PREFER_JSON": True,
    "ROOT_LEVEL": "INFO",
})

LOGGING = build_logging(LOGGING_CONF)
