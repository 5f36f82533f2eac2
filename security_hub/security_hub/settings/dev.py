from .base import *
from security_hub.settings.utils.logging import build_logging

DEBUG = True
ENVIRONMENT = "dev" # 当前运行环境类型
ALLOWED_HOSTS = ["*"] # 允许的主机列表，*表示允许所有主机访问

# 开发环境默认单节点锁, 无需部署多个 Redis 实例
TWOFA = {**TWOFA, "LOCK_STRATEGY": get_config("TWOFA_LOCK_STRATEGY", default="fast")}

LOGGING_CONF = dict(LOGGING_CONF)
LOGGING_CONF.update({
    "ENABLE_CONSOLE": True,
    "PREFER_JSON": False,
    "ROOT_LEVEL": "DEBUG",
})

LOGGING = build_logging(LOGGING_CONF)
