from .base import *
from security_hub.settings.utils.logging import build_logging

DEBUG = False
ENVIRONMENT = "test" # 当前运行环境类型
ALLOWED_HOSTS = ["testserver", "localhost"]

# 测试环境不依赖 Mysql / Redis
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'security-hub-test',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher'] # 加快用户创建

TWOFA = {
    **TWOFA,
    "ISSUER": "Security Hub",
    "PENDING_STORE": "local", # 进程内待确认密钥
    "LOCK_STRATEGY": "local", # 进程内锁
}

WEBAUTHN = {**WEBAUTHN, "RP_ID": "testserver", "RP_NAME": "Security Hub"}

LOGGING_CONF = dict(LOGGING_CONF)
LOGGING_CONF.update({
    "ENABLE_CONSOLE": False,
    "ENABLE_FILE": False,
    "ROOT_LEVEL": "WARNING",
})

LOGGING = build_logging(LOGGING_CONF)
