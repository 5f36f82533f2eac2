# base.py
"""
项目核心配置文件
- 数据库连接(Mysql)
- 缓存服务(Redis / django-redis)
- 安全设置与中间件
- 二次验证(TOTP / 恢复码 / U2F) 业务参数
- 日志配置统一
"""
import string
from pathlib import Path
from .config import get_config, get_int_config, SecretConfig # 从config.py导入配置项
from security_hub.settings.utils.mysql_config import get_mysql_config # 导入Mysql数据库配置
from . import LOGGING, LOGGING_CONF # 导入日志配置

# 基础目录(manage.py 所在目录)
BASE_DIR = Path(__file__).resolve().parents[2]

# 安全配置
SECRET_KEY = SecretConfig.DJANGO_SECRET_KEY # Django密钥
DEBUG = False
ALLOWED_HOSTS: list = []

# --- 应用注册 ---
INSTALLED_APPS = [
    'corsheaders', # 跨域支持组件
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework', # DRF
    'users', # 用户与二次验证模块
]

# --- 中间件配置 ---
MIDDLEWARE = [
    'security_hub.middlewares.request_id.RequestIdMiddleware', # request_id 链路追踪(最先执行)
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware', # 跨域配置中间件-cors处理
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

# === URL 与 WSGI ===
ROOT_URLCONF = 'security_hub.urls'
WSGI_APPLICATION = 'security_hub.wsgi.application'

# === 模板配置 ===
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'django.template.context_processors.csrf',
            ],
        },
    },
]

# === 跨域配置 ===
CORS_ALLOWED_ORIGINS = [o for o in get_config("CORS_ALLOWED_ORIGINS", default="").split(",") if o]
CORS_ALLOW_CREDENTIALS = True # 允许携带 session cookie

# === 自定义用户模型 ===
AUTH_USER_MODEL = 'users.User'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# === Mysql数据库配置 ===
DATABASES = {
    'default': get_mysql_config('default'),
}

# === Redis缓存配置 ===
REDIS_HOST = get_config('REDIS_HOST', default='127.0.0.1') # Redis主机地址
REDIS_PORT = get_config('REDIS_PORT', default='6379') # Redis主机端口号
REDIS_PASSWORD = SecretConfig.REDIS_PASSWORD # Redis连接密码

# Redis 分库约定
REDIS_DB_LOCK = 0 # 锁模块(Redlock / 单节点锁)
REDIS_DB_CACHE = 4 # Django CACHE(验证码失败计数)
REDIS_DB_TOTP_PENDING = 5 # TOTP 待确认密钥

# Redis URL 基础前缀
REDIS_BASE_URL = (
    f"redis://:{REDIS_PASSWORD}@{REDIS_HOST}:{REDIS_PORT}"
    if REDIS_PASSWORD else
    f"redis://{REDIS_HOST}:{REDIS_PORT}"
)

CACHES = { # Django缓存配置
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache', # 使用django-redis作为缓存后端
        'LOCATION': f"{REDIS_BASE_URL}/{REDIS_DB_CACHE}",
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'CONNECTION_POOL_KWARGS': {
                'max_connections': 50, # 最大连接数
                'timeout': 5, # 连接超时时间
            }
        }
    }
}

# === Session ===
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = 60 * 60 * 12 # 12小时

# === DRF 配置 ===
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication', # 基于 Django session 登录态
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'EXCEPTION_HANDLER': 'security_hub.settings.utils.drf_exception_handler.custom_exception_handler',
}

# === 二次验证(TOTP) ===
TWOFA = {
    "ISSUER": get_config("TWOFA_ISSUER", default=""), # 认证器 App 中显示的签发方(留空时使用请求 Host)
    "SECRET_LENGTH": 32, # base32 密钥长度
    "VALID_WINDOW": 1, # 允许前后各 1 个时间步长的时钟偏差
    "QR_BOX_SIZE": 10, # 二维码模块像素
    "PENDING_STORE": get_config("TWOFA_PENDING_STORE", default="redis"), # redis / local
    "PENDING_TTL_SECONDS": get_int_config("TWOFA_PENDING_TTL_SECONDS", 600), # 待确认密钥有效期
    "LOCK_STRATEGY": get_config("TWOFA_LOCK_STRATEGY", default="safe"), # safe / fast / local
    "LOCK_TTL_MS": 5000, # 启用/解绑临界区锁过期时间(毫秒)
    "FAIL_LIMIT": 5, # 窗口内最多允许失败次数
    "FAIL_WINDOW": 300, # 失败记录保留时间(秒)
}

# === 恢复码 ===
RECOVERY_CODES = {
    "COUNT": get_int_config("RECOVERY_CODES_COUNT", 8), # 每批数量
    "BLOCKS": get_int_config("RECOVERY_CODES_BLOCKS", 2), # 每个恢复码的分段数
    "BLOCK_LENGTH": get_int_config("RECOVERY_CODES_BLOCK_LENGTH", 10), # 每段字符数
    "ALPHABET": string.ascii_uppercase + string.digits, # 字符集 A-Z0-9
    "SEPARATOR": "-", # 分段分隔符
}

# === U2F / WebAuthn ===
WEBAUTHN = {
    "RP_ID": get_config("WEBAUTHN_RP_ID", default="localhost"),
    "RP_NAME": get_config("WEBAUTHN_RP_NAME", default="Security Hub"),
    "TIMEOUT_MS": 60000,
}

# === 密码强度验证器配置 ===
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {'min_length': 8},
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
]

# === 静态资源路径 ===
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'static'

# === 本地化与国际化配置 ===
LANGUAGE_CODE = 'zh-hans'
TIME_ZONE = 'Asia/Shanghai'
USE_I18N = True
USE_TZ = True
