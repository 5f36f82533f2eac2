# 日志模块封装
# 封装为 build_logging() 方法供 settings 调用
import os, logging
from typing import Any, Dict, Optional
from pathlib import Path
from .formatters import ExtraJSONFormatter, ExtraKVFormatter # settings 加载期间直接传类对象, 不走点分路径导入

# 项目根路径: security_hub/ (manage.py 所在目录), 日志目录位于其下
BASE_DIR = Path(__file__).resolve().parents[4]
LOG_DIR = BASE_DIR / "logs"

# === 环境判定与格式器策略 ===
DJANGO_SETTINGS_MODULE = os.getenv('DJANGO_SETTINGS_MODULE', 'security_hub.settings.dev') # 获取当前环境变量
IS_DEV = "dev" in DJANGO_SETTINGS_MODULE.lower() # 判断是否为开发环境
IS_TEST = DJANGO_SETTINGS_MODULE.lower().endswith(".test") # 测试环境不落盘

# 默认日志策略(各环境 settings 可通过 build_logging(conf) 覆盖)
DEFAULT_LOGGING_CONF: Dict[str, Any] = {
    "ENABLE_CONSOLE": IS_DEV, # 开发环境下启用控制台日志
    "ENABLE_FILE": not IS_TEST, # 文件日志(测试环境关闭)
    "PREFER_JSON": not IS_DEV, # 开发环境使用文本格式器, 生产环境使用 JSON 格式器
    "ROOT_LEVEL": "INFO", # fallback 根 logger 级别
}

def _file_handler(filename: str, level: str, formatter: str) -> Dict[str, Any]:
    """单个轮转文件处理器配置(多进程安全写入)"""
    return {
        'class': 'concurrent_log_handler.ConcurrentRotatingFileHandler', # 支持自动轮转的文件日志处理器
        'filename': os.path.join(LOG_DIR, filename), # 输出文件路径
        'maxBytes': 5 * 1024 * 1024, # 单个日志文件最大为5MB
        'backupCount': 3, # 最多保留3个轮转文件
        'formatter': formatter,
        'level': level,
        'encoding': 'utf-8',
    }

def build_logging(conf: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    返回符合 Django Logging 配置规范的字典结构
    (日志处理器-handlers、日志格式化器-formatters、日志生成器-loggers)
    - 控制台输出(仅开发环境)
    - 文件输出(debug/info/warning/error/critical/django/redis/lock)
    - 日志分级(从低到高): DEBUG / INFO / WARNING / ERROR / CRITICAL
    :param conf: 覆盖 DEFAULT_LOGGING_CONF 的配置项
    """
    options = dict(DEFAULT_LOGGING_CONF)
    options.update(conf or {})

    enable_console = bool(options["ENABLE_CONSOLE"])
    enable_file = bool(options["ENABLE_FILE"])
    formatter_style = 'json' if options["PREFER_JSON"] else 'verbose'

    # === 日志处理器 ===
    handlers: Dict[str, Dict[str, Any]] = {}
    if enable_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True) # 创建日志目录(如果不存在)
        handlers.update({
            'file_debug': _file_handler('debug.log', 'DEBUG', formatter_style), # 调试细节
            'file_info': _file_handler('info.log', 'INFO', formatter_style), # 正常流程(启用/解绑2FA等)
            'file_warning': _file_handler('warning.log', 'WARNING', formatter_style), # 可恢复问题(验证码错误、限流)
            'file_error': _file_handler('errors.log', 'ERROR', formatter_style), # 错误异常(数据库/Redis失败)
            'file_critical': _file_handler('critical.log', 'CRITICAL', formatter_style), # 致命错误(密钥加载失败等)
            'file_db_mysql': _file_handler('db_mysql.log', 'INFO', formatter_style),
            'file_db_redis': _file_handler('db_redis.log', 'INFO', formatter_style),
            'file_lock': _file_handler('lock.log', 'INFO', formatter_style), # Redlock / Redis单节点锁 / 本地锁
            'file_django': _file_handler('django.log', 'INFO', formatter_style),
        })

    # 控制台输出处理器(仅开发环境启用)
    if enable_console:
        handlers['console'] = {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
            'level': 'DEBUG',
        }

    def pick(*names: str) -> list:
        # 只挂载已启用的处理器, 控制台处理器按需追加
        picked = [n for n in names if n in handlers]
        if enable_console:
            picked.append('console')
        return picked

    return {
        'version': 1,
        'disable_existing_loggers': False,

        # === 日志格式化器 ===
        'formatters': {
            'verbose': { # 详细格式: 时间、级别、模块名、日志内容 + extra(key=value)
                '()': ExtraKVFormatter,
                'format': '[{asctime}] [{levelname}] [{name}] {message}',
                'style': '{',
            },
            'simple': { # 简单格式: 主要用于控制台输出
                'format': '{levelname}: {message}',
                'style': '{',
            },
            'json': { # JSON格式: 适用于生产环境, extra 字段并入 JSON
                '()': ExtraJSONFormatter,
                'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
            },
        },
        'handlers': handlers,

        # 各模块日志记录器配置
        'loggers': {
            'django': {
                'handlers': pick('file_django'),
                'level': 'INFO',
                'propagate': True,
            },
            'security_hub': { # 主业务日志
                'handlers': pick('file_debug', 'file_info', 'file_warning', 'file_error', 'file_critical'),
                'level': 'DEBUG',
                'propagate': False,
            },
            'security_hub.users': { # 用户模块日志(2FA启用/解绑、恢复码、U2F)
                'handlers': pick('file_debug', 'file_info', 'file_warning', 'file_error', 'file_critical'),
                'level': 'DEBUG',
                'propagate': False,
            },
            'security_hub.settings.azure_key_vault_client': {
                'handlers': pick('file_info', 'file_error', 'file_critical'),
                'level': 'WARNING',
                'propagate': False,
            },
            'project.api': { # DRF 统一异常处理日志
                'handlers': pick('file_warning', 'file_error'),
                'level': 'INFO',
                'propagate': False,
            },
            'project.redis': {
                'handlers': pick('file_db_redis'),
                'level': 'INFO',
                'propagate': False,
            },
            'project.mysql': {
                'handlers': pick('file_db_mysql'),
                'level': 'INFO',
                'propagate': False,
            },
            'project.lock': { # 锁模块(含 project.lock.redlock / project.lock.redis / project.lock.local)
                'handlers': pick('file_lock'),
                'level': 'INFO',
                'propagate': False,
            },
            '': { # fallback 根 logger(通用日志)
                'handlers': pick('file_info', 'file_warning'),
                'level': options["ROOT_LEVEL"],
                'propagate': False,
            },
        },
    }

# === 通用日志获取函数 ===
def get_logger(name: str) -> logging.Logger:
    """
    获取指定名称的日志记录器(loggers)
    示例: logger = get_logger("security_hub.users.totp")
    """
    return logging.getLogger(name)
