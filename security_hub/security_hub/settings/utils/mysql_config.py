"""
Mysql 数据库连接配置封装模块
- 使用 mysqlclient 驱动
- 支持多数据库配置(通过 alias 参数动态选择)
- 密码统一通过 SecretConfig 加载(env / Azure Key Vault)
"""
from security_hub.settings.config import get_config, get_int_config
from security_hub.settings.config import SecretConfig
from security_hub.settings.utils.logging import get_logger

logger = get_logger("project.mysql")

# alias -> .env 配置项前缀
_PREFIX_MAP = {
    'default': 'DB', # 当前默认配置1个mysql数据库主库实例
}

def get_mysql_config(alias: str = 'default') -> dict:
    """
    返回指定 alias (数据库别名) 对应的 Mysql 配置字典
    :param alias: 数据库别名, 例如 'default'
    :return: Django ORM 可识别的数据库配置字典 dict
    """
    if alias not in _PREFIX_MAP:
        logger.error(f"[Mysql配置]不支持的数据库别名:{alias}")
        raise ValueError(f"[Mysql配置]不支持的数据库别名:{alias}")

    prefix = _PREFIX_MAP[alias]
    config_dict = {
        'ENGINE': 'django.db.backends.mysql',
        'NAME': get_config(f"{prefix}_NAME", default="security_hub"),
        'USER': get_config(f"{prefix}_USER", default="root"),
        'PASSWORD': getattr(SecretConfig, f"{prefix}_PASSWORD"),
        'HOST': get_config(f"{prefix}_HOST", default="127.0.0.1"),
        'PORT': get_config(f"{prefix}_PORT", default="3306"),
        'CONN_MAX_AGE': get_int_config(f"{prefix}_CONN_MAX_AGE", 60), # 持久连接复用时间(秒)
        'ATOMIC_REQUESTS': False, # 事务边界由 service 层显式控制
        'OPTIONS': {
            # 严格模式 + 禁止零日期 + 禁止无引擎; READ COMMITTED 保证恢复码重建前后集合的可见性
            'init_command': "SET sql_mode='STRICT_TRANS_TABLES,NO_ZERO_DATE,NO_ENGINE_SUBSTITUTION'",
            'isolation_level': 'read committed',
            'charset': 'utf8mb4',
            'connect_timeout': 10,
            'read_timeout': 20,
            'write_timeout': 20,
        },
    }

    logger.info(f"[MySQL配置] 成功加载数据库连接配置: alias={alias}, host={config_dict['HOST']}, db={config_dict['NAME']}")
    return config_dict
