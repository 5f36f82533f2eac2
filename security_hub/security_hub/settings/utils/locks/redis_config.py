"""
Redis 锁模块客户端配置
- Redis 单节点锁与 Redlock 分布式锁共用锁专属 db(REDIS_DB_LOCK)
- 懒加载: 仅在选择 safe / fast 策略时初始化, local 策略不连接 Redis
"""
from functools import lru_cache
from django.conf import settings
from redis import Redis
from redlock import Redlock # Redlock分布式锁库
from security_hub.settings.utils.redis import get_redis_client
from security_hub.settings.utils.logging import get_logger

logger = get_logger("project.lock.redis_config")

@lru_cache(maxsize=1)
def get_lock_redis_client() -> Redis:
    """单节点锁使用的 Redis 客户端"""
    client = get_redis_client(db=settings.REDIS_DB_LOCK)
    logger.info("[Redis_lock_Config] Redis 客户端初始化成功(用于单节点锁)")
    return client

@lru_cache(maxsize=1)
def get_redlock_instance() -> Redlock:
    """
    Redlock 实例
    - 支持多节点部署, 目前仅配置单节点 Redis
    """
    try:
        instance = Redlock(
            [
                {
                    'host': settings.REDIS_HOST,
                    'port': int(settings.REDIS_PORT),
                    'db': settings.REDIS_DB_LOCK,
                    'password': settings.REDIS_PASSWORD or None,
                }
            ]
        )
    except Exception as e:
        logger.critical(f"[Redlock_Config] Redlock 实例初始化失败: {e}")
        raise
    logger.info("[Redlock_Config] Redlock 实例初始化成功")
    return instance
