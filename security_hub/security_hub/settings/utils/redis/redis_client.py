"""
Redis 客户端连接池模块封装
- 支持多数据库分离(锁 / 待确认密钥 等按 db 隔离)
- 连接池按 db 懒加载并复用, 避免重复创建
- 首次使用时才建立连接(导入本模块不会连接 Redis)
"""
import threading
from redis import Redis, ConnectionPool # 导入Redis和连接池类
from django.conf import settings
from security_hub.settings.utils.logging import get_logger # 导入日志记录器

logger = get_logger("project.redis")

# === Redis连接池缓存 ===
# 不同db使用不同连接池,按需初始化
_REDIS_POOLS: dict[int, ConnectionPool] = {}
_POOL_GUARD = threading.Lock() # 防止并发请求重复创建同一 db 的连接池

def get_redis_pool(db: int = 0) -> ConnectionPool:
    """
    获取指定 Redis 数据库连接池实例(支持连接池复用)
    :param db: Redis数据库编号(0-15/默认0)
    :return: Redis ConnectionPool 实例
    """
    with _POOL_GUARD:
        if db not in _REDIS_POOLS:
            try:
                _REDIS_POOLS[db] = ConnectionPool(
                    host=settings.REDIS_HOST,
                    port=int(settings.REDIS_PORT),
                    password=settings.REDIS_PASSWORD or None,
                    db=db,
                    decode_responses=True, # 自动解码字符串
                    max_connections=50,
                    socket_connect_timeout=5,
                )
                logger.info(f"[redis_client] Redis连接池初始化成功(db={db})")
            except Exception as e:
                logger.critical(f"[redis_client] Redis连接池初始化失败(db={db}): {e}")
                raise
        return _REDIS_POOLS[db]

def get_redis_client(db: int = 0) -> Redis:
    """
    获取 Redis 客户端实例(使用对应连接池)
    - 不在此处 ping, 连接失败由调用方在实际读写时感知并处理
    :param db: Redis数据库编号(0-15/默认0)
    """
    return Redis(connection_pool=get_redis_pool(db))
