# === 多策略锁 工厂函数接口 ===
from .interface_lock import BaseLock
from .local_lock import LocalLock

LOCK_STRATEGIES = ("safe", "fast", "local")

def build_lock(key: str, ttl: int = 10000, strategy: str = 'safe') -> BaseLock:
    """
    构建锁工厂方法: 根据策略返回对应锁实例
    :param key: 锁定资源唯一标识
    :param ttl: 锁的过期时间(单位:毫秒); local 策略下作为最长等待时间
    :param strategy: 'safe'=RedLock分布式锁, 'fast'=Redis单节点锁, 'local'=进程内锁
    """
    if strategy == 'safe':
        from .redlock_impl import RedLockWrapper
        from .redis_config import get_redlock_instance
        return RedLockWrapper(get_redlock_instance(), key, ttl)
    if strategy == 'fast':
        from .redis_single import RedisSingleLock
        from .redis_config import get_lock_redis_client
        return RedisSingleLock(get_lock_redis_client(), key, expire=ttl // 1000)
    if strategy == 'local':
        return LocalLock(key, wait_timeout=ttl / 1000)
    raise ValueError(f"Invalid strategy {strategy!r}, must be one of {LOCK_STRATEGIES}")
