# === Redis 单实例锁实现 封装 ===
import uuid # 导入UUID生成器
from redis import Redis # Redis客户端
from security_hub.settings.utils.logging import get_logger
from .interface_lock import BaseLock # 导入锁接口定义

logger = get_logger("project.lock.redis")

# 仅删除自己持有的锁(值为本实例 token)
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

class RedisSingleLock(BaseLock):
    """
    Redis 单实例锁, 适用单 Redis 节点部署的高性能互斥
    采用 SET NX EX 实现, 加锁快但无容灾能力
    """
    def __init__(self, redis: Redis, key: str, expire: int = 10):
        """
        :param redis: Redis 客户端实例
        :param key: 锁的唯一标识
        :param expire: 锁的过期时间(单位:秒)
        """
        self.redis = redis
        self.key = key
        self.expire = max(int(expire), 1)
        self._acquired = False # 锁获取状态标识
        self._token = uuid.uuid4().hex # 本实例持有者标识, 写入锁值

    def acquire(self) -> bool:
        result = self.redis.set(self.key, self._token, nx=True, ex=self.expire)
        self._acquired = bool(result)
        logger.debug(f"[RedisSingleLock] acquire key={self.key}, success={self._acquired}")
        return self._acquired

    def release(self) -> None:
        if not self._acquired:
            return
        try:
            self.redis.eval(_RELEASE_SCRIPT, 1, self.key, self._token)
            logger.debug(f"[RedisSingleLock] release key={self.key}")
        except Exception as e:
            # 释放失败由过期时间兜底
            logger.warning(f"[RedisSingleLock] release failed: {e}")
        finally:
            self._acquired = False
