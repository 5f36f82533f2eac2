# === RedLock 分布式锁实现 封装 ===
from typing import Optional
from redlock import Redlock, Lock  # Redlock分布式锁库
from security_hub.settings.utils.logging import get_logger
from .interface_lock import BaseLock # 导入锁接口定义

logger = get_logger("project.lock.redlock")

class RedLockWrapper(BaseLock):
    """
    RedLock分布式锁实现:
    - 适用跨节点互斥、高一致性场景(多实例部署的 2FA 启用/解绑)
    - 封装 redlock-py, 提供统一的上下文调用接口
    """
    def __init__(self, redlock: Redlock, key: str, ttl: int = 10000):
        """
        :param redlock: Redlock 实例
        :param key: 锁的唯一标识
        :param ttl: 锁的过期时间(单位:毫秒)
        """
        self.redlock = redlock
        self.key = key
        self.ttl = ttl
        self._lock: Optional[Lock] = None

    def acquire(self) -> bool:
        self._lock = self.redlock.lock(self.key, self.ttl) or None
        acquired = self._lock is not None
        logger.debug(f"[RedLockWrapper] acquire key={self.key}, success={acquired}")
        return acquired

    def release(self) -> None:
        if not self._lock:
            return
        try:
            self.redlock.unlock(self._lock)
            logger.debug(f"[RedLockWrapper] release key={self.key}")
        except Exception as e:
            # 释放失败由 ttl 兜底
            logger.warning(f"[RedLockWrapper] release failed: {e}")
        finally:
            self._lock = None
