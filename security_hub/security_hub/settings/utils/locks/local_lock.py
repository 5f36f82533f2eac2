# === 进程内锁实现(单进程部署 / 开发 / 测试) ===
import threading
import weakref
from security_hub.settings.utils.logging import get_logger
from .interface_lock import BaseLock

logger = get_logger("project.lock.local")

class _KeyedMutex:
    """同一 key 共享的互斥量(弱引用登记, 无持有者时自动回收)"""
    __slots__ = ("mutex", "__weakref__")

    def __init__(self):
        self.mutex = threading.Lock()

_REGISTRY: "weakref.WeakValueDictionary[str, _KeyedMutex]" = weakref.WeakValueDictionary()
_REGISTRY_GUARD = threading.Lock()

def _mutex_for(key: str) -> _KeyedMutex:
    with _REGISTRY_GUARD:
        entry = _REGISTRY.get(key)
        if entry is None:
            entry = _KeyedMutex()
            _REGISTRY[key] = entry
        return entry

class LocalLock(BaseLock):
    """
    进程内按 key 互斥的锁
    - 仅在单进程内生效, 多实例部署必须使用 safe / fast 策略
    - acquire 阻塞等待至多 wait_timeout 秒
    """
    def __init__(self, key: str, wait_timeout: float = 5.0):
        self.key = key
        self.wait_timeout = wait_timeout
        self._entry = _mutex_for(key) # 持有引用, 保证锁存活期间登记不被回收
        self._acquired = False

    def acquire(self) -> bool:
        self._acquired = self._entry.mutex.acquire(timeout=self.wait_timeout)
        logger.debug(f"[LocalLock] acquire key={self.key}, success={self._acquired}")
        return self._acquired

    def release(self) -> None:
        if self._acquired:
            self._entry.mutex.release()
            self._acquired = False
            logger.debug(f"[LocalLock] release key={self.key}")
