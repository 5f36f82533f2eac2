# === interface_lock.py 锁接口定义 ===
from abc import ABC, abstractmethod # 锁接口基类
from contextlib import contextmanager
from typing import Iterator
from security_hub.settings.utils.logging import get_logger # 日志记录器

logger = get_logger("project.lock")

class BaseLock(ABC):
    """
    互斥锁通用接口定义
    所有锁实现类(RedLock分布式锁 / Redis单机锁 / 进程内锁)继承该类, 实现 acquire/release
    - key: 锁定资源唯一标识(如 lock:totp:user:{user_id})
    """
    key: str

    def __enter__(self):
        if not self.acquire():
            logger.error(f"[BaseLock]: 获取锁失败: {self.key}")
            raise RuntimeError(f"[BaseLock]: 获取锁失败: {self.key}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    @abstractmethod
    def acquire(self) -> bool:
        """
        尝试获取锁
        返回 True 表示获取成功, False 表示获取失败
        """

    @abstractmethod
    def release(self) -> None:
        """
        释放当前锁(未持有时为空操作)
        """

    @contextmanager
    def lock(self) -> Iterator[bool]:
        """
        上下文管理器封装加锁和释放流程(获取失败不抛异常, 交由调用方判断):
        with lock.lock() as acquired:
            if not acquired:
                raise ...
        """
        acquired = self.acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()
