# 互斥锁模块: 暴露锁工厂与锁接口

from .lock_factory import build_lock, LOCK_STRATEGIES # 锁工厂函数 / 可选策略
from .interface_lock import BaseLock # 锁接口定义

__all__ = [
    'build_lock',
    'BaseLock',
    'LOCK_STRATEGIES',
]
