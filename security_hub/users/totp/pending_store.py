"""
TOTP 待确认密钥存储

- 按 session_key 单槽存储: 重复签发直接覆盖(以最后一次为准)
- take_and_clear 原子取出并删除, 同一密钥最多被消费一次
- redis: 多实例部署, 带 TTL 自动过期
- local: 单进程(开发 / 测试)
"""
from __future__ import annotations
import json
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from django.conf import settings
from redis import Redis
from redis.exceptions import RedisError

from users.exceptions import PersistenceFailureError
from security_hub.settings.utils.logging import get_logger
from security_hub.settings.utils.redis import get_redis_client

logger = get_logger("security_hub.users.totp.pending")

PENDING_STORES = ("redis", "local")

def get_pending_key(session_key: str) -> str:
    """待确认密钥 Redis Key"""
    return f"totp:pending:{session_key}"

@dataclass(frozen=True)
class PendingEnrollment:
    session_key: str
    user_id: int
    secret: str
    issued_at: float # unix 时间戳

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, raw: str) -> "PendingEnrollment":
        data = json.loads(raw)
        return cls(
            session_key=str(data["session_key"]),
            user_id=int(data["user_id"]),
            secret=str(data["secret"]),
            issued_at=float(data["issued_at"]),
        )

class BasePendingStore(ABC):
    ttl_seconds: int

    @abstractmethod
    def put(self, session_key: str, user_id: int, secret: str) -> PendingEnrollment:
        """写入待确认密钥(覆盖同一会话的旧密钥)"""

    @abstractmethod
    def take_and_clear(self, session_key: str) -> Optional[PendingEnrollment]:
        """原子取出并删除; 不存在返回 None"""

    @abstractmethod
    def peek(self, session_key: str) -> Optional[PendingEnrollment]:
        """只读查看(状态查询使用), 不消费"""

class RedisPendingStore(BasePendingStore):
    def __init__(self, client: Redis, ttl_seconds: int = 600):
        self.client = client
        self.ttl_seconds = ttl_seconds

    def put(self, session_key: str, user_id: int, secret: str) -> PendingEnrollment:
        entry = PendingEnrollment(session_key=session_key, user_id=user_id, secret=secret, issued_at=time.time())
        try:
            self.client.set(get_pending_key(session_key), entry.to_json(), ex=self.ttl_seconds)
        except RedisError as e:
            logger.error(f"[TOTP待确认] 写入 Redis 失败: {e}", extra={"user_id": user_id})
            raise PersistenceFailureError() from e
        return entry

    def take_and_clear(self, session_key: str) -> Optional[PendingEnrollment]:
        key = get_pending_key(session_key)
        try:
            # MULTI/EXEC: GET 与 DEL 在同一事务中执行, 并发请求只有一个能拿到值
            with self.client.pipeline(transaction=True) as pipe:
                pipe.get(key)
                pipe.delete(key)
                raw, _ = pipe.execute()
        except RedisError as e:
            logger.error(f"[TOTP待确认] 读取 Redis 失败: {e}")
            raise PersistenceFailureError() from e
        return self._decode(raw)

    def peek(self, session_key: str) -> Optional[PendingEnrollment]:
        try:
            raw = self.client.get(get_pending_key(session_key))
        except RedisError as e:
            logger.error(f"[TOTP待确认] 读取 Redis 失败: {e}")
            raise PersistenceFailureError() from e
        return self._decode(raw)

    @staticmethod
    def _decode(raw) -> Optional[PendingEnrollment]:
        if not raw:
            return None
        try:
            return PendingEnrollment.from_json(raw)
        except (ValueError, KeyError, TypeError) as e:
            # 损坏数据按不存在处理, 用户需重新发起启用
            logger.warning(f"[TOTP待确认] 缓存内容解析失败: {e}")
            return None

class LocalPendingStore(BasePendingStore):
    def __init__(self, ttl_seconds: int = 600):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[str, PendingEnrollment] = {}
        self._guard = threading.Lock()

    def _expired(self, entry: PendingEnrollment) -> bool:
        return time.time() - entry.issued_at > self.ttl_seconds

    def put(self, session_key: str, user_id: int, secret: str) -> PendingEnrollment:
        entry = PendingEnrollment(session_key=session_key, user_id=user_id, secret=secret, issued_at=time.time())
        with self._guard:
            self._entries[session_key] = entry
        return entry

    def take_and_clear(self, session_key: str) -> Optional[PendingEnrollment]:
        with self._guard:
            entry = self._entries.pop(session_key, None)
        if entry is None or self._expired(entry):
            return None
        return entry

    def peek(self, session_key: str) -> Optional[PendingEnrollment]:
        with self._guard:
            entry = self._entries.get(session_key)
        if entry is None or self._expired(entry):
            return None
        return entry

    def clear_all(self) -> None:
        with self._guard:
            self._entries.clear()

_local_store: Optional[LocalPendingStore] = None
_local_guard = threading.Lock()

def build_pending_store(backend: Optional[str] = None) -> BasePendingStore:
    """
    按 TWOFA["PENDING_STORE"] 构建待确认密钥存储
    - local 为进程级单例, 同一进程内的请求共享
    """
    global _local_store
    conf = settings.TWOFA
    backend = backend or conf.get("PENDING_STORE", "redis")
    ttl = int(conf.get("PENDING_TTL_SECONDS", 600))

    if backend == "redis":
        return RedisPendingStore(get_redis_client(db=settings.REDIS_DB_TOTP_PENDING), ttl_seconds=ttl)
    if backend == "local":
        with _local_guard:
            if _local_store is None:
                _local_store = LocalPendingStore(ttl_seconds=ttl)
            return _local_store
    raise ValueError(f"Invalid pending store {backend!r}, must be one of {PENDING_STORES}")
