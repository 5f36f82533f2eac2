# === 验证码失败次数限流 ===
from typing import Optional
from django.conf import settings
from django.core.cache import cache # Django缓存(生产为 django-redis)
from users.exceptions import TooManyAttemptsError
from security_hub.settings.utils.logging import get_logger

logger = get_logger("security_hub.users.totp.limiter")

def get_fail_key(scope: str, user_id) -> str:
    """失败计数 key, 按场景(confirm / disable / verify)隔离"""
    return f"twofa:fail:{scope}:{user_id}"

class AttemptLimiter:
    """
    固定窗口失败计数
    - 首次失败写入计数并设置过期时间, 窗口内累计达到上限即锁定
    - 缓存异常时记录日志并放行, 不阻断正常验证
    """
    def __init__(self, scope: str, limit: Optional[int] = None, window: Optional[int] = None):
        conf = getattr(settings, "TWOFA", {})
        self.scope = scope
        self.limit = limit or int(conf.get("FAIL_LIMIT", 5))
        self.window = window or int(conf.get("FAIL_WINDOW", 300))

    def failures(self, user_id) -> int:
        try:
            return int(cache.get(get_fail_key(self.scope, user_id), 0))
        except Exception as e:
            logger.error(f"[TOTP限流] 获取失败次数异常: {e}")
            return 0

    def is_locked(self, user_id) -> bool:
        return self.failures(user_id) >= self.limit

    def ensure_not_locked(self, user_id) -> None:
        if self.is_locked(user_id):
            logger.warning(f"[TOTP限流] 用户ID={user_id} 验证失败次数过多, 已被限流", extra={"scope": self.scope})
            raise TooManyAttemptsError(retry_after=self.window)

    def record_failure(self, user_id) -> int:
        key = get_fail_key(self.scope, user_id)
        try:
            # add 仅在 key 不存在时写入, 保证过期时间从首次失败开始计算
            cache.add(key, 0, timeout=self.window)
            return cache.incr(key)
        except ValueError:
            # add 与 incr 之间 key 恰好过期
            cache.set(key, 1, timeout=self.window)
            return 1
        except Exception as e:
            logger.error(f"[TOTP限流] 记录失败次数异常: {e}")
            return 0

    def reset(self, user_id) -> None:
        try:
            cache.delete(get_fail_key(self.scope, user_id))
        except Exception as e:
            logger.warning(f"[TOTP限流] 清除失败计数异常: {e}")
