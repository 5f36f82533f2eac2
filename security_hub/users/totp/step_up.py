"""
会话二次验证(step-up)状态

- 通过验证后在 session 中记录 2fa.auth_passed / 2fa.auth_time
- 验证失败、解绑后清除
- verify_login: 登录后的二次验证, 接受 TOTP 动态码或一次性恢复码
"""
import time
from typing import Optional

from users.exceptions import InvalidCodeError, NotEnabledError
from users.repositories import UserSecretRepository
from users.recovery.recovery_service import RecoveryCodeService
from users.totp.attempt_limiter import AttemptLimiter
from users.totp.totp_utils import TOTPVerifier
from security_hub.settings.utils.logging import get_logger

logger = get_logger("security_hub.users.totp.step_up")

SESSION_AUTH_PASSED = "2fa.auth_passed"
SESSION_AUTH_TIME = "2fa.auth_time"

def mark_passed(session) -> None:
    session[SESSION_AUTH_PASSED] = True
    session[SESSION_AUTH_TIME] = int(time.time())

def clear(session) -> None:
    session.pop(SESSION_AUTH_PASSED, None)
    session.pop(SESSION_AUTH_TIME, None)

def is_passed(session) -> bool:
    return bool(session.get(SESSION_AUTH_PASSED, False))

class StepUpService:
    def __init__(
        self,
        verifier: Optional[TOTPVerifier] = None,
        users: Optional[UserSecretRepository] = None,
        recovery: Optional[RecoveryCodeService] = None,
        limiter: Optional[AttemptLimiter] = None,
    ):
        self.verifier = verifier or TOTPVerifier()
        self.users = users or UserSecretRepository()
        self.recovery = recovery or RecoveryCodeService()
        self.limiter = limiter or AttemptLimiter("verify")

    def verify_login(self, user, code: str, session) -> str:
        """
        校验登录二次验证
        :return: 通过方式 totp / recovery
        """
        self.limiter.ensure_not_locked(user.id)

        secret = self.users.get_secret(user.id)
        if secret is None:
            raise NotEnabledError()

        method = None
        if self.verifier.verify(secret, code):
            method = "totp"
        elif self.recovery.redeem(user, code):
            # 恢复码可配置为与动态码同形
            method = "recovery"

        if method is None:
            clear(session)
            self.limiter.record_failure(user.id)
            logger.warning(f"[TOTP登录校验] 用户ID={user.id} 验证码错误")
            raise InvalidCodeError()

        self.limiter.reset(user.id)
        mark_passed(session)
        logger.info(f"[TOTP登录校验] 用户ID={user.id} 二次验证通过", extra={"method": method})
        return method
