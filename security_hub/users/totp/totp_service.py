# === TOTP 启用 / 解绑服务 ===
"""
启用流程(每个会话): 无待确认 -> 待确认 -> {已启用 | 已拒绝}
- enable: 签发新密钥写入待确认存储(同一会话重复签发以最后一次为准)
- confirm: 原子取出待确认密钥(无论成败只消费一次), 校验通过后写库, 写库成功后才标记会话已通过二次验证
- disable: 行锁内校验已绑定密钥, 通过后清空并清除会话二次验证状态

协作对象均通过构造参数注入, 缺省值按 settings.TWOFA 构建
"""
from typing import Callable, Optional

from django.conf import settings

from users.exceptions import (
    AlreadyEnabledError,
    InvalidCodeError,
    NoPendingSecretError,
    NotEnabledError,
    OperationInProgressError,
)
from users.repositories import UserSecretRepository
from users.totp import step_up
from users.totp.attempt_limiter import AttemptLimiter
from users.totp.pending_store import BasePendingStore, build_pending_store
from users.totp.totp_utils import EnrollmentPayload, SecretIssuer, TOTPVerifier
from security_hub.settings.utils.locks import BaseLock, build_lock
from security_hub.settings.utils.logging import get_logger

logger = get_logger("security_hub.users.totp")

LockFactory = Callable[[str], BaseLock]

# 锁 Key 工具函数
def get_enable_lock_key(session_key: str) -> str:
    """同一会话的启用请求串行化"""
    return f"lock:totp:enable:{session_key}"

def get_user_lock_key(user_id) -> str:
    """同一用户的绑定/解绑写操作串行化"""
    return f"lock:totp:user:{user_id}"

def default_lock_factory(key: str) -> BaseLock:
    conf = settings.TWOFA
    return build_lock(key, ttl=int(conf.get("LOCK_TTL_MS", 5000)), strategy=conf.get("LOCK_STRATEGY", "safe"))

class _LockedSection:
    def __init__(self, lock_factory: LockFactory):
        self.lock_factory = lock_factory

    def run(self, key: str, fn):
        with self.lock_factory(key).lock() as acquired:
            if not acquired:
                logger.warning(f"[TOTP] 获取锁失败: {key}")
                raise OperationInProgressError()
            return fn()

class TwoFactorEnrollmentService(_LockedSection):
    def __init__(
        self,
        issuer: Optional[SecretIssuer] = None,
        verifier: Optional[TOTPVerifier] = None,
        pending: Optional[BasePendingStore] = None,
        users: Optional[UserSecretRepository] = None,
        limiter: Optional[AttemptLimiter] = None,
        lock_factory: Optional[LockFactory] = None,
    ):
        super().__init__(lock_factory or default_lock_factory)
        self.issuer = issuer or SecretIssuer()
        self.verifier = verifier or TOTPVerifier()
        self.pending = pending or build_pending_store()
        self.users = users or UserSecretRepository()
        self.limiter = limiter or AttemptLimiter("confirm")

    def enable(self, user, session_key: str, issuer_label: str) -> EnrollmentPayload:
        """
        发起启用: 已启用直接拒绝(不触碰待确认存储)
        """
        if self.users.get_secret(user.id) is not None:
            logger.info(f"[TOTP启用] 用户ID={user.id} 已启用TOTP, 无需重复绑定")
            raise AlreadyEnabledError()

        def _issue() -> EnrollmentPayload:
            secret = self.issuer.issue()
            self.pending.put(session_key, user.id, secret)
            return self.issuer.build_enrollment_payload(secret, user.email, issuer_label)

        payload = self.run(get_enable_lock_key(session_key), _issue)
        logger.info(f"[TOTP启用] 用户ID={user.id} 成功生成TOTP绑定二维码")
        return payload

    def confirm(self, user, session_key: str, submitted_code: str, session) -> bool:
        # 先取出再判断限流: 待确认密钥每次确认请求都只消费一次
        entry = self.pending.take_and_clear(session_key)
        self.limiter.ensure_not_locked(user.id)

        if entry is None or entry.user_id != user.id:
            logger.warning(f"[TOTP验证] 用户ID={user.id} 无待确认密钥, 流程中断")
            raise NoPendingSecretError()

        if self.users.get_secret(user.id) is not None:
            raise AlreadyEnabledError()

        if not self.verifier.verify(entry.secret, submitted_code):
            step_up.clear(session)
            self.limiter.record_failure(user.id)
            logger.warning(f"[TOTP验证] 用户ID={user.id} 动态验证码错误, 待确认密钥已作废")
            raise InvalidCodeError()

        committed = self.run(get_user_lock_key(user.id), lambda: self.users.commit_secret(user.id, entry.secret))
        if not committed:
            logger.warning(f"[TOTP验证] 用户ID={user.id} 并发绑定, 已被其他请求启用")
            raise AlreadyEnabledError()

        # 密钥已落库后再标记会话通过二次验证
        user.totp_secret = entry.secret
        self.limiter.reset(user.id)
        step_up.mark_passed(session)
        logger.info(f"[TOTP验证] 用户ID={user.id} 成功启用TOTP二次验证")
        return True

class TwoFactorDeactivationService(_LockedSection):
    def __init__(
        self,
        verifier: Optional[TOTPVerifier] = None,
        users: Optional[UserSecretRepository] = None,
        limiter: Optional[AttemptLimiter] = None,
        lock_factory: Optional[LockFactory] = None,
    ):
        super().__init__(lock_factory or default_lock_factory)
        self.verifier = verifier or TOTPVerifier()
        self.users = users or UserSecretRepository()
        self.limiter = limiter or AttemptLimiter("disable")

    def disable(self, user, submitted_code: str, session) -> bool:
        self.limiter.ensure_not_locked(user.id)

        cleared = self.run(
            get_user_lock_key(user.id),
            lambda: self.users.clear_secret_if(user.id, lambda secret: self.verifier.verify(secret, submitted_code)),
        )
        if cleared is None:
            # 未启用同样计入失败次数, 与验证码错误对外不可区分
            self.limiter.record_failure(user.id)
            logger.warning(f"[TOTP解绑] 用户ID={user.id} 尚未启用TOTP, 无法解绑")
            raise NotEnabledError()
        if not cleared:
            self.limiter.record_failure(user.id)
            logger.warning(f"[TOTP解绑] 用户ID={user.id} 验证码错误")
            raise InvalidCodeError()

        user.totp_secret = None
        self.limiter.reset(user.id)
        step_up.clear(session)
        logger.info(f"[TOTP解绑] 用户ID={user.id} 成功解绑TOTP")
        return True
