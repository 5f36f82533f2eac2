"""
二次验证持久化仓储

- service 层只通过仓储读写用户密钥与恢复码, 不直接修改模型实例
- 写操作在事务 + 行锁内完成, 数据库异常统一转为 PersistenceFailureError
"""
from __future__ import annotations
from typing import Callable, Iterable, List, Optional

from django.db import DatabaseError, transaction

from users.exceptions import PersistenceFailureError
from users.models import RecoveryCode, SecurityKey, User
from security_hub.settings.utils.logging import get_logger

logger = get_logger("security_hub.users.repositories")

class UserSecretRepository:
    """用户 TOTP 密钥读写"""

    def get_secret(self, user_id: int) -> Optional[str]:
        try:
            return User.objects.filter(pk=user_id).values_list("totp_secret", flat=True).first()
        except DatabaseError as e:
            logger.error(f"[TOTP仓储] 读取用户密钥失败: {e}", extra={"user_id": user_id})
            raise PersistenceFailureError() from e

    def commit_secret(self, user_id: int, secret: str) -> bool:
        """
        写入已确认的密钥
        :return: False 表示用户已存在密钥(并发绑定失败方)
        """
        try:
            with transaction.atomic():
                user = User.objects.select_for_update().only("id", "totp_secret").get(pk=user_id)
                if user.totp_secret is not None:
                    return False
                User.objects.filter(pk=user_id).update(totp_secret=secret)
                return True
        except DatabaseError as e:
            logger.error(f"[TOTP仓储] 写入用户密钥失败, 事务已回滚: {e}", extra={"user_id": user_id})
            raise PersistenceFailureError() from e

    def clear_secret_if(self, user_id: int, check: Callable[[str], bool]) -> Optional[bool]:
        """
        在行锁内读取当前密钥, check 通过后清空
        - 同一事务内删除该用户全部恢复码, 重新启用后旧恢复码不会复活
        :return: None-未启用; False-校验失败(密钥不变); True-已清空
        """
        try:
            with transaction.atomic():
                user = User.objects.select_for_update().only("id", "totp_secret").get(pk=user_id)
                if user.totp_secret is None:
                    return None
                if not check(user.totp_secret):
                    return False
                User.objects.filter(pk=user_id).update(totp_secret=None)
                RecoveryCode.objects.filter(user_id=user_id).delete()
                return True
        except DatabaseError as e:
            logger.error(f"[TOTP仓储] 清除用户密钥失败, 事务已回滚: {e}", extra={"user_id": user_id})
            raise PersistenceFailureError() from e

class RecoveryCodeRepository:
    """恢复码读写(只存哈希)"""

    def replace_all(self, user: User, code_hashes: Iterable[str]) -> int:
        """
        删除用户全部旧恢复码并写入新批次(同一事务)
        - 并发读取只会看到旧批次或新批次, 不会出现空窗口
        """
        try:
            with transaction.atomic():
                deleted, _ = RecoveryCode.objects.filter(user_id=user.pk).delete()
                RecoveryCode.objects.bulk_create([
                    RecoveryCode(user_id=user.pk, organization=user.organization, code_hash=h)
                    for h in code_hashes
                ])
        except DatabaseError as e:
            logger.error(f"[恢复码仓储] 重新生成失败, 事务已回滚: {e}", extra={"user_id": user.pk})
            raise PersistenceFailureError() from e
        return deleted

    def consume(self, user_id: int, code_hash: str) -> bool:
        """单条 DELETE, 并发核销同一恢复码时只有一方成功"""
        try:
            deleted, _ = RecoveryCode.objects.filter(user_id=user_id, code_hash=code_hash).delete()
        except DatabaseError as e:
            logger.error(f"[恢复码仓储] 核销失败: {e}", extra={"user_id": user_id})
            raise PersistenceFailureError() from e
        return deleted > 0

    def count(self, user_id: int) -> int:
        try:
            return RecoveryCode.objects.filter(user_id=user_id).count()
        except DatabaseError as e:
            logger.error(f"[恢复码仓储] 统计失败: {e}", extra={"user_id": user_id})
            raise PersistenceFailureError() from e

class SecurityKeyRepository:
    """已注册安全密钥(只读)"""

    def list_credential_ids(self, user_id: int) -> List[str]:
        return list(
            SecurityKey.objects.filter(user_id=user_id).order_by("created_at").values_list("credential_id", flat=True)
        )
