from .recovery_service import RecoveryCodeService

__all__ = [
    "RecoveryCodeService", # 恢复码生成 / 核销
]
