# === TOTP 模块统一接口 ===
from .totp_service import (
    TwoFactorEnrollmentService, # 启用 / 确认绑定
    TwoFactorDeactivationService, # 解绑
)
from .totp_utils import SecretIssuer, TOTPVerifier

__all__ = [
    "TwoFactorEnrollmentService",
    "TwoFactorDeactivationService",
    "SecretIssuer",
    "TOTPVerifier",
]
