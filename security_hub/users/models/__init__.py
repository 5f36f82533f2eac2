from .user_models import User
from .twofa_models import RecoveryCode, SecurityKey

__all__ = [
    "User", # 自定义用户模型
    "RecoveryCode", # 恢复码(仅存哈希)
    "SecurityKey", # 已注册的 U2F/WebAuthn 安全密钥
]
