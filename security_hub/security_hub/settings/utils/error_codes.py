"""
错误码常量表
- 格式: <模块>.<原因>
- 对外稳定, 前端按 code 做分支, 不依赖 message 文案
"""

class ErrorCodes:
    OK = "OK"

    # 通用
    COMMON_ERROR = "COMMON.ERROR"
    COMMON_INVALID_PARAMS = "COMMON.INVALID_PARAMS"
    COMMON_NOT_FOUND = "COMMON.NOT_FOUND"
    COMMON_METHOD_NOT_ALLOWED = "COMMON.METHOD_NOT_ALLOWED"
    COMMON_SYSTEM_BUSY = "COMMON.SYSTEM_BUSY"

    # 认证
    AUTH_UNAUTHORIZED = "AUTH.UNAUTHORIZED"
    AUTH_FORBIDDEN = "AUTH.FORBIDDEN"

    # 限流
    RATE_LIMIT_TOO_MANY_REQUESTS = "RATE_LIMIT.TOO_MANY_REQUESTS"

    # 二次验证(TOTP)
    TWOFA_ALREADY_ENABLED = "TWOFA.ALREADY_ENABLED"
    TWOFA_NO_PENDING_SECRET = "TWOFA.NO_PENDING_SECRET"
    TWOFA_INVALID_CODE = "TWOFA.INVALID_CODE"
    TWOFA_VERIFICATION_FAILED = "TWOFA.VERIFICATION_FAILED" # 解绑: 验证码错误与未启用统一返回
    TWOFA_TOO_MANY_ATTEMPTS = "TWOFA.TOO_MANY_ATTEMPTS"
    TWOFA_NOT_ENABLED = "TWOFA.NOT_ENABLED"
    TWOFA_STEP_UP_REQUIRED = "TWOFA.STEP_UP_REQUIRED"

    # 系统
    SYSTEM_INTERNAL_ERROR = "SYSTEM.INTERNAL_ERROR"
    SYSTEM_STORAGE_UNAVAILABLE = "SYSTEM.STORAGE_UNAVAILABLE"
    SYSTEM_RANDOMNESS_UNAVAILABLE = "SYSTEM.RANDOMNESS_UNAVAILABLE"
