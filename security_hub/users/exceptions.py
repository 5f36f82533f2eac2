# 二次验证领域异常
from __future__ import annotations # 延迟类型注解解析
from security_hub.settings.utils.error_codes import ErrorCodes
from security_hub.settings.utils.exceptions import AppException

class TwoFactorError(Exception):
    """二次验证业务异常基类(service 层抛出, view 层转为 AppException)"""
    code: str = ErrorCodes.COMMON_ERROR # 默认错误码

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message or self.__class__.__doc__ or "")
        if code:
            self.code = code

class AlreadyEnabledError(TwoFactorError):
    """已启用二次验证, 需先解绑"""
    code = ErrorCodes.TWOFA_ALREADY_ENABLED

class NoPendingSecretError(TwoFactorError):
    """没有待确认的密钥(未发起启用或已过期/已消费)"""
    code = ErrorCodes.TWOFA_NO_PENDING_SECRET

class InvalidCodeError(TwoFactorError):
    """验证码错误"""
    code = ErrorCodes.TWOFA_INVALID_CODE

class NotEnabledError(TwoFactorError):
    """未启用二次验证"""
    code = ErrorCodes.TWOFA_NOT_ENABLED

class PersistenceFailureError(TwoFactorError):
    """存储不可用, 事务已回滚"""
    code = ErrorCodes.SYSTEM_STORAGE_UNAVAILABLE

class RandomnessUnavailableError(TwoFactorError):
    """系统安全随机源不可用"""
    code = ErrorCodes.SYSTEM_RANDOMNESS_UNAVAILABLE

class TooManyAttemptsError(TwoFactorError):
    """验证失败次数过多"""
    code = ErrorCodes.TWOFA_TOO_MANY_ATTEMPTS

    def __init__(self, message: str = "", *, retry_after: int | None = None):
        super().__init__(message)
        self.retry_after = retry_after

class OperationInProgressError(TwoFactorError):
    """同一会话/用户的二次验证操作正在处理中"""
    code = ErrorCodes.COMMON_SYSTEM_BUSY

class StepUpRequiredError(TwoFactorError):
    """当前会话尚未通过二次验证"""
    code = ErrorCodes.TWOFA_STEP_UP_REQUIRED


def to_app_exception(exc: TwoFactorError, *, uniform_failure: bool = False) -> AppException:
    """
    领域异常 -> AppException(交 DRF 统一异常处理器输出五段式响应)
    :param uniform_failure: 解绑场景下"验证码错误"与"未启用"统一返回, 不暴露具体原因
    """
    if uniform_failure and isinstance(exc, (InvalidCodeError, NotEnabledError)):
        return AppException.bad_request(code=ErrorCodes.TWOFA_VERIFICATION_FAILED, message="验证失败, 请检查验证码")

    if isinstance(exc, AlreadyEnabledError):
        return AppException.conflict(code=exc.code, message="您已启用二次验证, 无需重复操作")
    if isinstance(exc, NoPendingSecretError):
        return AppException.bad_request(code=exc.code, message="绑定已失效, 请重新获取二维码")
    if isinstance(exc, InvalidCodeError):
        return AppException.bad_request(code=exc.code, message="验证码错误或已过期")
    if isinstance(exc, NotEnabledError):
        return AppException.bad_request(code=exc.code, message="当前用户未启用二次验证")
    if isinstance(exc, TooManyAttemptsError):
        return AppException.too_many_requests(
            code=exc.code, message="验证失败次数过多, 请稍后重试", data={"retry_after": exc.retry_after},
        )
    if isinstance(exc, OperationInProgressError):
        return AppException.conflict(code=exc.code, message="操作处理中, 请稍后再试")
    if isinstance(exc, StepUpRequiredError):
        return AppException.forbidden(code=exc.code, message="请先完成二次验证")
    if isinstance(exc, PersistenceFailureError):
        return AppException.service_unavailable(code=exc.code)
    if isinstance(exc, RandomnessUnavailableError):
        return AppException.internal_error(code=exc.code)
    return AppException.internal_error()
