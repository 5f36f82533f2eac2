"""
业务异常: AppException

- service / view 层 `raise AppException.xxx(...)` 表达失败原因
- 结构稳定: code / message / http_status / data 四要素, 可序列化
- data 只放可公开信息(剩余尝试次数等), 不放密钥、验证码
- 由 DRF 统一异常处理器捕获 -> 五段式 json_response
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional, Mapping

# - frozen=True：异常对象不可变，防止被后续代码意外修改造成日志与响应不一致
# - slots=True：减少内存占用，提高属性访问效率
@dataclass(frozen=True, slots=True)
class AppException(Exception):
    """
    业务异常(交 DRF 全局异常处理器转为五段式响应):
    - code: 业务错误码(ErrorCodes 常量)
    - message: 用户可读提示(前端提示信息)
    - http_status: HTTP状态码
    - data: 附加信息(不含敏感字段/JSON序列化)
    """
    code: str
    message: str
    http_status: int = 400
    data: Optional[Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # str(exc) 与日志输出直接显示 message
        # slots=True 会重建类, 零参 super() 指向旧类, 这里显式调用基类
        Exception.__init__(self, self.message)

        raw = self.data
        if raw is None:
            object.__setattr__(self, "data", {})
        elif isinstance(raw, Mapping):
            object.__setattr__(self, "data", dict(raw))
        else:
            # 其他类型兜底封装, 避免 Response JSON 渲染失败
            object.__setattr__(self, "data", {"detail": raw})

    # 工厂方法: 标准化 HTTP 状态码
    @classmethod
    def bad_request(
        cls, *, code: str, message: str, data: Optional[Mapping[str, Any]] = None
    ) -> "AppException":
        return cls(code=code, message=message, http_status=400, data=data)

    @classmethod
    def forbidden(
        cls, *, code: str, message: str = "无权限访问", data: Optional[Mapping[str, Any]] = None
    ) -> "AppException":
        return cls(code=code, message=message, http_status=403, data=data)

    @classmethod
    def conflict(
        cls, *, code: str, message: str, data: Optional[Mapping[str, Any]] = None
    ) -> "AppException":
        return cls(code=code, message=message, http_status=409, data=data)

    @classmethod
    def too_many_requests(
        cls,
        *,
        code: str,
        message: str = "请求过于频繁, 请稍后再试",
        data: Optional[Mapping[str, Any]] = None,
    ) -> "AppException":
        """
        429 Too Many Requests: 验证码错误次数超限(非 DRF Throttled)
        """
        return cls(code=code, message=message, http_status=429, data=data)

    @classmethod
    def internal_error(
        cls,
        *,
        code: str = "SYSTEM.INTERNAL_ERROR",
        message: str = "系统繁忙, 请稍后再试",
        data: Optional[Mapping[str, Any]] = None,
    ) -> "AppException":
        return cls(code=code, message=message, http_status=500, data=data)

    @classmethod
    def service_unavailable(
        cls,
        *,
        code: str = "SYSTEM.STORAGE_UNAVAILABLE",
        message: str = "服务暂不可用, 请稍后再试",
        data: Optional[Mapping[str, Any]] = None,
    ) -> "AppException":
        """
        503 Service Unavailable: 存储不可用(数据库 / Redis), 事务已回滚
        """
        return cls(code=code, message=message, http_status=503, data=data)
