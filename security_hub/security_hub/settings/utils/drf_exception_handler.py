"""
DRF 统一异常处理器

- 所有失败响应统一为五段式: success / code / message / data / request_id
- view 层将领域异常转为 AppException 抛出, 由此处收口
- DRF 内置异常(ValidationError/NotAuthenticated/...)映射为 ErrorCodes
- 未捕获异常: 记录堆栈 + request_id, 对外统一 500(不泄露内部细节)
"""
from __future__ import annotations
from typing import Any, Dict, Optional
from django.http import Http404 # Django 原生404异常(非 DRF NotFound)
from rest_framework import status
from rest_framework.views import exception_handler # DRF 默认异常处理器
from rest_framework.exceptions import (
    ValidationError,
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    Throttled,
    MethodNotAllowed,
    NotFound,
)
from rest_framework.response import Response
from security_hub.settings.utils.exceptions import AppException # 业务异常
from security_hub.settings.utils.error_codes import ErrorCodes # 错误码常量表
from security_hub.settings.utils.response_wrapper import json_response # 统一五段式响应封装
from security_hub.settings.utils.logging import get_logger

logger = get_logger("project.api") # 统一异常日志归口

def _get_request_id(context: Dict[str, Any]) -> Optional[str]:
    """
    从 DRF 的 context 中提取 request_id(由 RequestIdMiddleware 注入)
    """
    request = context.get("request")
    return getattr(request, "request_id", None)

def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """
    DRF 统一异常处理器

    1) AppException 优先处理(携带业务错误码)
    2) Django 原生 Http404 提前处理, 避免被误归类为 500
    3) DRF 默认异常映射为统一错误码
    4) DRF 无法处理的异常: logger.exception + 统一 500
    """
    request = context.get("request")
    request_id = _get_request_id(context)

    if isinstance(exc, AppException):
        if exc.http_status >= 500:
            logger.error(
                "[ExceptionHandler] 业务层返回服务端错误",
                extra={"request_id": request_id, "error_code": exc.code},
            )
        return json_response(
            success=False,
            code=exc.code,
            message=exc.message,
            data=exc.data or {},
            http_status=exc.http_status,
            request=request,
            request_id=request_id,
        )

    if isinstance(exc, Http404):
        return json_response(
            success=False,
            code=ErrorCodes.COMMON_NOT_FOUND,
            message="资源不存在",
            http_status=status.HTTP_404_NOT_FOUND,
            request=request,
            request_id=request_id,
        )

    response = exception_handler(exc, context)

    # DRF 无法处理的异常(代码bug / 运行错误)
    if response is None:
        logger.exception(
            "Unhandled exception",
            extra={
                "request_id": request_id,
                "exc_type": exc.__class__.__name__,
            },
        )
        return json_response(
            success=False,
            code=ErrorCodes.SYSTEM_INTERNAL_ERROR,
            message="系统繁忙, 请稍后再试",
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request=request,
            request_id=request_id,
        )

    code = ErrorCodes.COMMON_ERROR
    message = "请求失败"
    data: Dict[str, Any] = {}

    if isinstance(exc, ValidationError):
        code = ErrorCodes.COMMON_INVALID_PARAMS
        message = "参数不合法"
        # response.data 可能是 list/str, 统一包成 dict
        if isinstance(response.data, dict):
            data = {"fields": response.data}
        else:
            data = {"fields": {"non_field_errors": response.data}}

    elif isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        code = ErrorCodes.AUTH_UNAUTHORIZED
        message = "未登录或登录已失效"

    elif isinstance(exc, PermissionDenied):
        code = ErrorCodes.AUTH_FORBIDDEN
        message = "无权限访问"

    elif isinstance(exc, Throttled):
        code = ErrorCodes.RATE_LIMIT_TOO_MANY_REQUESTS
        message = "请求过于频繁, 请稍后再试"
        data = {"wait": getattr(exc, "wait", None)}

    elif isinstance(exc, NotFound):
        code = ErrorCodes.COMMON_NOT_FOUND
        message = "资源不存在"

    elif isinstance(exc, MethodNotAllowed):
        code = ErrorCodes.COMMON_METHOD_NOT_ALLOWED
        message = "不支持的请求方法"

    return json_response(
        success=False,
        code=code,
        message=message,
        data=data,
        http_status=response.status_code,
        request=request,
        request_id=request_id,
    )
