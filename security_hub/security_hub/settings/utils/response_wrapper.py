from typing import Any, Mapping, Optional
from rest_framework.response import Response

def json_response(
    *,
    success: bool,
    code: str,
    message: str,
    data: Optional[Mapping[str, Any]] = None,
    http_status: int = 200,
    request: Any = None,
    request_id: Optional[str] = None,
) -> Response:
    """
    标准统一五段式响应封装: success / code / message / data / request_id
    - :param success: 业务是否成功(前端仅依赖该布尔值判断结果)
    - :param code: 业务状态码(ErrorCodes 常量)
    - :param message: 返回的提示信息(前端展示)
    - :param data: 返回主体数据内容(默认空对象)
    - :param http_status: HTTP状态码(默认200)
    - :param request: 当前请求(用于读取中间件注入的 request_id)
    - :param request_id: 显式传入的 request_id(优先级高于 request)
    """
    rid = request_id or getattr(request, "request_id", None)
    return Response({
        "success": success,
        "code": code,
        "message": message,
        "data": dict(data or {}),
        "request_id": rid,
    }, status=http_status)
