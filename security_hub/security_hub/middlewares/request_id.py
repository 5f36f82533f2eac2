from __future__ import annotations
import re
import uuid # 生成全局唯一 request_id
from django.utils.deprecation import MiddlewareMixin # Django兼容式中间件基类

# 上游 request_id 仅接受安全字符, 防止日志注入
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9\-_.]{8,64}$")

class RequestIdMiddleware(MiddlewareMixin):
    """
    request_id 中间件
    - 上游网关传入合法 X-Request-Id 时沿用, 否则生成 uuid4.hex
    - 写入 request.request_id, 供日志与五段式响应体使用
    - 响应头回写 X-Request-Id
    """
    # Django 把请求头 X-Request-Id 映射为 META 的 HTTP_X_REQUEST_ID
    inbound_header_meta_key = "HTTP_X_REQUEST_ID"
    outbound_header_name = "X-Request-Id"

    def process_request(self, request):
        inbound = request.META.get(self.inbound_header_meta_key, "")
        request.request_id = inbound if _VALID_REQUEST_ID.match(inbound) else uuid.uuid4().hex

    def process_response(self, request, response):
        rid = getattr(request, "request_id", None)
        if rid:
            response[self.outbound_header_name] = rid
        return response
