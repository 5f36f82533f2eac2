from __future__ import annotations
import logging, json
from typing import Any, Dict
from pythonjsonlogger.jsonlogger import JsonFormatter # type: ignore

# LogRecord 自带字段(不属于 extra), 不应被追加输出
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno",
    "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info",
    "lineno", "funcName",
    "created", "msecs", "relativeCreated",
    "thread", "threadName",
    "processName", "process",
    "asctime", "message", "taskName",
})

# extra 中不允许原样落盘的字段(2FA 密钥、验证码、恢复码)
_MASKED_KEYS = frozenset({"secret", "totp_secret", "token", "one_time_password", "code", "codes"})

def _extract_extra(record: logging.LogRecord) -> Dict[str, Any]:
    """
    从 record.__dict__ 提取 extra 字段
    - 跳过保留字段、私有字段与空值
    - 敏感字段统一打码
    """
    extra: Dict[str, Any] = {}
    for k, v in record.__dict__.items():
        if k in _RESERVED_ATTRS or k.startswith("_") or v in (None, "", [], {}, ()):
            continue
        extra[k] = "***" if k in _MASKED_KEYS else v
    return extra

def _safe_text(v: Any, *, max_len: int = 500) -> str:
    """
    将 extra 值安全转为单行文本(用于 kv 文本日志)
    - 防止换行污染, bytes 解码, 长度截断
    """
    if isinstance(v, (bytes, bytearray)):
        s = v.decode("utf-8", errors="replace")
    else:
        s = str(v)

    s = s.replace("\r", " ").replace("\n", " ").replace("\t", " ")
    if len(s) > max_len:
        s = s[:max_len] + "...(truncated)"
    return s

def _safe_json_value(v: Any) -> Any:
    """不可 JSON 序列化的值转为字符串"""
    try:
        json.dumps(v, ensure_ascii=False)
        return v
    except (TypeError, ValueError):
        return str(v)


class ExtraKVFormatter(logging.Formatter):
    """
    文本日志格式化器
    - 在原始 message 后追加 extra 字段(key=value)
    """
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extra = _extract_extra(record)
        if not extra:
            return base

        extra_str = " ".join(f"{k}={_safe_text(extra[k])}" for k in sorted(extra))
        return f"{base} | {extra_str}"

class ExtraJSONFormatter(JsonFormatter):
    """
    JSON formatter: 显式把 extra 字段合并进 JSON, 保障 request_id / user_id 等可观测字段不丢失
    """
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        for k, v in _extract_extra(record).items():
            # 覆盖 JsonFormatter 已写入的原值(保证打码生效)
            log_record[k] = _safe_json_value(v)
